"""Integration tests for server.py tool wrappers: single cluster, fan-out, rendering, scrubbing."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from eks_upgrade_mcp.errors import CollectorError
from eks_upgrade_mcp.models import (
    AnalysisOutput,
    AnalysisResults,
    Subnet,
    SubnetFindings,
    ToolError,
    UpgradeTargetOutput,
)
from eks_upgrade_mcp.server import analyze_upgrade_readiness, get_upgrade_target


def _analysis_output(cluster: str = "prod-use1") -> AnalysisOutput:
    return AnalysisOutput(
        cluster=cluster,
        cluster_name=f"{cluster}-eks",
        current_version="1.24",
        target_version="1.25",
        results=AnalysisResults(
            subnets=SubnetFindings(
                control_plane_ips=[
                    Subnet(
                        id="subnet-0a1b2c",
                        availability_zone="us-east-1a",
                        availability_zone_id="use1-az1",
                        available_ips=4091,
                        cidr_block="10.0.0.0/20",
                    )
                ]
            )
        ),
        summary=f"{cluster}-eks 1.24 -> 1.25: no blocking findings",
        timestamp="2026-02-28T12:00:00+00:00",
    )


def _upgrade_target_output(cluster: str = "prod-use1") -> UpgradeTargetOutput:
    return UpgradeTargetOutput(
        cluster=cluster,
        cluster_name="prod-cluster",
        current_version="1.29",
        target_version="1.30",
        at_latest_version=False,
        timestamp="2026-02-28T12:00:00+00:00",
    )


class TestAnalyzeUpgradeReadiness:
    async def test_single_cluster_json(self) -> None:
        with patch(
            "eks_upgrade_mcp.server.analyze_cluster_handler",
            new_callable=AsyncMock,
            return_value=_analysis_output(),
        ):
            result = await analyze_upgrade_readiness("prod-use1")
        data = json.loads(result)
        assert data["cluster"] == "prod-use1"
        assert data["target_version"] == "1.25"
        assert data["results"]["data_plane"]["version_skew"] is None
        # CIDR blocks are part of the capacity report and survive scrubbing.
        assert data["results"]["subnets"]["control_plane_ips"][0]["cidr_block"] == "10.0.0.0/20"

    async def test_single_cluster_markdown(self) -> None:
        with patch(
            "eks_upgrade_mcp.server.analyze_cluster_handler",
            new_callable=AsyncMock,
            return_value=_analysis_output(),
        ):
            result = await analyze_upgrade_readiness("prod-use1", output_format="markdown")
        assert result.startswith("# prod-use1-eks: upgrade readiness 1.24 -> 1.25")
        assert "| subnet-0a1b2c |" in result

    async def test_all_clusters(self) -> None:
        outputs = [
            _analysis_output("prod-use1"),
            ToolError(error="Analysis aborted: Failed to collect nodes: timeout", source="nodes", cluster="dev-usw2"),
        ]
        with patch("eks_upgrade_mcp.server.analyze_all", new_callable=AsyncMock, return_value=outputs):
            result = await analyze_upgrade_readiness("all")
        assert "prod-use1" in result
        assert "dev-usw2" in result
        assert "Analysis aborted" in result

    async def test_invalid_output_format(self) -> None:
        with (
            patch("eks_upgrade_mcp.server.analyze_cluster_handler", new_callable=AsyncMock) as handler,
            pytest.raises(RuntimeError, match="Invalid output_format"),
        ):
            await analyze_upgrade_readiness("prod-use1", output_format="html")
        handler.assert_not_awaited()

    async def test_error_propagates_scrubbed(self) -> None:
        error = CollectorError(
            "cluster",
            "AccessDeniedException: arn:aws:iam::123456789012:role/readonly is not authorized",
        )
        with (
            patch("eks_upgrade_mcp.server.analyze_cluster_handler", new_callable=AsyncMock, side_effect=error),
            pytest.raises(RuntimeError) as exc_info,
        ):
            await analyze_upgrade_readiness("prod-use1")
        message = str(exc_info.value)
        assert "Failed to collect cluster" in message
        assert "123456789012" not in message
        assert exc_info.value.__cause__ is None

    async def test_unknown_cluster(self) -> None:
        with pytest.raises(RuntimeError, match="Unknown cluster"):
            await analyze_upgrade_readiness("staging-euw1")


class TestGetUpgradeTarget:
    async def test_single_cluster(self) -> None:
        with patch(
            "eks_upgrade_mcp.server.get_upgrade_target_handler",
            new_callable=AsyncMock,
            return_value=_upgrade_target_output(),
        ):
            result = await get_upgrade_target("prod-use1")
        data = json.loads(result)
        assert data["current_version"] == "1.29"
        assert data["target_version"] == "1.30"

    async def test_error_propagates(self) -> None:
        with (
            patch(
                "eks_upgrade_mcp.server.get_upgrade_target_handler",
                new_callable=AsyncMock,
                side_effect=CollectorError("cluster", "endpoint 10.1.2.3 unreachable"),
            ),
            pytest.raises(RuntimeError) as exc_info,
        ):
            await get_upgrade_target("prod-use1")
        assert "10.1.2.3" not in str(exc_info.value)
        assert "[REDACTED_IP]" in str(exc_info.value)
