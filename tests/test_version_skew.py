"""Tests for the version skew check."""

from __future__ import annotations

import pytest

from eks_upgrade_mcp.checks.version_skew import version_skew
from eks_upgrade_mcp.errors import MalformedVersionError
from eks_upgrade_mcp.models import OrchestratorNode


def _make_node(name: str = "ip-10-0-1-15.ec2.internal", kubelet_version: str = "v1.24.7-eks-fb459a0") -> OrchestratorNode:
    return OrchestratorNode(
        name=name,
        kubelet_version=kubelet_version,
        container_runtime_version="containerd://1.6.6",
        kernel_version="5.4.217-126.408.amzn2.x86_64",
        kube_proxy_version=kubelet_version,
    )


class TestVersionSkew:
    def test_all_nodes_match_returns_none(self) -> None:
        nodes = [_make_node("node-a"), _make_node("node-b", "v1.24.13-eks-0a21954")]
        assert version_skew("1.24", nodes) is None

    def test_no_nodes_returns_none(self) -> None:
        assert version_skew("1.24", []) is None

    def test_reports_only_mismatched_nodes_in_order(self) -> None:
        nodes = [
            _make_node("node-c", "v1.23.9-eks-ba74326"),
            _make_node("node-a", "v1.24.7-eks-fb459a0"),
            _make_node("node-b", "v1.22.15-eks-fb459a0"),
        ]
        skewed = version_skew("1.24", nodes)

        assert skewed is not None
        assert [n.name for n in skewed] == ["node-c", "node-b"]

    def test_node_detail_fields(self) -> None:
        skewed = version_skew("1.24", [_make_node("node-a", "v1.23.9-eks-ba74326")])

        assert skewed is not None
        detail = skewed[0]
        assert detail.kubelet_version == "v1.23.9-eks-ba74326"
        assert detail.kubernetes_version == "1.23"
        assert detail.control_plane_version == "1.24"
        assert detail.container_runtime == "containerd://1.6.6"
        assert detail.kernel_version == "5.4.217-126.408.amzn2.x86_64"
        assert detail.kube_proxy_version == "v1.23.9-eks-ba74326"

    def test_node_ahead_of_control_plane_is_skewed(self) -> None:
        skewed = version_skew("1.24", [_make_node("node-a", "v1.25.1")])
        assert skewed is not None

    @pytest.mark.parametrize("cp_minor,node_minor", [(24, 24), (24, 23), (25, 24), (28, 28), (28, 26)])
    def test_none_iff_minor_versions_equal(self, cp_minor: int, node_minor: int) -> None:
        result = version_skew(f"1.{cp_minor}", [_make_node(kubelet_version=f"v1.{node_minor}.3-eks-abc")])
        assert (result is None) == (cp_minor == node_minor)

    def test_malformed_node_version_raises(self) -> None:
        with pytest.raises(MalformedVersionError):
            version_skew("1.24", [_make_node(kubelet_version="unknown")])

    def test_malformed_control_plane_version_raises(self) -> None:
        with pytest.raises(MalformedVersionError):
            version_skew("latest", [_make_node()])
