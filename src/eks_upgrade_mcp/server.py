"""MCP server entry point and tool registration."""

from __future__ import annotations

import sys
import time

import structlog
from mcp.server.fastmcp import FastMCP

from eks_upgrade_mcp.analysis import analyze_all, analyze_cluster_handler, get_upgrade_target_handler
from eks_upgrade_mcp.config import load_cluster_map, validate_cluster_config
from eks_upgrade_mcp.models import AnalysisInput, AnalysisOutput, scrub_sensitive_values
from eks_upgrade_mcp.report import render_markdown
from eks_upgrade_mcp.validation import validate_output_format

# Configure structlog for JSON output to stderr; stdout carries the MCP stdio transport.
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

log = structlog.get_logger()

mcp = FastMCP("EKS Upgrade MCP Server")


def _render(output: AnalysisOutput, output_format: str) -> str:
    text = render_markdown(output) if output_format == "markdown" else output.model_dump_json(indent=2)
    return scrub_sensitive_values(text, redact_ips=False)


@mcp.tool()
async def analyze_upgrade_readiness(cluster: str, output_format: str = "json") -> str:
    """Analyze whether an EKS cluster is ready to upgrade to the next Kubernetes minor version.

    Returns findings grouped by subsystem: control plane health and subnet IPs,
    node version skew against the control plane, managed node group health,
    self-managed launch template drift, data plane subnet IPs, add-on health,
    and add-on versions compatible with the current and target Kubernetes versions.
    An absent finding means no issue was found. Use this before planning an upgrade.

    Args:
        cluster: Cluster ID (e.g., 'prod-use1') or 'all' for fleet-wide analysis.
        output_format: 'json' for structured findings or 'markdown' for a readable report.
    """
    start = time.monotonic()
    try:
        validate_output_format(output_format)
        params = AnalysisInput(cluster=cluster, output_format=output_format)
        if params.cluster == "all":
            results = await analyze_all()
            output = "\n\n".join(
                _render(r, params.output_format)
                if isinstance(r, AnalysisOutput)
                else scrub_sensitive_values(r.model_dump_json(indent=2))
                for r in results
            )
        else:
            result = await analyze_cluster_handler(params.cluster)
            output = _render(result, params.output_format)
        log.info("tool_completed", tool="analyze_upgrade_readiness", cluster=cluster, latency_ms=_elapsed_ms(start))
        return output
    except Exception as e:
        sanitised = scrub_sensitive_values(str(e))
        log.error("tool_failed", tool="analyze_upgrade_readiness", cluster=cluster, error=sanitised)
        raise RuntimeError(sanitised) from None


@mcp.tool()
async def get_upgrade_target(cluster: str) -> str:
    """Get the current Kubernetes version of an EKS cluster and the version it would upgrade to.

    Makes a single DescribeCluster call. Use this for a quick version check
    before running the full readiness analysis.

    Args:
        cluster: Cluster ID (e.g., 'prod-use1').
    """
    start = time.monotonic()
    try:
        result = await get_upgrade_target_handler(cluster)
        output = scrub_sensitive_values(result.model_dump_json(indent=2))
        log.info("tool_completed", tool="get_upgrade_target", cluster=cluster, latency_ms=_elapsed_ms(start))
        return output
    except Exception as e:
        sanitised = scrub_sensitive_values(str(e))
        log.error("tool_failed", tool="get_upgrade_target", cluster=cluster, error=sanitised)
        raise RuntimeError(sanitised) from None


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def main() -> None:
    """Load and validate cluster configuration, then serve over stdio."""
    load_cluster_map()
    validate_cluster_config()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
