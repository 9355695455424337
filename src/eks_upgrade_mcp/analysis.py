"""Upgrade-readiness analysis: collect cluster state once, run every check, assemble findings."""

from __future__ import annotations

import asyncio
import time
from datetime import UTC, datetime

import structlog

from eks_upgrade_mcp.checks.addons import addon_health, addon_version_compatibility
from eks_upgrade_mcp.checks.cluster import cluster_health
from eks_upgrade_mcp.checks.nodegroups import (
    compute_names,
    eks_managed_node_group_health,
    self_managed_node_group_updates,
)
from eks_upgrade_mcp.checks.subnets import control_plane_ips, data_plane_ips
from eks_upgrade_mcp.checks.version_skew import version_skew
from eks_upgrade_mcp.clients.aws_autoscaling import AwsAutoscalingClient
from eks_upgrade_mcp.clients.aws_base import SharedSession
from eks_upgrade_mcp.clients.aws_eks import AwsEksClient
from eks_upgrade_mcp.clients.aws_network import AwsNetworkClient
from eks_upgrade_mcp.clients.k8s_core import K8sCoreClient
from eks_upgrade_mcp.config import (
    ALL_CLUSTER_IDS,
    AnalysisConfig,
    ClusterConfig,
    get_analysis_config,
    resolve_cluster,
)
from eks_upgrade_mcp.errors import CollectorError
from eks_upgrade_mcp.models import (
    AddonFindings,
    AnalysisOutput,
    AnalysisResults,
    ClusterFindings,
    ComputeConstruct,
    DataPlaneFindings,
    SubnetFindings,
    ToolError,
    UpgradeTargetOutput,
)
from eks_upgrade_mcp.utils import gather_or_cancel
from eks_upgrade_mcp.version import get_target_version, is_at_or_beyond, normalize_version

log = structlog.get_logger()


def _summarize(cluster_name: str, current: str, target: str, results: AnalysisResults) -> str:
    """One-line summary counting the sections that have findings."""
    flagged = {
        "cluster health": results.cluster.cluster_health,
        "version skew": results.data_plane.version_skew,
        "node group health": results.data_plane.eks_managed_nodegroup_health,
        "launch template drift": results.data_plane.self_managed_nodegroup_update,
        "add-on health": results.addons.addon_health,
    }
    issues = [f"{len(items)} {label}" for label, items in flagged.items() if items]
    summary = f"{cluster_name} {current} -> {target}: "
    summary += ", ".join(issues) if issues else "no blocking findings"
    return summary


async def analyze_cluster(config: ClusterConfig, analysis_config: AnalysisConfig | None = None) -> AnalysisOutput:
    """Run every upgrade-readiness check against one cluster.

    Collectors are called once per resource category and concurrently. All
    outbound calls share one request limiter, and the AWS clients share one
    session. The first collector failure cancels outstanding work and
    propagates; no partial results are assembled.

    Raises:
        CollectorError: If any AWS or Kubernetes call fails.
        MalformedVersionError: If the cluster or a node reports an unparseable version.
        MissingRequiredFieldError: If a collected object lacks a guaranteed field.
    """
    analysis_config = analysis_config or get_analysis_config()
    limiter = asyncio.Semaphore(analysis_config.max_concurrent_requests)
    session = SharedSession(config)
    eks = AwsEksClient(config, limiter, session)
    network = AwsNetworkClient(config, limiter, session)
    autoscaling = AwsAutoscalingClient(config, limiter, session)
    core = K8sCoreClient(config, limiter)

    cluster = await eks.get_cluster()
    target_version = get_target_version(cluster.version)
    log.info("analysis_started", cluster=config.cluster_id, current=cluster.version, target=target_version)

    nodes, managed, self_managed, fargate, addons = await gather_or_cancel(
        core.get_nodes(),
        eks.get_eks_managed_node_groups(),
        autoscaling.get_self_managed_node_groups(),
        eks.get_fargate_profiles(),
        eks.get_addons(),
    )
    compute: list[ComputeConstruct] = [*managed, *self_managed, *fargate]

    cp_subnets, dp_subnets, addon_versions = await gather_or_cancel(
        control_plane_ips(cluster, network),
        data_plane_ips(compute, network),
        addon_version_compatibility(addons, cluster.version, target_version, eks),
    )

    managed_names, self_managed_names, fargate_names = compute_names(compute)
    results = AnalysisResults(
        cluster=ClusterFindings(cluster_health=cluster_health(cluster)),
        data_plane=DataPlaneFindings(
            version_skew=version_skew(cluster.version, nodes),
            eks_managed_nodegroup_health=eks_managed_node_group_health(managed),
            eks_managed_nodegroups=managed_names,
            self_managed_nodegroups=self_managed_names,
            self_managed_nodegroup_update=self_managed_node_group_updates(self_managed),
            fargate_profiles=fargate_names,
        ),
        subnets=SubnetFindings(control_plane_ips=cp_subnets, data_plane_ips=dp_subnets),
        addons=AddonFindings(addon_health=addon_health(addons), version_compatibility=addon_versions),
    )

    current_version = normalize_version(cluster.version)
    return AnalysisOutput(
        cluster=config.cluster_id,
        cluster_name=cluster.name,
        current_version=current_version,
        target_version=target_version,
        at_latest_version=is_at_or_beyond(current_version, analysis_config.latest_version),
        results=results,
        summary=_summarize(cluster.name, current_version, target_version, results),
        timestamp=datetime.now(tz=UTC).isoformat(),
    )


async def analyze_cluster_handler(cluster_id: str) -> AnalysisOutput:
    """Core handler for analyze_upgrade_readiness on a single cluster."""
    config = resolve_cluster(cluster_id)
    start = time.monotonic()
    output = await analyze_cluster(config)
    log.info("analysis_completed", cluster=cluster_id, latency_ms=int((time.monotonic() - start) * 1000))
    return output


async def analyze_all() -> list[AnalysisOutput | ToolError]:
    """Fan-out analyze_upgrade_readiness to all clusters concurrently.

    Each cluster is an independent run: a cluster whose analysis aborts is
    reported as a ToolError and does not affect the others.
    """
    tasks = [analyze_cluster_handler(cid) for cid in ALL_CLUSTER_IDS]
    results = await asyncio.gather(*tasks, return_exceptions=True)
    outputs: list[AnalysisOutput | ToolError] = []
    for cid, result in zip(ALL_CLUSTER_IDS, results, strict=True):
        if isinstance(result, Exception):
            log.error("fan_out_cluster_failed", tool="analyze_upgrade_readiness", cluster=cid, error=str(result))
            source = result.category if isinstance(result, CollectorError) else "analysis"
            outputs.append(ToolError(error=f"Analysis aborted: {result}", source=source, cluster=cid))
        elif isinstance(result, BaseException):
            raise result
        else:
            outputs.append(result)
    return outputs


async def get_upgrade_target_handler(cluster_id: str) -> UpgradeTargetOutput:
    """Core handler for get_upgrade_target: current and next minor version of one cluster."""
    config = resolve_cluster(cluster_id)
    analysis_config = get_analysis_config()
    cluster = await AwsEksClient(config).get_cluster()
    current_version = normalize_version(cluster.version)
    return UpgradeTargetOutput(
        cluster=cluster_id,
        cluster_name=cluster.name,
        current_version=current_version,
        target_version=get_target_version(cluster.version),
        at_latest_version=is_at_or_beyond(current_version, analysis_config.latest_version),
        timestamp=datetime.now(tz=UTC).isoformat(),
    )
