"""Version skew between the control plane and node kubelets."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from eks_upgrade_mcp.checks import as_finding
from eks_upgrade_mcp.models import NodeDetail, OrchestratorNode
from eks_upgrade_mcp.version import normalize_version, parse_minor_version

log = structlog.get_logger()


def version_skew(control_plane_version: str, nodes: Sequence[OrchestratorNode]) -> list[NodeDetail] | None:
    """Report nodes whose kubelet minor version differs from the control plane.

    Nodes must be at the control plane's minor version before the control plane
    can move up one more, so every mismatch is surfaced for remediation.

    Args:
        control_plane_version: Cluster version as reported by EKS, e.g. ``1.24``.
        nodes: Nodes in the order returned by the Kubernetes API.

    Returns:
        Mismatched nodes in input order, or None when every node matches.

    Raises:
        MalformedVersionError: If a version string cannot be parsed.
    """
    control_plane_minor = parse_minor_version(control_plane_version)

    skewed: list[NodeDetail] = []
    for node in nodes:
        if parse_minor_version(node.kubelet_version) == control_plane_minor:
            continue
        skewed.append(
            NodeDetail(
                name=node.name,
                container_runtime=node.container_runtime_version,
                kernel_version=node.kernel_version,
                kube_proxy_version=node.kube_proxy_version,
                kubelet_version=node.kubelet_version,
                kubernetes_version=normalize_version(node.kubelet_version),
                control_plane_version=control_plane_version,
            )
        )

    if skewed:
        log.info("version_skew_detected", skewed_nodes=len(skewed), total_nodes=len(nodes))
    return as_finding(skewed)
