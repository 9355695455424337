"""Control plane health."""

from __future__ import annotations

from eks_upgrade_mcp.checks import as_finding
from eks_upgrade_mcp.checks.nodegroups import DEFAULT_ISSUE_CODE
from eks_upgrade_mcp.models import ClusterDescriptor, ClusterHealthIssue


def cluster_health(cluster: ClusterDescriptor) -> list[ClusterHealthIssue] | None:
    """Report health issues EKS has raised against the control plane."""
    return as_finding(
        [
            ClusterHealthIssue(
                code=issue.code or DEFAULT_ISSUE_CODE,
                message=issue.message or "",
                resource_ids=issue.resource_ids,
            )
            for issue in cluster.health_issues or []
        ]
    )
