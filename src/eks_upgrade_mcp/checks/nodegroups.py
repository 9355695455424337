"""Data plane compute checks: managed node group health, inventory, launch templates."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from eks_upgrade_mcp.checks import as_finding
from eks_upgrade_mcp.models import (
    ComputeConstruct,
    FargateProfile,
    LaunchTemplateUpdate,
    ManagedNodeGroup,
    NodegroupHealthIssue,
    SelfManagedGroup,
)

log = structlog.get_logger()

DEFAULT_ISSUE_CODE = "InternalFailure"

# Launch template versions that resolve at launch time rather than pinning one version.
FLOATING_TEMPLATE_VERSIONS = frozenset({"$Latest", "$Default"})


def eks_managed_node_group_health(node_groups: Sequence[ManagedNodeGroup]) -> list[NodegroupHealthIssue] | None:
    """Report every health issue on EKS managed node groups, one record per issue.

    An issue without a code is reported as ``InternalFailure``; one without a
    message gets an empty message.
    """
    issues: list[NodegroupHealthIssue] = []
    for group in node_groups:
        for issue in group.health_issues or []:
            issues.append(
                NodegroupHealthIssue(
                    name=group.name,
                    code=issue.code or DEFAULT_ISSUE_CODE,
                    message=issue.message or "",
                )
            )

    if issues:
        log.info("nodegroup_health_issues_found", count=len(issues))
    return as_finding(issues)


def self_managed_node_group_updates(groups: Sequence[SelfManagedGroup]) -> list[LaunchTemplateUpdate] | None:
    """Report self-managed groups whose launch template version floats.

    Instances in these groups keep running the template version they were
    launched with until an instance refresh replaces them.
    """
    updates: list[LaunchTemplateUpdate] = []
    for group in groups:
        template = group.launch_template
        if template is None or template.version not in FLOATING_TEMPLATE_VERSIONS:
            continue
        updates.append(
            LaunchTemplateUpdate(
                name=group.name,
                launch_template_id=template.id,
                launch_template_name=template.name,
                version=template.version,
            )
        )
    return as_finding(updates)


def compute_names(
    compute: Sequence[ComputeConstruct],
) -> tuple[list[str] | None, list[str] | None, list[str] | None]:
    """Split compute construct names by type.

    Returns:
        EKS managed node group, self-managed node group, and Fargate profile
        names, each in input order or None when that type is unused.
    """
    managed = [c.name for c in compute if isinstance(c, ManagedNodeGroup)]
    self_managed = [c.name for c in compute if isinstance(c, SelfManagedGroup)]
    fargate = [c.name for c in compute if isinstance(c, FargateProfile)]
    return as_finding(managed), as_finding(self_managed), as_finding(fargate)
