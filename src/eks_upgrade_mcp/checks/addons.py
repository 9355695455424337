"""Add-on health and version compatibility with the target Kubernetes version."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import structlog

from eks_upgrade_mcp.checks import as_finding
from eks_upgrade_mcp.checks.nodegroups import DEFAULT_ISSUE_CODE
from eks_upgrade_mcp.models import AddonDescriptor, AddonHealthIssue, AddonStatus, AddonVersion
from eks_upgrade_mcp.utils import gather_or_cancel

log = structlog.get_logger()


class AddonVersionLookup(Protocol):
    async def get_addon_versions(self, addon_name: str, kubernetes_version: str) -> AddonVersion: ...


def addon_health(addons: Sequence[AddonDescriptor]) -> list[AddonHealthIssue] | None:
    """Report every health issue on installed add-ons, one record per issue."""
    issues: list[AddonHealthIssue] = []
    for addon in addons:
        for issue in addon.health_issues or []:
            issues.append(
                AddonHealthIssue(
                    name=addon.name,
                    code=issue.code or DEFAULT_ISSUE_CODE,
                    message=issue.message or "",
                )
            )
    return as_finding(issues)


async def _addon_status(
    lookup: AddonVersionLookup,
    addon: AddonDescriptor,
    cluster_version: str,
    target_version: str,
) -> AddonStatus:
    current, target = await gather_or_cancel(
        lookup.get_addon_versions(addon.name, cluster_version),
        lookup.get_addon_versions(addon.name, target_version),
    )
    return AddonStatus(
        name=addon.name,
        version=addon.version,
        current_kubernetes_version=current,
        target_kubernetes_version=target,
        issues=addon.health_issues or None,
    )


async def addon_version_compatibility(
    addons: Sequence[AddonDescriptor],
    cluster_version: str,
    target_version: str,
    lookup: AddonVersionLookup,
) -> list[AddonStatus] | None:
    """Compare each installed add-on with the versions EKS publishes for both Kubernetes versions.

    Two lookups are made per add-on, one for the current and one for the target
    version, all issued concurrently. No verdict is computed; the installed version
    is surfaced next to both version sets for the operator to judge. Every
    installed add-on is reported, so the result is None only when none are installed.

    Args:
        addons: Installed add-ons.
        cluster_version: Current cluster version, e.g. ``1.24``.
        target_version: Version the cluster would upgrade to, e.g. ``1.25``.
        lookup: Collector resolving add-on versions for a Kubernetes version.
    """
    statuses = await gather_or_cancel(
        *(_addon_status(lookup, addon, cluster_version, target_version) for addon in addons)
    )
    log.debug("addon_versions_compared", count=len(statuses), target_version=target_version)
    return as_finding(list(statuses))
