"""EC2 Auto Scaling API wrapper for self-managed node groups."""

from __future__ import annotations

from typing import Any

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from eks_upgrade_mcp.clients.aws_base import AwsServiceClient
from eks_upgrade_mcp.errors import CollectorError
from eks_upgrade_mcp.models import LaunchTemplateRef, SelfManagedGroup
from eks_upgrade_mcp.utils import require

log = structlog.get_logger()

# Tag EKS places on the Auto Scaling groups that back managed node groups.
EKS_NODEGROUP_TAG = "eks:nodegroup-name"


def _launch_template(group: dict[str, Any]) -> LaunchTemplateRef | None:
    template = group.get("LaunchTemplate")
    if template is None:
        # Groups using a mixed instances policy nest the template one level down.
        policy = group.get("MixedInstancesPolicy") or {}
        template = (policy.get("LaunchTemplate") or {}).get("LaunchTemplateSpecification")
    if not template:
        return None
    return LaunchTemplateRef(
        id=template.get("LaunchTemplateId"),
        name=template.get("LaunchTemplateName"),
        version=template.get("Version"),
    )


class AwsAutoscalingClient(AwsServiceClient):
    """Wrapper around the EC2 Auto Scaling API."""

    service_name = "autoscaling"

    def _fetch_cluster_groups(self) -> list[dict[str, Any]]:
        """Synchronous helper that pages through Auto Scaling groups tagged for the cluster."""
        paginator = self._get_client().get_paginator("describe_auto_scaling_groups")
        tag_key = f"kubernetes.io/cluster/{self._config.eks_cluster_name}"
        groups: list[dict[str, Any]] = []
        for page in paginator.paginate(Filters=[{"Name": "tag-key", "Values": [tag_key]}]):
            groups.extend(page.get("AutoScalingGroups", []))
        return groups

    async def get_self_managed_node_groups(self) -> list[SelfManagedGroup]:
        """List Auto Scaling groups that are self-managed nodes of the cluster.

        Groups carrying the ``eks:nodegroup-name`` tag belong to EKS managed node
        groups and are excluded.
        """
        try:
            groups = await self._call(self._fetch_cluster_groups)
        except (BotoCoreError, ClientError) as e:
            log.error("failed_to_get_self_managed_nodegroups", cluster=self._config.cluster_id)
            raise CollectorError("self_managed_nodegroups", str(e)) from e

        results: list[SelfManagedGroup] = []
        for group in groups:
            tag_keys = {tag.get("Key") for tag in group.get("Tags") or []}
            if EKS_NODEGROUP_TAG in tag_keys:
                continue
            name = require(group, "AutoScalingGroupName", "Auto Scaling group")
            results.append(
                SelfManagedGroup(
                    name=name,
                    vpc_zone_identifier=require(group, "VPCZoneIdentifier", f"Auto Scaling group {name}"),
                    launch_template=_launch_template(group),
                )
            )
        return results
