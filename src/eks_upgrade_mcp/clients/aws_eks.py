"""EKS API wrapper: cluster, managed node groups, Fargate profiles, add-ons."""

from __future__ import annotations

from typing import Any

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from eks_upgrade_mcp.clients.aws_base import AwsServiceClient
from eks_upgrade_mcp.errors import CollectorError
from eks_upgrade_mcp.models import (
    AddonDescriptor,
    AddonVersion,
    ClusterDescriptor,
    FargateProfile,
    HealthIssue,
    LaunchTemplateRef,
    ManagedNodeGroup,
)
from eks_upgrade_mcp.utils import gather_or_cancel, require

log = structlog.get_logger()


def _health_issues(raw: dict[str, Any] | None) -> list[HealthIssue] | None:
    """Convert an EKS ``health`` block to a list of issues, or None when there are none."""
    issues = (raw or {}).get("issues") or []
    if not issues:
        return None
    return [
        HealthIssue(
            code=issue.get("code"),
            message=issue.get("message"),
            resource_ids=issue.get("resourceIds") or [],
        )
        for issue in issues
    ]


class AwsEksClient(AwsServiceClient):
    """Wrapper around the Amazon EKS API for one cluster."""

    service_name = "eks"

    @property
    def _cluster_name(self) -> str:
        return self._config.eks_cluster_name

    async def get_cluster(self) -> ClusterDescriptor:
        """Describe the cluster: version, control plane subnets, and health."""
        try:
            client = await self._service_client()
            response = await self._call(client.describe_cluster, name=self._cluster_name)
        except (BotoCoreError, ClientError) as e:
            log.error("failed_to_describe_cluster", cluster=self._config.cluster_id)
            raise CollectorError("cluster", str(e)) from e

        cluster = require(response, "cluster", "EKS cluster response")
        vpc_config = require(cluster, "resourcesVpcConfig", f"EKS cluster {self._cluster_name}")
        return ClusterDescriptor(
            name=require(cluster, "name", "EKS cluster"),
            version=require(cluster, "version", f"EKS cluster {self._cluster_name}"),
            subnet_ids=require(vpc_config, "subnetIds", f"EKS cluster {self._cluster_name} VPC config"),
            health_issues=_health_issues(cluster.get("health")),
        )

    def _list_all(self, operation: str, result_key: str, **kwargs: Any) -> list[str]:
        """Synchronous helper that drains a list_* paginator."""
        paginator = self._get_client().get_paginator(operation)
        names: list[str] = []
        for page in paginator.paginate(**kwargs):
            names.extend(page.get(result_key, []))
        return names

    async def get_eks_managed_node_groups(self) -> list[ManagedNodeGroup]:
        """List and describe every EKS managed node group in the cluster."""
        try:
            client = await self._service_client()
            names = await self._call(self._list_all, "list_nodegroups", "nodegroups", clusterName=self._cluster_name)
            responses = await gather_or_cancel(
                *(self._call(client.describe_nodegroup, clusterName=self._cluster_name, nodegroupName=n) for n in names)
            )
        except (BotoCoreError, ClientError) as e:
            log.error("failed_to_get_nodegroups", cluster=self._config.cluster_id)
            raise CollectorError("nodegroups", str(e)) from e

        node_groups: list[ManagedNodeGroup] = []
        for response in responses:
            group = require(response, "nodegroup", "EKS nodegroup response")
            name = require(group, "nodegroupName", "EKS nodegroup")
            template = group.get("launchTemplate")
            node_groups.append(
                ManagedNodeGroup(
                    name=name,
                    subnet_ids=require(group, "subnets", f"EKS nodegroup {name}"),
                    health_issues=_health_issues(group.get("health")),
                    launch_template=(
                        LaunchTemplateRef(
                            id=template.get("id"),
                            name=template.get("name"),
                            version=template.get("version"),
                        )
                        if template
                        else None
                    ),
                )
            )
        return node_groups

    async def get_fargate_profiles(self) -> list[FargateProfile]:
        """List and describe every Fargate profile in the cluster."""
        try:
            client = await self._service_client()
            names = await self._call(
                self._list_all, "list_fargate_profiles", "fargateProfileNames", clusterName=self._cluster_name
            )
            responses = await gather_or_cancel(
                *(
                    self._call(client.describe_fargate_profile, clusterName=self._cluster_name, fargateProfileName=n)
                    for n in names
                )
            )
        except (BotoCoreError, ClientError) as e:
            log.error("failed_to_get_fargate_profiles", cluster=self._config.cluster_id)
            raise CollectorError("fargate_profiles", str(e)) from e

        profiles: list[FargateProfile] = []
        for response in responses:
            profile = require(response, "fargateProfile", "EKS Fargate profile response")
            name = require(profile, "fargateProfileName", "EKS Fargate profile")
            profiles.append(
                FargateProfile(
                    name=name,
                    subnet_ids=require(profile, "subnets", f"EKS Fargate profile {name}"),
                )
            )
        return profiles

    async def get_addons(self) -> list[AddonDescriptor]:
        """List and describe every add-on installed on the cluster."""
        try:
            client = await self._service_client()
            names = await self._call(self._list_all, "list_addons", "addons", clusterName=self._cluster_name)
            responses = await gather_or_cancel(
                *(self._call(client.describe_addon, clusterName=self._cluster_name, addonName=n) for n in names)
            )
        except (BotoCoreError, ClientError) as e:
            log.error("failed_to_get_addons", cluster=self._config.cluster_id)
            raise CollectorError("addons", str(e)) from e

        addons: list[AddonDescriptor] = []
        for response in responses:
            addon = require(response, "addon", "EKS add-on response")
            name = require(addon, "addonName", "EKS add-on")
            addons.append(
                AddonDescriptor(
                    name=name,
                    version=require(addon, "addonVersion", f"EKS add-on {name}"),
                    health_issues=_health_issues(addon.get("health")),
                )
            )
        return addons

    async def get_addon_versions(self, addon_name: str, kubernetes_version: str) -> AddonVersion:
        """Get the latest and default versions of an add-on for a Kubernetes version.

        Args:
            addon_name: Name of the add-on, e.g. ``vpc-cni``.
            kubernetes_version: Kubernetes minor version, e.g. ``1.25``.
        """
        try:
            client = await self._service_client()
            response = await self._call(
                client.describe_addon_versions,
                addonName=addon_name,
                kubernetesVersion=kubernetes_version,
            )
        except (BotoCoreError, ClientError) as e:
            log.error(
                "failed_to_get_addon_versions",
                cluster=self._config.cluster_id,
                addon=addon_name,
                kubernetes_version=kubernetes_version,
            )
            raise CollectorError("addon_versions", str(e)) from e

        versions: list[dict[str, Any]] = []
        for addon in response.get("addons", []):
            if addon.get("addonName") == addon_name:
                versions.extend(addon.get("addonVersions") or [])

        if not versions:
            log.warning("addon_versions_not_published", addon=addon_name, kubernetes_version=kubernetes_version)
            return AddonVersion()

        # EKS lists versions newest first.
        latest = versions[0].get("addonVersion")
        default = latest
        for version in versions:
            compatibilities = version.get("compatibilities") or []
            if any(c.get("defaultVersion") for c in compatibilities):
                default = version.get("addonVersion")
                break
        return AddonVersion(latest=latest, default=default)
