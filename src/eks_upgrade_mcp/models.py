"""Pydantic v2 models for collected cluster state, findings, and tool output."""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Shared error model ---


class ToolError(BaseModel):
    """Structured error for a cluster whose analysis was aborted."""

    error: str
    source: str
    cluster: str


# --- Output scrubbing ---

_IP_PATTERN = re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b")
_ARN_ACCOUNT_PATTERN = re.compile(r"(arn:aws[\w-]*:[\w-]+:[\w-]*:)\d{12}(?=:)")
_ACCOUNT_ID_PATTERN = re.compile(r"\b\d{12}\b")
_EKS_ENDPOINT_PATTERN = re.compile(r"\b[\w.-]+\.eks\.amazonaws\.com(\.cn)?\b", re.IGNORECASE)


def scrub_sensitive_values(text: str, *, redact_ips: bool = True) -> str:
    """Remove AWS account IDs, EKS API endpoints and (optionally) IP addresses from text.

    Subnet CIDR blocks are part of the capacity report, so rendered findings are
    scrubbed with ``redact_ips=False``. Error messages keep the default.
    """
    if not text:
        return text
    result = _ARN_ACCOUNT_PATTERN.sub(r"\1[REDACTED_ACCOUNT]", text)
    result = _ACCOUNT_ID_PATTERN.sub("[REDACTED_ACCOUNT]", result)
    result = _EKS_ENDPOINT_PATTERN.sub("[REDACTED_ENDPOINT]", result)
    if redact_ips:
        result = _IP_PATTERN.sub("[REDACTED_IP]", result)
    return result


# --- Collected state ---


class _Snapshot(BaseModel):
    """Read-only snapshot of a resource as returned by a collector."""

    model_config = ConfigDict(frozen=True)


class HealthIssue(_Snapshot):
    """A health issue as reported by EKS for a cluster, node group, or add-on."""

    code: str | None = None
    message: str | None = None
    resource_ids: list[str] = Field(default_factory=list)


class ClusterDescriptor(_Snapshot):
    """The EKS cluster being analyzed."""

    name: str
    version: str
    subnet_ids: list[str] = Field(default_factory=list)
    health_issues: list[HealthIssue] | None = None


class LaunchTemplateRef(_Snapshot):
    """Launch template reference attached to an autoscaling group or node group."""

    id: str | None = None
    name: str | None = None
    version: str | None = None


class ManagedNodeGroup(_Snapshot):
    """EKS managed node group."""

    kind: Literal["eks_managed"] = "eks_managed"
    name: str
    subnet_ids: list[str] = Field(default_factory=list)
    health_issues: list[HealthIssue] | None = None
    launch_template: LaunchTemplateRef | None = None


class SelfManagedGroup(_Snapshot):
    """Self-managed node group backed by an EC2 Auto Scaling group."""

    kind: Literal["self_managed"] = "self_managed"
    name: str
    # Auto Scaling stores subnets as a comma-delimited string.
    vpc_zone_identifier: str = ""
    launch_template: LaunchTemplateRef | None = None

    @property
    def subnet_ids(self) -> list[str]:
        return [s.strip() for s in self.vpc_zone_identifier.split(",") if s.strip()]


class FargateProfile(_Snapshot):
    """EKS Fargate profile."""

    kind: Literal["fargate"] = "fargate"
    name: str
    subnet_ids: list[str] = Field(default_factory=list)


ComputeConstruct = Annotated[
    ManagedNodeGroup | SelfManagedGroup | FargateProfile,
    Field(discriminator="kind"),
]


class OrchestratorNode(_Snapshot):
    """A Kubernetes node and the versions of its node agents."""

    name: str
    kubelet_version: str
    container_runtime_version: str
    kernel_version: str
    kube_proxy_version: str


class Subnet(_Snapshot):
    """Subnet capacity data relevant to a cluster upgrade."""

    id: str
    availability_zone: str
    availability_zone_id: str
    available_ips: int
    cidr_block: str


class AddonDescriptor(_Snapshot):
    """An add-on installed on the cluster."""

    name: str
    version: str
    health_issues: list[HealthIssue] | None = None


class AddonVersion(_Snapshot):
    """Latest and default add-on versions for one Kubernetes version.

    Both are None when EKS publishes no version of the add-on for that
    Kubernetes version.
    """

    latest: str | None = None
    default: str | None = None


# --- Findings ---


class NodeDetail(BaseModel):
    """A node whose kubelet minor version differs from the control plane."""

    name: str
    container_runtime: str
    kernel_version: str
    kube_proxy_version: str
    kubelet_version: str
    kubernetes_version: str
    control_plane_version: str


class NodegroupHealthIssue(BaseModel):
    """A health issue reported on an EKS managed node group."""

    name: str
    code: str
    message: str


class ClusterHealthIssue(BaseModel):
    """A health issue reported on the EKS control plane."""

    code: str
    message: str
    resource_ids: list[str] = Field(default_factory=list)


class AddonHealthIssue(BaseModel):
    """A health issue reported on an installed add-on."""

    name: str
    code: str
    message: str


class AddonStatus(BaseModel):
    """Installed add-on version alongside versions compatible with current and target Kubernetes."""

    name: str
    version: str
    current_kubernetes_version: AddonVersion
    target_kubernetes_version: AddonVersion
    issues: list[HealthIssue] | None = None


class LaunchTemplateUpdate(BaseModel):
    """A self-managed group following a floating launch template version."""

    name: str
    launch_template_id: str | None = None
    launch_template_name: str | None = None
    version: str


class _Findings(BaseModel):
    """Findings container; an empty list is stored as None so absence always means healthy."""

    @field_validator("*", mode="after")
    @classmethod
    def _collapse_empty(cls, value: Any) -> Any:
        if isinstance(value, list) and not value:
            return None
        return value


class ClusterFindings(_Findings):
    cluster_health: list[ClusterHealthIssue] | None = None


class DataPlaneFindings(_Findings):
    version_skew: list[NodeDetail] | None = None
    eks_managed_nodegroup_health: list[NodegroupHealthIssue] | None = None
    eks_managed_nodegroups: list[str] | None = None
    self_managed_nodegroups: list[str] | None = None
    self_managed_nodegroup_update: list[LaunchTemplateUpdate] | None = None
    fargate_profiles: list[str] | None = None


class SubnetFindings(_Findings):
    control_plane_ips: list[Subnet] | None = None
    data_plane_ips: list[Subnet] | None = None


class AddonFindings(_Findings):
    addon_health: list[AddonHealthIssue] | None = None
    version_compatibility: list[AddonStatus] | None = None


class AnalysisResults(BaseModel):
    """All findings from one analysis run, grouped by subsystem."""

    cluster: ClusterFindings = Field(default_factory=ClusterFindings)
    data_plane: DataPlaneFindings = Field(default_factory=DataPlaneFindings)
    subnets: SubnetFindings = Field(default_factory=SubnetFindings)
    addons: AddonFindings = Field(default_factory=AddonFindings)


# --- Tool output ---


class AnalysisInput(BaseModel):
    """Input parameters for analyze_upgrade_readiness."""

    cluster: str
    output_format: Literal["json", "markdown"] = "json"


class UpgradeTargetOutput(BaseModel):
    """Output for get_upgrade_target."""

    cluster: str
    cluster_name: str
    current_version: str
    target_version: str
    at_latest_version: bool
    timestamp: str


class AnalysisOutput(BaseModel):
    """Output for analyze_upgrade_readiness on a single cluster."""

    cluster: str
    cluster_name: str
    current_version: str
    target_version: str
    at_latest_version: bool = False
    results: AnalysisResults
    summary: str
    timestamp: str
