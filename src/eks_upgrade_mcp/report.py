"""Render analysis output as Markdown tables for human review."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel

from eks_upgrade_mcp.models import AddonStatus, AnalysisOutput, Subnet

NO_FINDINGS = "No issues found"


def _cell(value: object) -> str:
    if value is None:
        return "-"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value) or "-"
    return str(value).replace("|", "\\|").replace("\n", " ")


def to_markdown_table(rows: Sequence[BaseModel] | None, indent: str = "") -> str:
    """Render a list of findings as a Markdown table, one column per model field.

    An absent finding renders as a single "No issues found" line.
    """
    if not rows:
        return f"{indent}{NO_FINDINGS}"

    columns = list(type(rows[0]).model_fields)
    lines = [
        f"{indent}| " + " | ".join(columns) + " |",
        f"{indent}|" + "|".join(" --- " for _ in columns) + "|",
    ]
    for row in rows:
        lines.append(f"{indent}| " + " | ".join(_cell(getattr(row, c)) for c in columns) + " |")
    return "\n".join(lines)


def _subnet_table(subnets: list[Subnet] | None) -> str:
    if not subnets:
        return NO_FINDINGS
    lines = ["| Subnet | AZ | AZ ID | Available IPs | CIDR |", "| --- | --- | --- | --- | --- |"]
    for s in subnets:
        lines.append(f"| {s.id} | {s.availability_zone} | {s.availability_zone_id} | {s.available_ips} | {s.cidr_block} |")
    return "\n".join(lines)


def _addon_table(statuses: list[AddonStatus] | None) -> str:
    if not statuses:
        return NO_FINDINGS
    lines = [
        "| Add-on | Installed | Current default | Current latest | Target default | Target latest | Issues |",
        "| --- | --- | --- | --- | --- | --- | --- |",
    ]
    for s in statuses:
        current, target = s.current_kubernetes_version, s.target_kubernetes_version
        issues = len(s.issues) if s.issues else 0
        lines.append(
            f"| {s.name} | {s.version} | {_cell(current.default)} | {_cell(current.latest)} "
            f"| {_cell(target.default)} | {_cell(target.latest)} | {issues} |"
        )
    return "\n".join(lines)


def _names(names: list[str] | None) -> str:
    if not names:
        return "None configured"
    return "\n".join(f"- {n}" for n in names)


def render_markdown(output: AnalysisOutput) -> str:
    """Render a full analysis as a Markdown document."""
    results = output.results
    data_plane = results.data_plane
    sections = [
        f"# {output.cluster_name}: upgrade readiness {output.current_version} -> {output.target_version}",
        output.summary,
        "## Control plane\n\n### Cluster health\n\n" + to_markdown_table(results.cluster.cluster_health),
        "### Control plane subnet IPs\n\n" + _subnet_table(results.subnets.control_plane_ips),
        "## Data plane\n\n### Version skew\n\n" + to_markdown_table(data_plane.version_skew),
        "### Data plane subnet IPs\n\n" + _subnet_table(results.subnets.data_plane_ips),
        "### EKS managed node groups\n\n"
        + _names(data_plane.eks_managed_nodegroups)
        + "\n\n"
        + to_markdown_table(data_plane.eks_managed_nodegroup_health),
        "### Self-managed node groups\n\n"
        + _names(data_plane.self_managed_nodegroups)
        + "\n\n"
        + to_markdown_table(data_plane.self_managed_nodegroup_update),
        "### Fargate profiles\n\n" + _names(data_plane.fargate_profiles),
        "## Add-ons\n\n### Add-on health\n\n" + to_markdown_table(results.addons.addon_health),
        "### Add-on version compatibility\n\n" + _addon_table(results.addons.version_compatibility),
    ]
    if output.at_latest_version:
        sections.insert(1, f"> {output.current_version} is the latest version this tool knows about.")
    return "\n\n".join(sections) + "\n"
