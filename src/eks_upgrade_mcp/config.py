"""Cluster configuration, analysis settings, and environment variable overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from eks_upgrade_mcp.validation import validate_cluster_name, validate_region


@dataclass(frozen=True)
class ClusterConfig:
    """Configuration for a single EKS cluster."""

    cluster_id: str
    environment: str
    region: str
    eks_cluster_name: str
    kubeconfig_context: str
    aws_profile: str | None = None


@dataclass(frozen=True)
class AnalysisConfig:
    """Analysis settings with environment variable overrides."""

    max_concurrent_requests: int = field(
        default_factory=lambda: int(os.environ.get("EKSUP_MAX_CONCURRENT_REQUESTS", "8"))
    )
    latest_version: str = field(default_factory=lambda: os.environ.get("EKSUP_LATEST_VERSION", "1.34"))


_REQUIRED_FIELDS = (
    "environment",
    "region",
    "eks_cluster_name",
    "kubeconfig_context",
)


def _load_cluster_map(path: Path) -> dict[str, ClusterConfig]:
    """Parse a YAML cluster configuration file and return a mapping of cluster ID to ClusterConfig.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A dict mapping cluster IDs to ClusterConfig objects.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If the file content is malformed or missing required fields.
    """
    if not path.exists():
        msg = (
            f"Cluster configuration file not found: {path}. "
            "Copy clusters.example.yaml to clusters.yaml and fill in your cluster names, "
            "or set EKSUP_CLUSTERS to point to your config file."
        )
        raise FileNotFoundError(msg)

    raw = yaml.safe_load(path.read_text())

    if not isinstance(raw, dict) or "clusters" not in raw:
        msg = f"Cluster config file {path} must contain a top-level 'clusters' key."
        raise ValueError(msg)

    clusters_raw: Any = raw["clusters"]
    if not isinstance(clusters_raw, dict) or len(clusters_raw) == 0:
        msg = f"Cluster config file {path} has an empty or invalid 'clusters' section."
        raise ValueError(msg)

    cluster_map: dict[str, ClusterConfig] = {}
    for cluster_id, entry in clusters_raw.items():
        if not isinstance(entry, dict):
            msg = f"Cluster '{cluster_id}' must be a mapping, got {type(entry).__name__}."
            raise ValueError(msg)

        missing = [f for f in _REQUIRED_FIELDS if f not in entry]
        if missing:
            msg = f"Cluster '{cluster_id}' is missing required fields: {', '.join(missing)}."
            raise ValueError(msg)

        profile = entry.get("aws_profile")
        cluster_map[cluster_id] = ClusterConfig(
            cluster_id=cluster_id,
            environment=str(entry["environment"]),
            region=str(entry["region"]),
            eks_cluster_name=str(entry["eks_cluster_name"]),
            kubeconfig_context=str(entry["kubeconfig_context"]),
            aws_profile=str(profile) if profile else None,
        )

    return cluster_map


CLUSTER_MAP: dict[str, ClusterConfig] = {}
ALL_CLUSTER_IDS: list[str] = []


def load_cluster_map() -> dict[str, ClusterConfig]:
    """Load cluster configuration from YAML and populate module-level globals.

    Reads the file path from the ``EKSUP_CLUSTERS`` environment variable,
    defaulting to ``clusters.yaml`` in the current working directory.

    Returns:
        The loaded cluster map.
    """
    path = Path(os.environ.get("EKSUP_CLUSTERS", "clusters.yaml"))
    loaded = _load_cluster_map(path)
    CLUSTER_MAP.clear()
    CLUSTER_MAP.update(loaded)
    ALL_CLUSTER_IDS.clear()
    ALL_CLUSTER_IDS.extend(loaded.keys())
    return CLUSTER_MAP


def resolve_cluster(cluster_id: str) -> ClusterConfig:
    """Resolve a cluster ID to its full configuration.

    Raises:
        ValueError: If the cluster_id is not found in CLUSTER_MAP.
    """
    if cluster_id not in CLUSTER_MAP:
        valid = ", ".join(sorted(CLUSTER_MAP.keys()))
        msg = f"Unknown cluster '{cluster_id}'. Valid clusters: {valid}"
        raise ValueError(msg)
    return CLUSTER_MAP[cluster_id]


def _is_placeholder(value: str) -> bool:
    return value.startswith("<") and value.endswith(">")


def validate_cluster_config() -> None:
    """Validate all cluster configurations at startup.

    Raises RuntimeError if placeholder values, invalid regions or cluster names,
    or empty kubeconfig contexts are detected.
    """
    errors: list[str] = []
    for cluster_id, config in CLUSTER_MAP.items():
        if _is_placeholder(config.eks_cluster_name):
            errors.append(f"{cluster_id}: placeholder eks_cluster_name detected")
        else:
            try:
                validate_cluster_name(config.eks_cluster_name)
            except ValueError as e:
                errors.append(f"{cluster_id}: {e}")

        try:
            validate_region(config.region)
        except ValueError as e:
            errors.append(f"{cluster_id}: {e}")

        if not config.kubeconfig_context or _is_placeholder(config.kubeconfig_context):
            errors.append(f"{cluster_id}: kubeconfig_context is empty or a placeholder")

    if errors:
        detail = "; ".join(errors)
        msg = f"Cluster configuration errors: {detail}. Fix before running in production."
        raise RuntimeError(msg)


def get_analysis_config() -> AnalysisConfig:
    """Return analysis settings with environment variable overrides applied."""
    return AnalysisConfig()
