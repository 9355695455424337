"""Input validation helpers for configuration values and MCP tool parameters."""

from __future__ import annotations

import re

# EKS cluster name: 1-100 chars, alphanumeric start, then alphanumerics, hyphens, underscores
_CLUSTER_NAME_RE = re.compile(r"^[0-9A-Za-z][A-Za-z0-9\-_]{0,99}$")

# AWS region: us-east-1, eu-central-2, us-gov-west-1, cn-north-1, ...
_REGION_RE = re.compile(r"^[a-z]{2}(-gov|-iso[a-z]?)?-[a-z]+-\d$")

_VALID_OUTPUT_FORMATS = {"json", "markdown"}


def validate_cluster_name(name: str) -> None:
    """Validate an EKS cluster name."""
    if not _CLUSTER_NAME_RE.match(name):
        msg = (
            f"Invalid EKS cluster name: {name!r}. Must be 1-100 characters of letters, digits, "
            "hyphens or underscores, starting with a letter or digit."
        )
        raise ValueError(msg)


def validate_region(region: str) -> None:
    """Validate an AWS region name."""
    if not _REGION_RE.match(region):
        msg = f"Invalid AWS region: {region!r}."
        raise ValueError(msg)


def validate_output_format(output_format: str) -> None:
    """Validate the output_format parameter for analyze_upgrade_readiness."""
    if output_format not in _VALID_OUTPUT_FORMATS:
        valid = ", ".join(sorted(_VALID_OUTPUT_FORMATS))
        msg = f"Invalid output_format: {output_format!r}. Must be one of: {valid}"
        raise ValueError(msg)
