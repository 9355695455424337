"""Kubernetes version parsing and target-version arithmetic.

EKS reports versions in several shapes: ``1.24`` for the control plane,
``v1.24.7-eks-fb459a0`` for kubelets, and occasionally ``v1.24+`` from other
distributions. Only the first two dot-separated segments carry meaning here.
"""

from __future__ import annotations

import re

from eks_upgrade_mcp.errors import MalformedVersionError

_MAJOR_RE = re.compile(r"^\D*(\d+)$")
# Minor segment may carry a build suffix ("24-eks-1", "24+") but must start with digits.
_MINOR_RE = re.compile(r"^(\d+)(?:[-+].*)?$")


def parse_version(version: str) -> tuple[int, int]:
    """Parse a version string into a ``(major, minor)`` tuple.

    Raises:
        MalformedVersionError: If the string has fewer than two segments or
            either segment is not numeric.
    """
    segments = version.strip().split(".")
    if len(segments) < 2:
        raise MalformedVersionError(version)

    major = _MAJOR_RE.match(segments[0])
    minor = _MINOR_RE.match(segments[1])
    if major is None or minor is None:
        raise MalformedVersionError(version)
    return int(major.group(1)), int(minor.group(1))


def parse_minor_version(version: str) -> int:
    """Return the minor version, e.g. ``20`` for ``v1.20.7-eks-123456``."""
    return parse_version(version)[1]


def normalize_version(version: str) -> str:
    """Normalize to ``"{major}.{minor}"``, e.g. ``v1.20.7-eks-123456`` becomes ``1.20``."""
    major, minor = parse_version(version)
    return f"{major}.{minor}"


def get_target_version(current: str) -> str:
    """Return the next minor version an in-place upgrade would move to."""
    return f"1.{parse_minor_version(current) + 1}"


def is_at_or_beyond(version: str, reference: str) -> bool:
    """Return True if ``version`` is the same minor release as ``reference`` or newer."""
    return parse_version(version) >= parse_version(reference)
