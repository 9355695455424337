"""Exceptions raised while collecting cluster state and analyzing it."""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for every error that aborts an upgrade-readiness analysis."""


class MalformedVersionError(AnalysisError, ValueError):
    """A version string has no parseable major/minor pair."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"Malformed Kubernetes version: {version!r}")


class CollectorError(AnalysisError):
    """A data-fetch call against AWS or the Kubernetes API failed.

    Args:
        category: Resource category being collected (e.g. ``subnets``, ``addons``).
        message: Description of the failure.
    """

    def __init__(self, category: str, message: str) -> None:
        self.category = category
        super().__init__(f"Failed to collect {category}: {message}")


class MissingRequiredFieldError(AnalysisError):
    """A collected object lacks a field that is always populated for a live resource."""

    def __init__(self, resource: str, field: str) -> None:
        self.resource = resource
        self.field = field
        super().__init__(f"{resource} is missing required field '{field}'")
