"""Upgrade-readiness checks.

Each check receives already-collected state (or a collector to issue its own
read query) and returns a finding: None when there is nothing to report,
otherwise a non-empty list in input order.
"""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T")


def as_finding(items: list[T]) -> list[T] | None:
    """Collapse an empty result to None."""
    return items or None
