"""Shared utility functions used across collectors and checks."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Mapping
from typing import Any

from eks_upgrade_mcp.errors import MissingRequiredFieldError


def require(mapping: Mapping[str, Any], key: str, resource: str) -> Any:
    """Return ``mapping[key]``, raising MissingRequiredFieldError when it is absent or None."""
    value = mapping.get(key)
    if value is None:
        raise MissingRequiredFieldError(resource, key)
    return value


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """Await all awaitables concurrently, cancelling the rest when one fails.

    Results are returned in argument order. The first exception propagates
    unchanged once the outstanding tasks have been cancelled.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
