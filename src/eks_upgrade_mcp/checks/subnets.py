"""Available IP capacity of control plane and data plane subnets."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import structlog

from eks_upgrade_mcp.checks import as_finding
from eks_upgrade_mcp.models import ClusterDescriptor, ComputeConstruct, Subnet

log = structlog.get_logger()


class SubnetLookup(Protocol):
    async def get_subnets(self, subnet_ids: Sequence[str]) -> list[Subnet]: ...


def data_plane_subnet_ids(compute: Sequence[ComputeConstruct]) -> list[str]:
    """Union the subnet IDs referenced by all compute constructs.

    A subnet shared by several node groups or profiles appears once, in the
    order it was first seen.
    """
    seen: set[str] = set()
    subnet_ids: list[str] = []
    for construct in compute:
        for subnet_id in construct.subnet_ids:
            if subnet_id not in seen:
                seen.add(subnet_id)
                subnet_ids.append(subnet_id)
    return subnet_ids


async def control_plane_ips(cluster: ClusterDescriptor, network: SubnetLookup) -> list[Subnet] | None:
    """Report available IPs for each subnet the control plane is configured with.

    The figures are informational: no threshold is applied here.
    """
    subnets = await network.get_subnets(cluster.subnet_ids)
    log.debug("control_plane_subnets_collected", count=len(subnets))
    return as_finding(subnets)


async def data_plane_ips(compute: Sequence[ComputeConstruct], network: SubnetLookup) -> list[Subnet] | None:
    """Report available IPs for every subnet used by the data plane.

    Subnets are deduplicated across compute constructs and looked up with one
    batched query sized to the unique set.
    """
    subnet_ids = data_plane_subnet_ids(compute)
    if not subnet_ids:
        return None

    subnets = await network.get_subnets(subnet_ids)
    log.debug("data_plane_subnets_collected", count=len(subnets), constructs=len(compute))
    return as_finding(subnets)
