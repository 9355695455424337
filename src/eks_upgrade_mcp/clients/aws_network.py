"""EC2 API wrapper for subnet capacity lookups."""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from eks_upgrade_mcp.clients.aws_base import AwsServiceClient
from eks_upgrade_mcp.errors import CollectorError
from eks_upgrade_mcp.models import Subnet
from eks_upgrade_mcp.utils import require

log = structlog.get_logger()


class AwsNetworkClient(AwsServiceClient):
    """Wrapper around the EC2 subnet API."""

    service_name = "ec2"

    async def get_subnets(self, subnet_ids: Sequence[str]) -> list[Subnet]:
        """Look up a batch of subnets with a single DescribeSubnets call, in request order.

        An empty batch returns an empty list without calling EC2, since
        DescribeSubnets with no IDs would return every subnet in the account.

        Raises:
            CollectorError: If the EC2 call fails.
            MissingRequiredFieldError: If a returned subnet lacks capacity fields.
        """
        if not subnet_ids:
            return []

        try:
            client = await self._service_client()
            response = await self._call(client.describe_subnets, SubnetIds=list(subnet_ids))
        except (BotoCoreError, ClientError) as e:
            log.error("failed_to_describe_subnets", cluster=self._config.cluster_id, count=len(subnet_ids))
            raise CollectorError("subnets", str(e)) from e

        by_id: dict[str, Subnet] = {}
        for raw in response.get("Subnets", []):
            subnet_id = require(raw, "SubnetId", "EC2 subnet")
            resource = f"EC2 subnet {subnet_id}"
            by_id[subnet_id] = Subnet(
                id=subnet_id,
                availability_zone=require(raw, "AvailabilityZone", resource),
                availability_zone_id=require(raw, "AvailabilityZoneId", resource),
                available_ips=require(raw, "AvailableIpAddressCount", resource),
                cidr_block=require(raw, "CidrBlock", resource),
            )
        # EC2 does not preserve request order.
        return [by_id[s] for s in subnet_ids if s in by_id]
