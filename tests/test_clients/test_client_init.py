"""Tests for client initialization and lazy API loading."""

from __future__ import annotations

import asyncio
import os
from unittest.mock import MagicMock, patch

from eks_upgrade_mcp.clients import load_aws_session
from eks_upgrade_mcp.clients.aws_autoscaling import AwsAutoscalingClient
from eks_upgrade_mcp.clients.aws_base import SharedSession
from eks_upgrade_mcp.clients.aws_eks import AwsEksClient
from eks_upgrade_mcp.clients.aws_network import AwsNetworkClient
from eks_upgrade_mcp.clients.k8s_core import K8sCoreClient
from eks_upgrade_mcp.config import CLUSTER_MAP


class TestK8sCoreClientInit:
    def test_lazy_api_creation(self) -> None:
        client = K8sCoreClient(CLUSTER_MAP["prod-use1"])
        assert client._api is None

    def test_get_api_creates_once(self) -> None:
        client = K8sCoreClient(CLUSTER_MAP["prod-use1"])
        with patch("eks_upgrade_mcp.clients.k8s_core.load_k8s_api_client") as mock_load:
            mock_load.return_value = MagicMock()
            api1 = client._get_api()
            api2 = client._get_api()
        assert api1 is api2
        mock_load.assert_called_once_with("prod-use1-context")

    def test_default_limiter_follows_config(self) -> None:
        with patch.dict(os.environ, {"EKSUP_MAX_CONCURRENT_REQUESTS": "5"}):
            client = K8sCoreClient(CLUSTER_MAP["prod-use1"])
        assert client._limiter._value == 5


class TestAwsClientInit:
    def test_lazy_client_creation(self) -> None:
        client = AwsEksClient(CLUSTER_MAP["prod-use1"])
        assert client._client is None
        assert client._session._session is None

    def test_session_and_client_created_once(self) -> None:
        client = AwsNetworkClient(CLUSTER_MAP["dev-usw2"])
        with patch("eks_upgrade_mcp.clients.aws_base.load_aws_session") as mock_load:
            session = MagicMock()
            mock_load.return_value = session
            c1 = client._get_client()
            c2 = client._get_client()
        assert c1 is c2
        mock_load.assert_called_once_with("us-west-2", "dev")
        session.client.assert_called_once_with("ec2")

    def test_shared_session_created_once(self) -> None:
        config = CLUSTER_MAP["prod-use1"]
        session = SharedSession(config)
        eks = AwsEksClient(config, session=session)
        autoscaling = AwsAutoscalingClient(config, session=session)
        with patch("eks_upgrade_mcp.clients.aws_base.load_aws_session") as mock_load:
            eks._get_client()
            autoscaling._get_client()
        mock_load.assert_called_once_with("us-east-1", None)
        boto_session = mock_load.return_value
        assert [c.args for c in boto_session.client.call_args_list] == [("eks",), ("autoscaling",)]

    def test_default_limiter_follows_config(self) -> None:
        with patch.dict(os.environ, {"EKSUP_MAX_CONCURRENT_REQUESTS": "3"}):
            client = AwsEksClient(CLUSTER_MAP["prod-use1"])
        assert client._limiter._value == 3

    def test_shared_limiter(self) -> None:
        limiter = asyncio.Semaphore(2)
        eks = AwsEksClient(CLUSTER_MAP["prod-use1"], limiter)
        network = AwsNetworkClient(CLUSTER_MAP["prod-use1"], limiter)
        assert eks._limiter is network._limiter

    async def test_limiter_bounds_concurrent_calls(self) -> None:
        limiter = asyncio.Semaphore(1)
        client = AwsEksClient(CLUSTER_MAP["prod-use1"], limiter)
        observed: list[bool] = []

        def record() -> None:
            observed.append(limiter.locked())

        await asyncio.gather(client._call(record), client._call(record))
        assert observed == [True, True]


class TestLoadAwsSession:
    def test_region_and_profile(self) -> None:
        with patch("eks_upgrade_mcp.clients.boto3.Session") as mock_session:
            load_aws_session("us-east-1", "prod")
        mock_session.assert_called_once_with(profile_name="prod", region_name="us-east-1")
