"""Shared plumbing for the AWS API wrappers: lazy clients and bounded thread offload."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable
from typing import Any

import boto3

from eks_upgrade_mcp.clients import load_aws_session
from eks_upgrade_mcp.config import ClusterConfig, get_analysis_config


class SharedSession:
    """One boto3 session per cluster, created on first use and shared by several service clients."""

    def __init__(self, cluster_config: ClusterConfig) -> None:
        self._config = cluster_config
        self._session: boto3.Session | None = None
        self._lock = threading.Lock()

    def get(self) -> boto3.Session:
        with self._lock:
            if self._session is None:
                self._session = load_aws_session(self._config.region, self._config.aws_profile)
            return self._session


class AwsServiceClient:
    """Base class for a wrapper around one boto3 service client.

    Subclasses set ``service_name``. Every blocking SDK call goes through
    :meth:`_call`, which holds a slot of the shared request limiter for the
    duration of the call.
    """

    service_name: str = ""

    def __init__(
        self,
        cluster_config: ClusterConfig,
        limiter: asyncio.Semaphore | None = None,
        session: SharedSession | None = None,
    ) -> None:
        self._config = cluster_config
        self._limiter = limiter or asyncio.Semaphore(get_analysis_config().max_concurrent_requests)
        self._session = session or SharedSession(cluster_config)
        self._client: Any | None = None
        self._lock = threading.Lock()

    def _get_client(self) -> Any:
        with self._lock:
            if self._client is None:
                self._client = self._session.get().client(self.service_name)
            return self._client

    async def _service_client(self) -> Any:
        """Return the service client, building the session and client off the event loop.

        Credential and region problems surface here as botocore errors, so callers
        await this inside the same ``try`` that translates SDK failures.
        """
        return await asyncio.to_thread(self._get_client)

    async def _call(self, func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
        async with self._limiter:
            return await asyncio.to_thread(func, *args, **kwargs)
