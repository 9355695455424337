"""Kubernetes Core API wrapper: nodes."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from kubernetes import client as k8s_client
from kubernetes.client.rest import ApiException
from kubernetes.config import ConfigException
from urllib3.exceptions import HTTPError

from eks_upgrade_mcp.clients import load_k8s_api_client
from eks_upgrade_mcp.config import ClusterConfig, get_analysis_config
from eks_upgrade_mcp.errors import CollectorError, MissingRequiredFieldError
from eks_upgrade_mcp.models import OrchestratorNode

log = structlog.get_logger()


def to_orchestrator_node(node: Any) -> OrchestratorNode:
    """Convert a V1Node into an OrchestratorNode.

    Raises:
        MissingRequiredFieldError: If the node has no name, status, or node info.
            A live node always reports these, so their absence is a defect.
    """
    name = node.metadata.name if node.metadata else None
    if name is None:
        raise MissingRequiredFieldError("Kubernetes node", "metadata.name")
    if node.status is None:
        raise MissingRequiredFieldError(f"Kubernetes node {name}", "status")
    info = node.status.node_info
    if info is None:
        raise MissingRequiredFieldError(f"Kubernetes node {name}", "status.nodeInfo")

    return OrchestratorNode(
        name=name,
        kubelet_version=info.kubelet_version,
        container_runtime_version=info.container_runtime_version,
        kernel_version=info.kernel_version,
        kube_proxy_version=info.kube_proxy_version,
    )


class K8sCoreClient:
    """Wrapper around the Kubernetes Core V1 API."""

    def __init__(self, cluster_config: ClusterConfig, limiter: asyncio.Semaphore | None = None) -> None:
        self._cluster_config = cluster_config
        self._limiter = limiter or asyncio.Semaphore(get_analysis_config().max_concurrent_requests)
        self._api: k8s_client.CoreV1Api | None = None

    def _get_api(self) -> k8s_client.CoreV1Api:
        if self._api is None:
            api_client = load_k8s_api_client(self._cluster_config.kubeconfig_context)
            self._api = k8s_client.CoreV1Api(api_client)
        return self._api

    async def get_nodes(self) -> list[OrchestratorNode]:
        """List all nodes with their node agent versions, in API order."""
        try:
            # Loading kubeconfig reads files and may exec a credential plugin.
            api = await asyncio.to_thread(self._get_api)
            async with self._limiter:
                node_list = await asyncio.to_thread(api.list_node)
        except (ApiException, ConfigException, HTTPError) as e:
            log.error("failed_to_list_nodes", cluster=self._cluster_config.cluster_id)
            raise CollectorError("nodes", str(e)) from e

        return [to_orchestrator_node(node) for node in node_list.items]
