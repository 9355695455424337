"""Client wrappers for the Kubernetes and AWS APIs."""

from __future__ import annotations

import boto3
from kubernetes import client as k8s_client
from kubernetes.config import new_client_from_config


def load_k8s_api_client(context: str) -> k8s_client.ApiClient:
    """Create an isolated Kubernetes API client for the given kubeconfig context.

    Uses new_client_from_config to avoid mutating the global K8s SDK configuration,
    which is critical for safe concurrent fan-out across multiple clusters.
    """
    return new_client_from_config(context=context)


def load_aws_session(region: str, profile: str | None = None) -> boto3.Session:
    """Create a boto3 session bound to one region and, optionally, a named profile.

    A dedicated session per cluster keeps credentials and region isolated when
    several clusters are analyzed concurrently.
    """
    return boto3.Session(profile_name=profile, region_name=region)
