"""Shared test fixtures for all test modules."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from eks_upgrade_mcp.config import CLUSTER_MAP, ClusterConfig, load_cluster_map

_TEST_CLUSTERS_YAML = """\
clusters:
  prod-use1:
    environment: prod
    region: us-east-1
    eks_cluster_name: prod-cluster
    kubeconfig_context: prod-use1-context
  dev-usw2:
    environment: dev
    region: us-west-2
    eks_cluster_name: dev_cluster-2
    kubeconfig_context: dev-usw2-context
    aws_profile: dev
"""


@pytest.fixture(autouse=True, scope="session")
def _load_test_clusters(tmp_path_factory: pytest.TempPathFactory) -> Iterator[None]:
    """Load a two-cluster configuration into CLUSTER_MAP for the whole session."""
    path = tmp_path_factory.mktemp("config") / "clusters.yaml"
    path.write_text(_TEST_CLUSTERS_YAML)
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("EKSUP_CLUSTERS", str(path))
        load_cluster_map()
        yield


@pytest.fixture
def prod_config() -> ClusterConfig:
    return CLUSTER_MAP["prod-use1"]

