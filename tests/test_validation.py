"""Tests for validation.py: EKS cluster names, AWS regions, output formats."""

from __future__ import annotations

import pytest

from eks_upgrade_mcp.validation import validate_cluster_name, validate_output_format, validate_region


class TestValidateClusterName:
    @pytest.mark.parametrize("name", ["prod", "prod-cluster", "dev_cluster-2", "1cluster", "a" * 100])
    def test_valid(self, name: str) -> None:
        validate_cluster_name(name)

    @pytest.mark.parametrize("name", ["", "-prod", "_prod", "prod cluster", "prod.cluster", "a" * 101])
    def test_invalid(self, name: str) -> None:
        with pytest.raises(ValueError, match="Invalid EKS cluster name"):
            validate_cluster_name(name)


class TestValidateRegion:
    @pytest.mark.parametrize(
        "region", ["us-east-1", "eu-central-2", "ap-southeast-3", "us-gov-west-1", "cn-north-1", "il-central-1"]
    )
    def test_valid(self, region: str) -> None:
        validate_region(region)

    @pytest.mark.parametrize("region", ["", "eastus", "US-EAST-1", "us-east", "us-east-1a"])
    def test_invalid(self, region: str) -> None:
        with pytest.raises(ValueError, match="Invalid AWS region"):
            validate_region(region)


class TestValidateOutputFormat:
    @pytest.mark.parametrize("output_format", ["json", "markdown"])
    def test_valid(self, output_format: str) -> None:
        validate_output_format(output_format)

    def test_invalid_lists_options(self) -> None:
        with pytest.raises(ValueError, match="Must be one of: json, markdown"):
            validate_output_format("html")
