"""Upgrade-readiness analysis for Amazon EKS clusters, served over MCP."""
