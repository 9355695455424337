"""Client-specific test fixtures: raw API response objects and error responses."""

from __future__ import annotations

import pytest
from botocore.exceptions import ClientError


@pytest.fixture
def access_denied() -> ClientError:
    """A botocore ClientError as raised when IAM denies a call."""
    return ClientError(
        {"Error": {"Code": "AccessDeniedException", "Message": "User is not authorized to perform this action"}},
        "DescribeCluster",
    )

