# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for Batch management client tests.

This module provides common test fixtures, mock objects, and configuration
that can be used across all test modules.
"""

import pytest

from AzureBatch.Management.core.config import BatchManagementConfig

from tests.unit.test_helpers import make_credential


@pytest.fixture
def credential():
    """Mock TokenCredential returning a fixed bearer token."""
    return make_credential()


@pytest.fixture
def test_config():
    """Test configuration with no waits between polls and no network retries."""
    return BatchManagementConfig(
        base_url="https://management.example.com",
        http_retries=1,
        http_backoff=0.0,
        http_timeout=5,
        polling_interval=0.0,
    )


@pytest.fixture
def subscription_id():
    return "12345"
