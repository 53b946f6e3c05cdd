# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .telemetry import TelemetryConfig

DEFAULT_API_VERSION = "2015-12-01"
DEFAULT_BASE_URL = "https://management.azure.com"
DEFAULT_POLLING_INTERVAL = 30.0


@dataclass(frozen=True)
class BatchManagementConfig:
    """
    Configuration settings for Batch management client operations.

    :param base_url: Azure Resource Manager endpoint (default: ``https://management.azure.com``).
    :type base_url: str
    :param api_version: ``api-version`` query parameter sent with every request (default: ``2015-12-01``).
    :type api_version: str
    :param accept_language: Value of the ``accept-language`` header (default: ``en-US``).
    :type accept_language: str
    :param http_retries: Maximum number of attempts for network-level failures (default: 5).
    :type http_retries: int or None
    :param http_backoff: Base delay in seconds for exponential backoff (default: 0.5).
    :type http_backoff: float or None
    :param http_max_backoff: Maximum delay between attempts in seconds (default: 60.0).
    :type http_max_backoff: float or None
    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param http_jitter: Whether to add jitter to retry delays (default: True).
    :type http_jitter: bool or None
    :param polling_interval: Seconds to wait between long-running operation polls when the
        service does not send ``Retry-After`` (default: 30.0).
    :type polling_interval: float
    :param polling_timeout: Default deadline in seconds for long-running operations.
        ``None`` waits until the operation reaches a terminal state.
    :type polling_timeout: float or None
    :param user_agent_suffix: Extra text appended to the ``User-Agent`` header.
    :type user_agent_suffix: str or None
    :param telemetry: Optional telemetry configuration; ``None`` disables telemetry.
    :type telemetry: ~AzureBatch.Management.core.telemetry.TelemetryConfig or None
    """

    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    accept_language: str = "en-US"

    # HTTP retry and resilience configuration
    http_retries: Optional[int] = None
    http_backoff: Optional[float] = None
    http_max_backoff: Optional[float] = None
    http_timeout: Optional[float] = None
    http_jitter: Optional[bool] = None

    # Long-running operation polling
    polling_interval: float = DEFAULT_POLLING_INTERVAL
    polling_timeout: Optional[float] = None

    user_agent_suffix: Optional[str] = None
    telemetry: Optional[TelemetryConfig] = None

    @classmethod
    def from_env(cls) -> "BatchManagementConfig":
        """
        Create a configuration instance with default settings.

        :return: Configuration instance with default values.
        :rtype: ~AzureBatch.Management.core.config.BatchManagementConfig
        """
        # Environment-free defaults
        return cls(
            base_url=DEFAULT_BASE_URL,
            api_version=DEFAULT_API_VERSION,
            accept_language="en-US",
            http_retries=None,  # Will default to 5 in _HttpClient
            http_backoff=None,  # Will default to 0.5 in _HttpClient
            http_max_backoff=None,  # Will default to 60.0 in _HttpClient
            http_timeout=None,  # Will use method-dependent defaults in _HttpClient
            http_jitter=None,  # Will default to True in _HttpClient
            polling_interval=DEFAULT_POLLING_INTERVAL,
            polling_timeout=None,
        )
