# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from typing import Optional

import requests

from azure.core.credentials import TokenCredential

from .core._auth import _AuthManager
from .core._http import HttpTransport
from .core._validation import _require
from .core.config import BatchManagementConfig
from .data._rest import _ManagementClient
from .operations.accounts import AccountOperations
from .operations.applications import ApplicationOperations
from .operations.subscriptions import SubscriptionOperations


class BatchManagementClient:
    """
    High-level client for the Azure Batch management plane.

    Manages Batch accounts, their keys and auto-storage settings, applications
    and application packages, and reads subscription quotas through Azure
    Resource Manager. It authenticates via Azure Identity and delegates HTTP
    operations to an internal
    :class:`~AzureBatch.Management.data._rest._ManagementClient`.

    Operations are organized under namespaces:

    - ``client.accounts``: Batch account lifecycle, keys and listing
    - ``client.applications``: applications and application packages
    - ``client.subscriptions``: subscription quotas per region

    **Context Manager Support (Recommended)**:
        Using the client as a context manager creates a pooled HTTP session and
        releases it on exit::

            with BatchManagementClient(credential, subscription_id) as client:
                account = client.accounts.get("my-rg", "myaccount").value

    **Without Context Manager**:
        Resources are created lazily on first use. Call ``close()`` when done::

            client = BatchManagementClient(credential, subscription_id)
            try:
                quotas = client.subscriptions.get_quotas("westus").value
            finally:
                client.close()

    :param credential: Azure Identity credential for authentication.
    :type credential: ~azure.core.credentials.TokenCredential
    :param subscription_id: Azure subscription that owns the Batch accounts.
    :type subscription_id: :class:`str`
    :param config: Optional configuration for endpoint, API version, retries and polling.
        If not provided, defaults are loaded from
        :meth:`~AzureBatch.Management.core.config.BatchManagementConfig.from_env`.
    :type config: ~AzureBatch.Management.core.config.BatchManagementConfig or None
    :param transport: Optional object performing the HTTP exchanges, in place of the
        built-in ``requests`` transport. Must provide ``send(method, url, *, headers, body, cancellation)``.
    :type transport: ~AzureBatch.Management.core._http.HttpTransport or None

    :raises ~AzureBatch.Management.core.errors.ValidationError: If ``subscription_id`` is missing.
    :raises TypeError: If ``credential`` is not a ``TokenCredential``.

    Example::

        from azure.identity import DefaultAzureCredential
        from AzureBatch.Management.client import BatchManagementClient
        from AzureBatch.Management.models.account import BatchAccountCreateParameters

        with BatchManagementClient(DefaultAzureCredential(), "<subscription-id>") as client:
            poller = client.accounts.begin_create(
                "my-rg", "myaccount", BatchAccountCreateParameters(location="westus")
            )
            account = poller.result(timeout=900)
            print(account.properties.account_endpoint)
    """

    def __init__(
        self,
        credential: TokenCredential,
        subscription_id: str,
        config: Optional[BatchManagementConfig] = None,
        *,
        transport: Optional[HttpTransport] = None,
    ) -> None:
        self.auth = _AuthManager(credential)
        self._subscription_id = _require(subscription_id, "subscription_id")
        self._config = config or BatchManagementConfig.from_env()
        self._transport = transport
        self._rest: Optional[_ManagementClient] = None
        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False

        self.accounts = AccountOperations(self)
        self.applications = ApplicationOperations(self)
        self.subscriptions = SubscriptionOperations(self)

    @property
    def subscription_id(self) -> str:
        return self._subscription_id

    def __enter__(self) -> "BatchManagementClient":
        """
        Enter the context manager.

        Creates an HTTP session for connection pooling. All operations within
        the context reuse this session.

        :return: The client instance.
        :rtype: BatchManagementClient
        """
        if self._session is None and self._transport is None:
            self._session = requests.Session()
            self._owns_session = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Close the client and release resources.

        Closes the HTTP session (if the client created one) and the internal
        management client. Safe to call multiple times.
        """
        if self._rest is not None:
            self._rest.close()
            self._rest = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def _get_rest(self) -> _ManagementClient:
        """
        Get or create the internal management client.

        Construction is deferred until the first API call. When a session exists
        (from the context manager), it is passed on for connection pooling.

        :rtype: ~AzureBatch.Management.data._rest._ManagementClient
        """
        if self._rest is None:
            self._rest = _ManagementClient(
                self.auth,
                self._subscription_id,
                self._config,
                transport=self._transport,
                session=self._session,
            )
        return self._rest

    def _polling_timeout(self, timeout: Optional[float]) -> Optional[float]:
        return timeout if timeout is not None else self._config.polling_timeout
