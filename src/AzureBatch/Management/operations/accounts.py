# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Batch account operations namespace."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Union

from ..core._error_codes import VALIDATION_REQUIRED, VALIDATION_TYPE
from ..core._validation import ACCOUNT_NAME, RESOURCE_GROUP_NAME, _check_name, _require
from ..core.cancellation import CancellationToken
from ..core.errors import ValidationError
from ..core.results import OperationResult
from ..data._paging import ItemPaged, Page
from ..data._polling import LROPoller
from ..models._wire import _parse_enum
from ..models.account import (
    ActionDescription,
    AccountBaseProperties,
    AccountKeyType,
    BatchAccount,
    BatchAccountCreateParameters,
    BatchAccountKeys,
    BatchAccountUpdateParameters,
)
from ._descriptors import LROKind, ResourceOperation, _codes, _to_wire

if TYPE_CHECKING:
    from ..client import BatchManagementClient


_ACCOUNT_PATH = (
    "/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}"
    "/providers/Microsoft.Batch/batchAccounts/{accountName}"
)

_CREATE = ResourceOperation(
    "accounts.create",
    "PUT",
    _ACCOUNT_PATH,
    _codes(200, 202),
    deserialize=BatchAccount.from_api_response,
    build_body=_to_wire,
    lro=LROKind.CREATE_OR_UPDATE,
)
_UPDATE = ResourceOperation(
    "accounts.update",
    "PATCH",
    _ACCOUNT_PATH,
    _codes(200),
    deserialize=BatchAccount.from_api_response,
    build_body=_to_wire,
)
_DELETE = ResourceOperation("accounts.delete", "DELETE", _ACCOUNT_PATH, _codes(200, 202, 204), lro=LROKind.DELETE)
_GET = ResourceOperation("accounts.get", "GET", _ACCOUNT_PATH, _codes(200), deserialize=BatchAccount.from_api_response)
_LIST = ResourceOperation(
    "accounts.list",
    "GET",
    "/subscriptions/{subscriptionId}/providers/Microsoft.Batch/batchAccounts",
    _codes(200),
    deserialize=BatchAccount.from_api_response,
    paged=True,
)
_LIST_BY_RESOURCE_GROUP = ResourceOperation(
    "accounts.list_by_resource_group",
    "GET",
    "/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}/providers/Microsoft.Batch/batchAccounts",
    _codes(200),
    deserialize=BatchAccount.from_api_response,
    paged=True,
)
_LIST_KEYS = ResourceOperation(
    "accounts.list_keys",
    "POST",
    _ACCOUNT_PATH + "/listKeys",
    _codes(200),
    deserialize=BatchAccountKeys.from_api_response,
)
_REGENERATE_KEY = ResourceOperation(
    "accounts.regenerate_key",
    "POST",
    _ACCOUNT_PATH + "/regenerateKeys",
    _codes(200),
    deserialize=BatchAccountKeys.from_api_response,
)
_SYNC_AUTO_STORAGE_KEYS = ResourceOperation(
    "accounts.synchronize_auto_storage_keys",
    "POST",
    _ACCOUNT_PATH + "/syncAutoStorageKeys",
    _codes(204),
)
_LIST_ACTIONS = ResourceOperation(
    "accounts.list_actions",
    "POST",
    "/providers/Microsoft.Batch/listActions",
    _codes(200),
    deserialize=ActionDescription.from_api_response,
    many=True,
)


def _account_params(resource_group_name: str, account_name: str):
    _check_name(resource_group_name, "resource_group_name", RESOURCE_GROUP_NAME)
    _check_name(account_name, "account_name", ACCOUNT_NAME)
    return {"resourceGroupName": resource_group_name, "accountName": account_name}


def _check_auto_storage(properties: Optional[AccountBaseProperties]) -> None:
    auto_storage = properties.auto_storage if properties is not None else None
    if auto_storage is not None and not auto_storage.storage_account_id:
        raise ValidationError(
            "parameters.properties.auto_storage.storage_account_id is required when auto_storage is set.",
            parameter="parameters.properties.auto_storage.storage_account_id",
            subcode=VALIDATION_REQUIRED,
        )


class AccountOperations:
    """
    Batch account operations.

    Accessed via ``client.accounts``. Creating and deleting an account are
    long-running operations: ``begin_create`` and ``begin_delete`` return an
    :class:`~AzureBatch.Management.data._polling.LROPoller`, while ``create``
    and ``delete`` block until the operation has finished.

    Example::

        params = BatchAccountCreateParameters(location="westus", tags={"env": "dev"})
        account = client.accounts.create("my-rg", "myaccount", params).value

        keys = client.accounts.list_keys("my-rg", "myaccount").value
        client.accounts.regenerate_key("my-rg", "myaccount", AccountKeyType.SECONDARY)

        for account in client.accounts.list("my-rg"):
            print(account.name, account.properties.provisioning_state)

        client.accounts.delete("my-rg", "myaccount")
    """

    def __init__(self, client: "BatchManagementClient") -> None:
        """
        Initialize AccountOperations.

        :param client: Parent BatchManagementClient instance.
        :type client: BatchManagementClient
        """
        self._client = client

    # ------------------------------- create ---------------------------------

    def begin_create(
        self,
        resource_group_name: str,
        account_name: str,
        parameters: BatchAccountCreateParameters,
        *,
        polling_interval: Optional[float] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> LROPoller[BatchAccount]:
        """
        Start creating a Batch account.

        :param resource_group_name: Resource group that will contain the account.
        :type resource_group_name: str
        :param account_name: Account name, 3 to 24 characters, unique within the region.
        :type account_name: str
        :param parameters: Location, tags and optional auto-storage settings.
        :type parameters: ~AzureBatch.Management.models.account.BatchAccountCreateParameters
        :param polling_interval: Seconds between polls when the service sends no ``Retry-After``.
        :type polling_interval: float | None
        :param cancellation: Token that stops polling when cancelled.
        :type cancellation: ~AzureBatch.Management.core.cancellation.CancellationToken | None
        :return: Poller whose result is the created :class:`~AzureBatch.Management.models.account.BatchAccount`.
        :rtype: ~AzureBatch.Management.data._polling.LROPoller

        :raises ~AzureBatch.Management.core.errors.ValidationError: If an argument is missing or malformed.
        :raises ~AzureBatch.Management.core.errors.HttpError: If the service rejects the request.
        """
        path = _account_params(resource_group_name, account_name)
        _require(parameters, "parameters")
        if isinstance(parameters, BatchAccountCreateParameters):
            _require(parameters.location, "parameters.location")
            _check_auto_storage(parameters.properties)
        return self._client._get_rest()._invoke(
            _CREATE,
            path,
            body=parameters,
            cancellation=cancellation,
            polling_interval=polling_interval,
        )

    def create(
        self,
        resource_group_name: str,
        account_name: str,
        parameters: BatchAccountCreateParameters,
        *,
        timeout: Optional[float] = None,
        polling_interval: Optional[float] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> OperationResult[BatchAccount]:
        """
        Create a Batch account and wait until provisioning finishes.

        Takes the same arguments as :meth:`begin_create`, plus ``timeout``.

        :param timeout: Seconds to wait for the operation; defaults to the configured
            ``polling_timeout`` (``None`` waits indefinitely).
        :type timeout: float | None
        :return: The created account.
        :rtype: ~AzureBatch.Management.core.results.OperationResult[BatchAccount]

        :raises ~AzureBatch.Management.core.errors.OperationFailedError: If provisioning failed.
        :raises ~AzureBatch.Management.core.errors.OperationTimeoutError: If ``timeout`` elapsed.
        """
        poller = self.begin_create(
            resource_group_name,
            account_name,
            parameters,
            polling_interval=polling_interval,
            cancellation=cancellation,
        )
        account = poller.result(timeout=self._client._polling_timeout(timeout))
        return OperationResult(account, poller.metadata)

    # ------------------------------- update ---------------------------------

    def update(
        self,
        resource_group_name: str,
        account_name: str,
        parameters: BatchAccountUpdateParameters,
    ) -> OperationResult[BatchAccount]:
        """
        Update the tags or auto-storage settings of an account.

        :param parameters: Properties to change; unset fields are left untouched.
        :type parameters: ~AzureBatch.Management.models.account.BatchAccountUpdateParameters
        :return: The updated account.
        :rtype: ~AzureBatch.Management.core.results.OperationResult[BatchAccount]
        """
        path = _account_params(resource_group_name, account_name)
        _require(parameters, "parameters")
        if isinstance(parameters, BatchAccountUpdateParameters):
            _check_auto_storage(parameters.properties)
        return self._client._get_rest()._invoke(_UPDATE, path, body=parameters)

    # ------------------------------- delete ---------------------------------

    def begin_delete(
        self,
        resource_group_name: str,
        account_name: str,
        *,
        polling_interval: Optional[float] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> LROPoller[None]:
        """
        Start deleting a Batch account.

        Once the account is gone the polling endpoint may answer ``404``; that
        counts as successful completion.

        :return: Poller whose result is ``None``.
        :rtype: ~AzureBatch.Management.data._polling.LROPoller
        """
        path = _account_params(resource_group_name, account_name)
        return self._client._get_rest()._invoke(
            _DELETE,
            path,
            cancellation=cancellation,
            polling_interval=polling_interval,
        )

    def delete(
        self,
        resource_group_name: str,
        account_name: str,
        *,
        timeout: Optional[float] = None,
        polling_interval: Optional[float] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> OperationResult[None]:
        """Delete a Batch account and wait until the deletion finishes."""
        poller = self.begin_delete(
            resource_group_name,
            account_name,
            polling_interval=polling_interval,
            cancellation=cancellation,
        )
        poller.result(timeout=self._client._polling_timeout(timeout))
        return OperationResult(None, poller.metadata)

    # -------------------------------- read ----------------------------------

    def get(self, resource_group_name: str, account_name: str) -> OperationResult[BatchAccount]:
        """
        Get a Batch account.

        :raises ~AzureBatch.Management.core.errors.HttpError: ``status_code == 404`` if the
            account does not exist.
        """
        path = _account_params(resource_group_name, account_name)
        return self._client._get_rest()._invoke(_GET, path)

    def list(
        self,
        resource_group_name: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> ItemPaged[BatchAccount]:
        """
        List the Batch accounts of the subscription, or of one resource group.

        Pages are fetched lazily while iterating.

        :param resource_group_name: Restrict the listing to this resource group.
        :type resource_group_name: str | None
        :param timeout: Bound on the whole iteration, in seconds.
        :type timeout: float | None
        :rtype: ~AzureBatch.Management.data._paging.ItemPaged[BatchAccount]

        Example::

            for page in client.accounts.list().by_page():
                for account in page.items:
                    print(account.id)
        """
        if resource_group_name is None:
            return self._client._get_rest()._invoke(_LIST, {}, cancellation=cancellation, timeout=timeout)
        _check_name(resource_group_name, "resource_group_name", RESOURCE_GROUP_NAME)
        return self._client._get_rest()._invoke(
            _LIST_BY_RESOURCE_GROUP,
            {"resourceGroupName": resource_group_name},
            cancellation=cancellation,
            timeout=timeout,
        )

    def list_next(
        self,
        next_link: str,
        *,
        cancellation: Optional[CancellationToken] = None,
    ) -> Page[BatchAccount]:
        """
        Fetch one page of accounts from a ``next_link`` returned by a previous page.

        :param next_link: Absolute or relative next-page URL.
        :type next_link: str
        :rtype: ~AzureBatch.Management.data._paging.Page[BatchAccount]
        """
        _require(next_link, "next_link")
        return self._client._get_rest()._list_next(_LIST, next_link, cancellation=cancellation)

    # -------------------------------- keys ----------------------------------

    def list_keys(self, resource_group_name: str, account_name: str) -> OperationResult[BatchAccountKeys]:
        """Get the primary and secondary access keys of an account."""
        path = _account_params(resource_group_name, account_name)
        return self._client._get_rest()._invoke(_LIST_KEYS, path)

    def regenerate_key(
        self,
        resource_group_name: str,
        account_name: str,
        key_name: Union[AccountKeyType, str],
    ) -> OperationResult[BatchAccountKeys]:
        """
        Regenerate one of the account keys.

        :param key_name: ``"Primary"`` or ``"Secondary"``.
        :type key_name: ~AzureBatch.Management.models.account.AccountKeyType | str
        :return: Both keys after regeneration.
        :rtype: ~AzureBatch.Management.core.results.OperationResult[BatchAccountKeys]
        """
        path = _account_params(resource_group_name, account_name)
        _require(key_name, "key_name")
        key = _parse_enum(AccountKeyType, key_name)
        if not isinstance(key, AccountKeyType):
            raise ValidationError(
                f"key_name must be one of {[k.value for k in AccountKeyType]}, got {key_name!r}.",
                parameter="key_name",
                subcode=VALIDATION_TYPE,
            )
        return self._client._get_rest()._invoke(_REGENERATE_KEY, path, body={"keyName": key.value})

    def synchronize_auto_storage_keys(self, resource_group_name: str, account_name: str) -> OperationResult[None]:
        """Make the account pick up rotated keys of its auto-storage account."""
        path = _account_params(resource_group_name, account_name)
        return self._client._get_rest()._invoke(_SYNC_AUTO_STORAGE_KEYS, path)

    # ------------------------------- provider --------------------------------

    def list_actions(self) -> OperationResult[List[ActionDescription]]:
        """
        List the actions the Batch resource provider supports.

        :return: One entry per action, in service order.
        :rtype: ~AzureBatch.Management.core.results.OperationResult[list[ActionDescription]]

        Example::

            for action in client.accounts.list_actions():
                print(action.action, action.friendly_name)
        """
        return self._client._get_rest()._invoke(_LIST_ACTIONS, {})
