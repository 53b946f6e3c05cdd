# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Batch account models.

Provides typed representations of Batch accounts, their access keys, and the
parameter objects sent when creating or updating an account.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from ._wire import (
    _drop_none,
    _enum_value,
    _format_datetime,
    _parse_datetime,
    _parse_enum,
    _parse_int,
)


class AccountProvisioningState(str, Enum):
    """Provisioning state of a Batch account."""

    INVALID = "Invalid"
    CREATING = "Creating"
    DELETING = "Deleting"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELLED = "Cancelled"


class AccountKeyType(str, Enum):
    """Which account key to regenerate."""

    PRIMARY = "Primary"
    SECONDARY = "Secondary"


@dataclass
class AutoStorageProperties:
    """
    Storage account linked to a Batch account for application packages.

    :param storage_account_id: Resource ID of the storage account.
    :type storage_account_id: str | None
    :param last_key_sync: When the storage keys were last synchronized (read-only).
    :type last_key_sync: ~datetime.datetime | None
    """

    storage_account_id: Optional[str] = None
    last_key_sync: Optional[_dt.datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "storageAccountId": self.storage_account_id,
                "lastKeySync": _format_datetime(self.last_key_sync),
            }
        )

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "AutoStorageProperties":
        return cls(
            storage_account_id=data.get("storageAccountId"),
            last_key_sync=_parse_datetime(data.get("lastKeySync")),
        )


@dataclass
class AccountProperties:
    """
    Properties of a Batch account.

    Quotas and endpoint are populated by the service; only ``auto_storage`` is
    meaningful on create and update requests.
    """

    account_endpoint: Optional[str] = None
    provisioning_state: Optional[Union[AccountProvisioningState, str]] = None
    core_quota: Optional[int] = None
    pool_quota: Optional[int] = None
    active_job_and_job_schedule_quota: Optional[int] = None
    auto_storage: Optional[AutoStorageProperties] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "accountEndpoint": self.account_endpoint,
                "provisioningState": _enum_value(self.provisioning_state),
                "coreQuota": self.core_quota,
                "poolQuota": self.pool_quota,
                "activeJobAndJobScheduleQuota": self.active_job_and_job_schedule_quota,
                "autoStorage": self.auto_storage.to_dict() if self.auto_storage is not None else None,
            }
        )

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "AccountProperties":
        auto_storage = data.get("autoStorage")
        return cls(
            account_endpoint=data.get("accountEndpoint"),
            provisioning_state=_parse_enum(AccountProvisioningState, data.get("provisioningState")),
            core_quota=_parse_int(data.get("coreQuota")),
            pool_quota=_parse_int(data.get("poolQuota")),
            active_job_and_job_schedule_quota=_parse_int(data.get("activeJobAndJobScheduleQuota")),
            auto_storage=(
                AutoStorageProperties.from_api_response(auto_storage) if isinstance(auto_storage, dict) else None
            ),
        )


@dataclass
class BatchAccount:
    """
    A Batch account resource.

    :param id: Fully-qualified resource ID.
    :type id: str | None
    :param name: Account name.
    :type name: str | None
    :param type: Resource type, ``Microsoft.Batch/batchAccounts``.
    :type type: str | None
    :param location: Azure region.
    :type location: str | None
    :param tags: Resource tags.
    :type tags: dict[str, str]
    :param properties: Account properties.
    :type properties: AccountProperties

    Example::

        account = client.accounts.get("my-rg", "myaccount")
        print(account.properties.account_endpoint)
        print(account.properties.core_quota)
    """

    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    location: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)
    properties: AccountProperties = field(default_factory=AccountProperties)

    @property
    def resource_group(self) -> Optional[str]:
        """Resource group segment of :attr:`id`, if present."""
        if not self.id:
            return None
        parts = self.id.strip("/").split("/")
        for i, part in enumerate(parts[:-1]):
            if part.lower() == "resourcegroups":
                return parts[i + 1]
        return None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "name": self.name,
                "type": self.type,
                "location": self.location,
                "tags": dict(self.tags) if self.tags else None,
                "properties": self.properties.to_dict(),
            }
        )

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "BatchAccount":
        properties = data.get("properties")
        tags = data.get("tags")
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            type=data.get("type"),
            location=data.get("location"),
            tags=dict(tags) if isinstance(tags, dict) else {},
            properties=(
                AccountProperties.from_api_response(properties)
                if isinstance(properties, dict)
                else AccountProperties()
            ),
        )


@dataclass
class AccountBaseProperties:
    """Account properties that a caller may set on create or update."""

    auto_storage: Optional[AutoStorageProperties] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {"autoStorage": self.auto_storage.to_dict() if self.auto_storage is not None else None}
        )


@dataclass
class BatchAccountCreateParameters:
    """
    Body of an account create request.

    :param location: Azure region where the account is created. Required.
    :type location: str | None
    :param tags: Resource tags.
    :type tags: dict[str, str]
    :param properties: Optional auto-storage configuration.
    :type properties: AccountBaseProperties | None
    """

    location: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)
    properties: Optional[AccountBaseProperties] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "location": self.location,
                "tags": dict(self.tags) if self.tags else None,
                "properties": self.properties.to_dict() if self.properties is not None else None,
            }
        )


@dataclass
class BatchAccountUpdateParameters:
    """Body of an account update (PATCH) request."""

    tags: Dict[str, str] = field(default_factory=dict)
    properties: Optional[AccountBaseProperties] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "tags": dict(self.tags) if self.tags else None,
                "properties": self.properties.to_dict() if self.properties is not None else None,
            }
        )


@dataclass
class BatchAccountKeys:
    """Primary and secondary access keys of a Batch account."""

    primary: Optional[str] = None
    secondary: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "BatchAccountKeys":
        return cls(primary=data.get("primary"), secondary=data.get("secondary"))

    def __repr__(self) -> str:
        # Never echo secrets into logs or tracebacks.
        return "BatchAccountKeys(primary=***, secondary=***)"


@dataclass
class ActionDescription:
    """
    One action the Batch resource provider exposes, as listed by
    ``client.accounts.list_actions()``.

    :param action: Action identifier, e.g. ``Microsoft.Batch/ListKeys``.
    :type action: str | None
    :param friendly_name: Display name of the action.
    :type friendly_name: str | None
    :param friendly_target: Display name of the resource the action applies to.
    :type friendly_target: str | None
    :param friendly_description: Description of the action.
    :type friendly_description: str | None
    """

    action: Optional[str] = None
    friendly_name: Optional[str] = None
    friendly_target: Optional[str] = None
    friendly_description: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "ActionDescription":
        return cls(
            action=data.get("action"),
            friendly_name=data.get("friendlyName"),
            friendly_target=data.get("friendlyTarget"),
            friendly_description=data.get("friendlyDescription"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "friendlyName": self.friendly_name,
            "friendlyTarget": self.friendly_target,
            "friendlyDescription": self.friendly_description,
        }
