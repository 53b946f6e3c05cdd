# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Application and application package models.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ._wire import (
    _drop_none,
    _parse_bool,
    _parse_datetime,
    _parse_enum,
)


class PackageState(str, Enum):
    """Lifecycle state of an application package."""

    PENDING = "Pending"
    ACTIVE = "Active"
    UNMAPPED = "Unmapped"


@dataclass
class ApplicationPackage:
    """
    A versioned package of an application.

    :param id: Application ID the package belongs to.
    :type id: str | None
    :param version: Package version.
    :type version: str | None
    :param state: Package state; ``Pending`` until the package is activated.
    :type state: PackageState | str | None
    :param format: Archive format given at activation, e.g. ``"zip"``.
    :type format: str | None
    :param storage_url: SAS URL to upload the package content to.
    :type storage_url: str | None
    :param storage_url_expiry: When :attr:`storage_url` expires.
    :type storage_url_expiry: ~datetime.datetime | None
    :param last_activation_time: When the package was last activated.
    :type last_activation_time: ~datetime.datetime | None
    """

    id: Optional[str] = None
    version: Optional[str] = None
    state: Optional[Union[PackageState, str]] = None
    format: Optional[str] = None
    storage_url: Optional[str] = None
    storage_url_expiry: Optional[_dt.datetime] = None
    last_activation_time: Optional[_dt.datetime] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "ApplicationPackage":
        return cls(
            id=data.get("id"),
            version=data.get("version"),
            state=_parse_enum(PackageState, data.get("state")),
            format=data.get("format"),
            storage_url=data.get("storageUrl"),
            storage_url_expiry=_parse_datetime(data.get("storageUrlExpiry")),
            last_activation_time=_parse_datetime(data.get("lastActivationTime")),
        )


@dataclass
class AddApplicationPackageResult:
    """Response of adding a package: where to upload its content and until when."""

    id: Optional[str] = None
    version: Optional[str] = None
    storage_url: Optional[str] = None
    storage_url_expiry: Optional[_dt.datetime] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "AddApplicationPackageResult":
        return cls(
            id=data.get("id"),
            version=data.get("version"),
            storage_url=data.get("storageUrl"),
            storage_url_expiry=_parse_datetime(data.get("storageUrlExpiry")),
        )


@dataclass
class Application:
    """
    An application registered in a Batch account.

    :param id: Application ID.
    :type id: str | None
    :param display_name: Display name.
    :type display_name: str | None
    :param allow_updates: Whether packages may be overwritten using the same version string.
    :type allow_updates: bool | None
    :param default_version: Package used when a client does not specify a version.
    :type default_version: str | None
    :param packages: Packages of the application.
    :type packages: list[ApplicationPackage]

    Example::

        app = client.applications.get_application("my-rg", "myaccount", "blender")
        for package in app.packages:
            print(package.version, package.state)
    """

    id: Optional[str] = None
    display_name: Optional[str] = None
    allow_updates: Optional[bool] = None
    default_version: Optional[str] = None
    packages: List[ApplicationPackage] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "Application":
        packages = data.get("packages")
        if not isinstance(packages, list):
            packages = []
        return cls(
            id=data.get("id"),
            display_name=data.get("displayName"),
            allow_updates=_parse_bool(data.get("allowUpdates")),
            default_version=data.get("defaultVersion"),
            packages=[ApplicationPackage.from_api_response(p) for p in packages if isinstance(p, dict)],
        )


@dataclass
class AddApplicationParameters:
    """Body of an add-application request."""

    allow_updates: Optional[bool] = None
    display_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({"allowUpdates": self.allow_updates, "displayName": self.display_name})


@dataclass
class UpdateApplicationParameters:
    """
    Body of an update-application (PATCH) request.

    :param allow_updates: Whether packages within the application may be
        overwritten using the same version string.
    :type allow_updates: bool | None
    :param default_version: Which package to use if a client requests the
        application but does not specify a version.
    :type default_version: str | None
    :param display_name: The display name for the application.
    :type display_name: str | None
    """

    allow_updates: Optional[bool] = None
    default_version: Optional[str] = None
    display_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "allowUpdates": self.allow_updates,
                "defaultVersion": self.default_version,
                "displayName": self.display_name,
            }
        )
