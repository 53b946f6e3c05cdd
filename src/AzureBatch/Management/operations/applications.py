# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Application and application package operations namespace."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from ..core._error_codes import VALIDATION_TYPE
from ..core._validation import ACCOUNT_NAME, RESOURCE_GROUP_NAME, _check_name, _require
from ..core.cancellation import CancellationToken
from ..core.errors import ValidationError
from ..core.results import OperationResult
from ..data._paging import ItemPaged, Page
from ..models.application import (
    AddApplicationPackageResult,
    AddApplicationParameters,
    Application,
    ApplicationPackage,
    UpdateApplicationParameters,
)
from ._descriptors import ResourceOperation, _codes, _to_wire

if TYPE_CHECKING:
    from ..client import BatchManagementClient


_ACCOUNT_PATH = (
    "/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}"
    "/providers/Microsoft.Batch/batchAccounts/{accountName}"
)
_APPLICATIONS_PATH = _ACCOUNT_PATH + "/applications"
_APPLICATION_PATH = _APPLICATIONS_PATH + "/{applicationId}"
_PACKAGE_PATH = _APPLICATION_PATH + "/versions/{version}"

_ADD_APPLICATION = ResourceOperation(
    "applications.add_application",
    "PUT",
    _APPLICATION_PATH,
    _codes(201),
    deserialize=Application.from_api_response,
    build_body=_to_wire,
)
_DELETE_APPLICATION = ResourceOperation("applications.delete_application", "DELETE", _APPLICATION_PATH, _codes(204))
_GET_APPLICATION = ResourceOperation(
    "applications.get_application",
    "GET",
    _APPLICATION_PATH,
    _codes(200),
    deserialize=Application.from_api_response,
)
_UPDATE_APPLICATION = ResourceOperation(
    "applications.update_application",
    "PATCH",
    _APPLICATION_PATH,
    _codes(204),
    build_body=_to_wire,
)
_LIST = ResourceOperation(
    "applications.list",
    "GET",
    _APPLICATIONS_PATH,
    _codes(200),
    deserialize=Application.from_api_response,
    paged=True,
)
_ADD_PACKAGE = ResourceOperation(
    "applications.add_application_package",
    "PUT",
    _PACKAGE_PATH,
    _codes(201),
    deserialize=AddApplicationPackageResult.from_api_response,
)
_DELETE_PACKAGE = ResourceOperation(
    "applications.delete_application_package", "DELETE", _PACKAGE_PATH, _codes(204)
)
_GET_PACKAGE = ResourceOperation(
    "applications.get_application_package",
    "GET",
    _PACKAGE_PATH,
    _codes(200),
    deserialize=ApplicationPackage.from_api_response,
)
_ACTIVATE_PACKAGE = ResourceOperation(
    "applications.activate_application_package",
    "POST",
    _PACKAGE_PATH + "/activate",
    _codes(204),
)


def _path(
    resource_group_name: str,
    account_name: str,
    application_id: Optional[str] = None,
    version: Optional[str] = None,
    *,
    with_application: bool = True,
    with_version: bool = False,
) -> Dict[str, str]:
    _check_name(resource_group_name, "resource_group_name", RESOURCE_GROUP_NAME)
    _check_name(account_name, "account_name", ACCOUNT_NAME)
    params = {"resourceGroupName": resource_group_name, "accountName": account_name}
    if with_application:
        params["applicationId"] = _check_name(application_id, "application_id")
    if with_version:
        params["version"] = _check_name(version, "version")
    return params


class ApplicationOperations:
    """
    Application and application package operations.

    Accessed via ``client.applications``. An application groups versioned
    packages; a package is added (which returns a storage URL to upload the
    content to) and then activated.

    Example::

        client.applications.add_application(
            "my-rg", "myaccount", "blender", AddApplicationParameters(display_name="Blender")
        )
        package = client.applications.add_application_package("my-rg", "myaccount", "blender", "2.79").value
        # upload the zip to package.storage_url, then:
        client.applications.activate_application_package("my-rg", "myaccount", "blender", "2.79", "zip")
        client.applications.update_application(
            "my-rg", "myaccount", "blender", UpdateApplicationParameters(default_version="2.79")
        )
    """

    def __init__(self, client: "BatchManagementClient") -> None:
        self._client = client

    # ---------------------------- applications ------------------------------

    def add_application(
        self,
        resource_group_name: str,
        account_name: str,
        application_id: str,
        parameters: AddApplicationParameters,
    ) -> OperationResult[Application]:
        """
        Add an application to an account.

        :param application_id: Application ID, unique within the account.
        :type application_id: str
        :param parameters: Display name and update policy; pass an empty
            :class:`~AzureBatch.Management.models.application.AddApplicationParameters` for defaults.
        :type parameters: ~AzureBatch.Management.models.application.AddApplicationParameters
        :return: The new application.
        :rtype: ~AzureBatch.Management.core.results.OperationResult[Application]
        """
        path = _path(resource_group_name, account_name, application_id)
        _require(parameters, "parameters")
        return self._client._get_rest()._invoke(_ADD_APPLICATION, path, body=parameters)

    def delete_application(
        self, resource_group_name: str, account_name: str, application_id: str
    ) -> OperationResult[None]:
        path = _path(resource_group_name, account_name, application_id)
        return self._client._get_rest()._invoke(_DELETE_APPLICATION, path)

    def get_application(
        self, resource_group_name: str, account_name: str, application_id: str
    ) -> OperationResult[Application]:
        """Get an application together with its packages."""
        path = _path(resource_group_name, account_name, application_id)
        return self._client._get_rest()._invoke(_GET_APPLICATION, path)

    def update_application(
        self,
        resource_group_name: str,
        account_name: str,
        application_id: str,
        parameters: UpdateApplicationParameters,
    ) -> OperationResult[None]:
        """
        Update the display name, default version or update policy of an application.

        :param parameters: Fields to change; unset fields are left untouched.
        :type parameters: ~AzureBatch.Management.models.application.UpdateApplicationParameters
        """
        path = _path(resource_group_name, account_name, application_id)
        _require(parameters, "parameters")
        return self._client._get_rest()._invoke(_UPDATE_APPLICATION, path, body=parameters)

    def list(
        self,
        resource_group_name: str,
        account_name: str,
        *,
        maxresults: Optional[int] = None,
        timeout: Optional[float] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> ItemPaged[Application]:
        """
        List the applications of an account.

        :param maxresults: Maximum number of items per page.
        :type maxresults: int | None
        :rtype: ~AzureBatch.Management.data._paging.ItemPaged[Application]
        """
        path = _path(resource_group_name, account_name, with_application=False)
        if maxresults is not None and (isinstance(maxresults, bool) or not isinstance(maxresults, int)):
            raise ValidationError("maxresults must be an integer.", parameter="maxresults", subcode=VALIDATION_TYPE)
        return self._client._get_rest()._invoke(
            _LIST,
            path,
            query={"maxresults": maxresults},
            cancellation=cancellation,
            timeout=timeout,
        )

    def list_next(
        self,
        next_link: str,
        *,
        cancellation: Optional[CancellationToken] = None,
    ) -> Page[Application]:
        """Fetch one page of applications from a ``next_link`` returned by a previous page."""
        _require(next_link, "next_link")
        return self._client._get_rest()._list_next(_LIST, next_link, cancellation=cancellation)

    # ------------------------------ packages --------------------------------

    def add_application_package(
        self,
        resource_group_name: str,
        account_name: str,
        application_id: str,
        version: str,
    ) -> OperationResult[AddApplicationPackageResult]:
        """
        Create a package record for ``version``.

        :return: The package, including the SAS ``storage_url`` to upload its content to.
        :rtype: ~AzureBatch.Management.core.results.OperationResult[AddApplicationPackageResult]
        """
        path = _path(resource_group_name, account_name, application_id, version, with_version=True)
        return self._client._get_rest()._invoke(_ADD_PACKAGE, path)

    def delete_application_package(
        self,
        resource_group_name: str,
        account_name: str,
        application_id: str,
        version: str,
    ) -> OperationResult[None]:
        path = _path(resource_group_name, account_name, application_id, version, with_version=True)
        return self._client._get_rest()._invoke(_DELETE_PACKAGE, path)

    def get_application_package(
        self,
        resource_group_name: str,
        account_name: str,
        application_id: str,
        version: str,
    ) -> OperationResult[ApplicationPackage]:
        path = _path(resource_group_name, account_name, application_id, version, with_version=True)
        return self._client._get_rest()._invoke(_GET_PACKAGE, path)

    def activate_application_package(
        self,
        resource_group_name: str,
        account_name: str,
        application_id: str,
        version: str,
        format: str,
    ) -> OperationResult[None]:
        """
        Activate an uploaded package so that pools can use it.

        :param format: Archive format of the uploaded content, e.g. ``"zip"``.
        :type format: str
        """
        path = _path(resource_group_name, account_name, application_id, version, with_version=True)
        _check_name(format, "format")
        return self._client._get_rest()._invoke(_ACTIVATE_PACKAGE, path, body={"format": format})
