# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for the client.applications namespace."""

import datetime as dt

import pytest

from AzureBatch.Management.core.errors import HttpError, ValidationError
from AzureBatch.Management.models.application import (
    AddApplicationPackageResult,
    AddApplicationParameters,
    PackageState,
    UpdateApplicationParameters,
)

from tests.unit.test_helpers import BASE_URL, make_client

APP_PATH = (
    "/subscriptions/12345/resourceGroups/resourceGroupName/providers/Microsoft.Batch"
    "/batchAccounts/acctName/applications/appId"
)
NOW = "2016-03-10T23:48:38.9878479Z"
NOW_PARSED = dt.datetime(2016, 3, 10, 23, 48, 38, 987847, tzinfo=dt.timezone.utc)


class TestApplications:
    def test_add_application(self):
        client, transport = make_client([(201, {"x-ms-request-id": "1"}, None)])

        client.applications.add_application(
            "resourceGroupName",
            "acctName",
            "appId",
            AddApplicationParameters(allow_updates=True, display_name="display-name"),
        )

        call = transport.calls[0]
        assert call.method == "PUT"
        assert call.headers["User-Agent"]
        assert call.url.startswith(BASE_URL + APP_PATH + "?")
        assert call.json() == {"allowUpdates": True, "displayName": "display-name"}

    def test_add_application_returns_application(self):
        client, _ = make_client([(201, {}, {"id": "appId", "displayName": "display-name"})])
        app = client.applications.add_application("resourceGroupName", "acctName", "appId", AddApplicationParameters())
        assert app.value.display_name == "display-name"

    def test_get_application(self):
        client, transport = make_client(
            [
                (200, {}, {
                    "id": "foo",
                    "allowUpdates": "true",
                    "displayName": "displayName",
                    "defaultVersion": "beta",
                    "packages": [
                        {"version": "fooVersion", "state": "pending", "format": "betaFormat", "lastActivationTime": NOW}
                    ],
                })
            ]
        )

        app = client.applications.get_application("applicationId", "acctName", "id").value

        assert transport.calls[0].method == "GET"
        assert app.id == "foo"
        assert app.allow_updates is True
        assert app.default_version == "beta"
        assert app.display_name == "displayName"
        assert len(app.packages) == 1
        assert app.packages[0].format == "betaFormat"
        assert app.packages[0].state is PackageState.PENDING
        assert app.packages[0].version == "fooVersion"
        assert app.packages[0].last_activation_time == NOW_PARSED

    def test_update_application(self):
        client, transport = make_client([(204, {"x-ms-request-id": "1"}, None)])

        result = client.applications.update_application(
            "resourceGroupName",
            "acctName",
            "appId",
            UpdateApplicationParameters(allow_updates=True, display_name="display-name", default_version="blah"),
        )

        assert result.value is None
        call = transport.calls[0]
        assert call.method == "PATCH"
        assert call.headers["User-Agent"]
        assert call.json() == {"allowUpdates": True, "defaultVersion": "blah", "displayName": "display-name"}

    def test_delete_application(self):
        client, transport = make_client([(204, {}, None)])

        result = client.applications.delete_application("resourceGroupName", "acctName", "appId")

        assert transport.calls[0].method == "DELETE"
        assert result.metadata.http_status_code == 204

    def test_list_applications(self):
        client, transport = make_client(
            [
                (200, {}, {
                    "value": [
                        {
                            "id": "foo",
                            "allowUpdates": "true",
                            "displayName": "DisplayName",
                            "defaultVersion": "beta",
                            "packages": [
                                {"version": "version1", "state": "pending", "format": "beta", "lastActivationTime": NOW},
                                {"version": "version2", "state": "pending", "format": "alpha", "lastActivationTime": NOW},
                            ],
                        }
                    ]
                })
            ]
        )

        apps = list(client.applications.list("resourceGroupName", "acctName"))

        assert transport.calls[0].method == "GET"
        assert "maxresults" not in transport.calls[0].url
        app = apps[0]
        assert app.id == "foo"
        assert app.allow_updates is True
        assert len(app.packages) == 2
        assert app.packages[0].format == "beta"
        assert app.packages[0].state is PackageState.PENDING
        assert app.packages[0].last_activation_time == NOW_PARSED

    def test_non_list_packages_tolerated(self):
        client, _ = make_client(
            [
                (200, {}, {"id": "app", "packages": 7}),
                (200, {}, {"value": [{"id": "a", "packages": 3}]}),
            ]
        )

        app = client.applications.get_application("resourceGroupName", "acctName", "app").value
        apps = list(client.applications.list("resourceGroupName", "acctName"))

        assert app.packages == []
        assert [a.id for a in apps] == ["a"]
        assert apps[0].packages == []

    def test_list_with_maxresults(self):
        client, transport = make_client([(200, {}, {"value": []})])
        list(client.applications.list("resourceGroupName", "acctName", maxresults=5))
        assert "maxresults=5" in transport.calls[0].url

    @pytest.mark.parametrize("maxresults", ["5", 1.5, True])
    def test_list_rejects_non_integer_maxresults(self, maxresults):
        client, _ = make_client()
        with pytest.raises(ValidationError):
            client.applications.list("resourceGroupName", "acctName", maxresults=maxresults)

    def test_list_next(self):
        client, transport = make_client([(200, {}, {"value": [{"id": "app2"}]})])
        page = client.applications.list_next(f"{BASE_URL}/apps?$skiptoken=1")
        assert [a.id for a in page] == ["app2"]
        assert transport.calls[0].url == f"{BASE_URL}/apps?$skiptoken=1"


class TestPackages:
    def test_add_application_package(self):
        client, transport = make_client(
            [
                (201, {"x-ms-request-id": "1"}, {
                    "id": "foo",
                    "storageUrl": "/subscriptions/12345/resourceGroups/foo/providers/Microsoft.Batch/batchAccounts/acctName",
                    "version": "beta",
                    "storageUrlExpiry": NOW,
                })
            ]
        )

        result = client.applications.add_application_package("resourceGroupName", "acctName", "appId", "beta").value

        assert transport.calls[0].method == "PUT"
        assert transport.calls[0].url.startswith(BASE_URL + APP_PATH + "/versions/beta?")
        assert transport.calls[0].body is None
        assert isinstance(result, AddApplicationPackageResult)
        assert result.storage_url_expiry == NOW_PARSED
        assert result.id == "foo"
        assert result.version == "beta"
        assert result.storage_url == "/subscriptions/12345/resourceGroups/foo/providers/Microsoft.Batch/batchAccounts/acctName"

    def test_get_application_package(self):
        client, transport = make_client(
            [
                (200, {}, {
                    "id": "foo",
                    "storageUrl": "//storageUrl",
                    "state": "Pending",
                    "version": "beta",
                    "format": "zip",
                    "lastActivationTime": NOW,
                    "storageUrlExpiry": NOW,
                })
            ]
        )

        package = client.applications.get_application_package("resourceGroupName", "acctName", "appId", "beta").value

        assert transport.calls[0].method == "GET"
        assert package.id == "foo"
        assert package.storage_url == "//storageUrl"
        assert package.state is PackageState.PENDING
        assert package.version == "beta"
        assert package.format == "zip"
        assert package.last_activation_time == NOW_PARSED
        assert package.storage_url_expiry == NOW_PARSED

    def test_activate_application_package(self):
        client, transport = make_client([(204, {"x-ms-request-id": "1"}, None)])

        result = client.applications.activate_application_package("resourceGroupName", "acctName", "appId", "beta", "zip")

        call = transport.calls[0]
        assert call.method == "POST"
        assert call.headers["User-Agent"]
        assert call.url.startswith(BASE_URL + APP_PATH + "/versions/beta/activate?")
        assert call.json() == {"format": "zip"}
        assert result.metadata.http_status_code == 204

    def test_delete_application_package(self):
        client, transport = make_client([(204, {}, None)])

        result = client.applications.delete_application_package("resourceGroupName", "acctName", "appId", "beta")

        assert transport.calls[0].method == "DELETE"
        assert result.metadata.http_status_code == 204

    def test_conflict_raises(self):
        client, _ = make_client([(409, {}, {"error": {"code": "ApplicationPackageExists", "message": "exists"}})])
        with pytest.raises(HttpError) as exc_info:
            client.applications.add_application_package("resourceGroupName", "acctName", "appId", "beta")
        assert exc_info.value.service_error_code == "ApplicationPackageExists"


class TestArgumentValidation:
    @pytest.mark.parametrize(
        "args",
        [
            (None, "foo", "foo", "foo", "foo"),
            ("foo", None, "foo", "foo", "foo"),
            ("foo", "foo", None, "foo", "foo"),
            ("foo", "foo", "foo", None, "foo"),
            ("foo", "foo", "foo", "foo", None),
        ],
    )
    def test_activate_application_package(self, args):
        client, transport = make_client()
        with pytest.raises(ValidationError):
            client.applications.activate_application_package(*args)
        assert transport.calls == []

    @pytest.mark.parametrize(
        "args",
        [
            (None, "foo", "foo", AddApplicationParameters()),
            ("foo", None, "foo", AddApplicationParameters()),
            ("foo", "foo", None, AddApplicationParameters()),
            ("foo", "foo", "foo", None),
        ],
    )
    def test_add_application(self, args):
        client, _ = make_client()
        with pytest.raises(ValidationError):
            client.applications.add_application(*args)

    @pytest.mark.parametrize("args", [(None, "foo", "foo"), ("foo", None, "foo"), ("foo", "foo", None)])
    def test_delete_application(self, args):
        client, _ = make_client()
        with pytest.raises(ValidationError):
            client.applications.delete_application(*args)

    @pytest.mark.parametrize(
        "args",
        [(None, "foo", "foo", "foo"), ("foo", None, "foo", "foo"), ("foo", "foo", None, "foo"), ("foo", "foo", "foo", None)],
    )
    def test_package_operations(self, args):
        client, _ = make_client()
        with pytest.raises(ValidationError):
            client.applications.delete_application_package(*args)
        with pytest.raises(ValidationError):
            client.applications.get_application_package(*args)
        with pytest.raises(ValidationError):
            client.applications.add_application_package(*args)

    @pytest.mark.parametrize("args", [(None, "foo", "foo"), ("foo", None, "foo"), ("foo", "foo", None)])
    def test_get_application(self, args):
        client, _ = make_client()
        with pytest.raises(ValidationError):
            client.applications.get_application(*args)

    def test_update_application_requires_parameters(self):
        client, _ = make_client()
        with pytest.raises(ValidationError):
            client.applications.update_application("foo", "foo", "foo", None)

    @pytest.mark.parametrize("args", [(None, "foo"), ("foo", None)])
    def test_list(self, args):
        client, _ = make_client()
        with pytest.raises(ValidationError):
            client.applications.list(*args)
