# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for long-running operation polling."""

import threading
import time

import pytest

from AzureBatch.Management.core._error_codes import (
    OPERATION_CANCELED_BY_SERVICE,
    OPERATION_FAILED,
    OPERATION_POLL_HTTP_FAILURE,
)
from AzureBatch.Management.core.cancellation import CancellationToken
from AzureBatch.Management.core.errors import (
    HttpError,
    MalformedResponseError,
    OperationCancelledError,
    OperationFailedError,
    OperationTimeoutError,
    TransportError,
)
from AzureBatch.Management.core.results import OperationResult
from AzureBatch.Management.data._polling import LROPoller, OperationState
from AzureBatch.Management.models.account import BatchAccount

from tests.unit.test_helpers import BASE_URL, account_body, make_client, make_config

POLL_URL = f"{BASE_URL}/subscriptions/12345/providers/Microsoft.Batch/locations/westus/operationResults/op1"
CREATE_PARAMS = {"location": "westus"}


class RecordingToken(CancellationToken):
    """Token that records requested waits and returns immediately."""

    def __init__(self):
        super().__init__()
        self.waits = []

    def wait(self, seconds):
        self.waits.append(seconds)
        return self.is_cancelled


def _accepted(url=POLL_URL, header="Azure-AsyncOperation", retry_after=None):
    headers = {header: url}
    if retry_after is not None:
        headers["Retry-After"] = str(retry_after)
    return (202, headers, None)


class TestCreatePolling:
    def test_begin_returns_poller_without_polling(self):
        client, transport = make_client([_accepted()])

        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)

        assert isinstance(poller, LROPoller)
        assert poller.status() == OperationState.INITIATED.value
        assert poller.done() is False
        assert poller.polling_url == POLL_URL
        assert poller.attempts == 0
        assert len(transport.calls) == 1
        assert transport.calls[0].method == "PUT"
        assert transport.calls[0].json() == CREATE_PARAMS

    def test_polls_until_succeeded_then_final_get(self):
        client, transport = make_client(
            [
                _accepted(),
                (200, {}, {"status": "InProgress"}),
                (200, {}, {"status": "Succeeded"}),
                (200, {"x-ms-request-id": "final-req"}, account_body()),
            ]
        )

        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)
        account = poller.result()

        assert isinstance(account, BatchAccount)
        assert account.name == "acctName"
        assert poller.status() == "Succeeded"
        assert poller.done() is True
        assert poller.attempts == 2
        assert poller.last_status == "Succeeded"
        assert poller.metadata.request_id == "final-req"
        assert [c.method for c in transport.calls] == ["PUT", "GET", "GET", "GET"]
        assert transport.calls[1].url == POLL_URL
        assert transport.calls[2].url == POLL_URL
        assert transport.calls[3].url == transport.calls[0].url

    def test_result_is_cached_after_completion(self):
        client, transport = make_client([_accepted(), (200, {}, {"status": "Succeeded"}), (200, {}, account_body())])
        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)

        first = poller.result()
        second = poller.result()

        assert first is second
        assert len(transport.calls) == 3

    def test_synchronous_200_with_resource_body(self):
        client, transport = make_client([(200, {}, account_body())])

        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)

        assert poller.done() is True
        assert poller.result().name == "acctName"
        assert len(transport.calls) == 1

    def test_poll_200_without_status_is_success(self):
        client, transport = make_client([_accepted(header="Location"), (200, {}, {"name": "acctName", "id": "x"})])

        account = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS).result()

        assert account.name == "acctName"
        assert len(transport.calls) == 2

    def test_location_polling_uses_provisioning_state(self):
        client, transport = make_client(
            [
                _accepted(header="Location"),
                (200, {}, account_body(state="Creating")),
                (200, {}, account_body(state="Succeeded")),
            ]
        )

        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)
        account = poller.result()

        assert account.properties.provisioning_state == "Succeeded"
        assert poller.attempts == 2
        assert len(transport.calls) == 3

    def test_poll_204_is_success(self):
        client, transport = make_client([_accepted(), (204, {}, None), (200, {}, account_body())])

        account = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS).result()

        assert account.name == "acctName"
        assert len(transport.calls) == 3

    def test_202_poll_keeps_polling_and_adopts_new_location(self):
        new_url = f"{BASE_URL}/operations/op2"
        client, transport = make_client(
            [
                _accepted(),
                (202, {"Location": new_url}, None),
                (202, {}, None),
                (200, {}, {"status": "Succeeded"}),
                (200, {}, account_body()),
            ]
        )

        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)
        poller.result()

        assert [c.url for c in transport.calls[1:4]] == [POLL_URL, new_url, new_url]
        assert poller.polling_url == new_url
        assert poller.attempts == 3

    def test_relative_polling_url_resolved(self):
        client, transport = make_client(
            [_accepted(url="/operations/op1"), (200, {}, {"status": "Succeeded"}), (200, {}, account_body())]
        )

        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)
        poller.result()

        assert poller.polling_url == f"{BASE_URL}/operations/op1"
        assert transport.calls[1].url == f"{BASE_URL}/operations/op1"

    def test_unknown_status_keeps_polling(self):
        client, transport = make_client(
            [
                _accepted(),
                (200, {}, {"status": "Provisioning"}),
                (200, {}, {"status": "succeeded"}),
                (200, {}, account_body()),
            ]
        )

        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)
        poller.result()

        assert poller.attempts == 2

    def test_create_convenience_returns_operation_result(self):
        client, _ = make_client(
            [_accepted(), (200, {}, {"status": "Succeeded"}), (200, {"x-ms-request-id": "r-final"}, account_body())]
        )

        result = client.accounts.create("foo", "acctName", CREATE_PARAMS)

        assert isinstance(result, OperationResult)
        assert result.value.name == "acctName"
        assert result.name == "acctName"
        assert result.metadata.request_id == "r-final"


class TestFailures:
    def test_failed_status_raises_and_stops_polling(self):
        client, transport = make_client(
            [
                _accepted(),
                (200, {"x-ms-request-id": "poll-req"}, {
                    "status": "Failed",
                    "error": {"code": "AccountQuotaExceeded", "message": "Quota exceeded"},
                }),
                (200, {}, {"status": "Succeeded"}),
            ]
        )
        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)

        with pytest.raises(OperationFailedError) as exc_info:
            poller.result()

        err = exc_info.value
        assert err.operation_status == "Failed"
        assert err.subcode == OPERATION_FAILED
        assert err.details["service_error_code"] == "AccountQuotaExceeded"
        assert err.request_id == "poll-req"
        assert "Quota exceeded" in str(err)
        assert poller.status() == "Failed"
        assert transport.remaining == 1

        with pytest.raises(OperationFailedError):
            poller.result()
        assert len(transport.calls) == 2

    def test_provisioning_state_failed(self):
        client, _ = make_client([_accepted(header="Location"), (200, {}, account_body(state="Failed"))])
        with pytest.raises(OperationFailedError) as exc_info:
            client.accounts.begin_create("foo", "acctName", CREATE_PARAMS).result()
        assert exc_info.value.operation_status == "Failed"

    def test_service_canceled_status(self):
        client, _ = make_client([_accepted(), (200, {}, {"status": "Canceled"})])
        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)

        with pytest.raises(OperationFailedError) as exc_info:
            poller.result()

        assert exc_info.value.subcode == OPERATION_CANCELED_BY_SERVICE
        assert poller.status() == "Failed"

    def test_poll_error_status_is_operation_failed(self):
        client, transport = make_client(
            [
                _accepted(),
                (500, {}, {"error": {"code": "InternalServerError", "message": "oops"}}),
                (200, {}, {"status": "Succeeded"}),
            ]
        )

        with pytest.raises(OperationFailedError) as exc_info:
            client.accounts.begin_create("foo", "acctName", CREATE_PARAMS).result()

        assert exc_info.value.status_code == 500
        assert exc_info.value.subcode == OPERATION_POLL_HTTP_FAILURE
        assert exc_info.value.details["service_error_code"] == "InternalServerError"
        assert transport.remaining == 1

    def test_poll_404_for_create_is_http_error(self):
        client, _ = make_client([_accepted(), (404, {}, {"error": {"code": "NotFound", "message": "gone"}})])
        with pytest.raises(HttpError) as exc_info:
            client.accounts.begin_create("foo", "acctName", CREATE_PARAMS).result()
        assert exc_info.value.status_code == 404

    def test_initial_rejection_raises_from_begin(self):
        client, transport = make_client([(409, {}, {"error": {"code": "Conflict", "message": "exists"}})])
        with pytest.raises(HttpError) as exc_info:
            client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)
        assert exc_info.value.status_code == 409
        assert len(transport.calls) == 1

    def test_202_without_polling_url_is_malformed(self):
        client, _ = make_client([(202, {}, None)])
        with pytest.raises(MalformedResponseError):
            client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)

    def test_final_get_failure(self):
        client, _ = make_client([_accepted(), (200, {}, {"status": "Succeeded"}), (404, {}, None)])
        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)
        with pytest.raises(HttpError):
            poller.result()
        assert poller.status() == "Failed"

    def test_final_get_retried_after_transport_error(self):
        client, transport = make_client(
            [
                (200, {}, None),
                TransportError("connection reset", method="GET", url="x"),
                (200, {}, account_body()),
            ]
        )
        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)

        with pytest.raises(TransportError):
            poller.result()
        assert poller.done() is False

        account = poller.result()

        assert account.name == "acctName"
        assert [c.method for c in transport.calls] == ["PUT", "GET", "GET"]
        assert transport.calls[1].url == transport.calls[0].url
        assert transport.calls[2].url == transport.calls[0].url

    def test_final_get_after_polling_retried_after_transport_error(self):
        client, transport = make_client(
            [
                _accepted(),
                (200, {}, {"status": "Succeeded"}),
                TransportError("connection reset", method="GET", url="x"),
                (200, {}, account_body()),
            ]
        )
        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS)

        with pytest.raises(TransportError):
            poller.result()
        account = poller.result()

        assert account.name == "acctName"
        assert poller.attempts == 1
        assert [c.url for c in transport.calls[2:]] == [transport.calls[0].url] * 2


class TestDeletePolling:
    def test_delete_404_while_polling_is_success(self):
        client, transport = make_client(
            [
                _accepted(header="Location"),
                (202, {}, None),
                (404, {}, {"error": {"code": "AccountNotFound", "message": "gone"}}),
            ]
        )

        poller = client.accounts.begin_delete("foo", "acctName")
        assert poller.result() is None

        assert poller.status() == "Succeeded"
        assert poller.last_status == "Succeeded"
        assert poller.attempts == 2
        assert transport.calls[0].method == "DELETE"

    def test_delete_convenience(self):
        client, _ = make_client([_accepted(), (200, {}, {"status": "Succeeded"})])
        result = client.accounts.delete("foo", "acctName")
        assert result.value is None

    @pytest.mark.parametrize("status", [200, 204])
    def test_synchronous_delete(self, status):
        client, transport = make_client([(status, {}, None)])
        poller = client.accounts.begin_delete("foo", "acctName")
        assert poller.done() is True
        assert poller.result() is None
        assert len(transport.calls) == 1


class TestWaiting:
    def test_retry_after_then_interval(self):
        token = RecordingToken()
        client, _ = make_client(
            [
                _accepted(retry_after=3),
                (202, {"Retry-After": "5"}, None),
                (200, {}, {"status": "InProgress"}),
                (200, {}, {"status": "Succeeded"}),
                (200, {}, account_body()),
            ]
        )

        poller = client.accounts.begin_create(
            "foo", "acctName", CREATE_PARAMS, polling_interval=30, cancellation=token
        )
        poller.result()

        assert token.waits == [3.0, 5.0, 30.0]

    def test_configured_polling_interval_used_by_default(self):
        token = RecordingToken()
        client, _ = make_client(
            [_accepted(), (200, {}, {"status": "Succeeded"}), (200, {}, account_body())],
            config=make_config(polling_interval=12.0),
        )

        client.accounts.begin_create("foo", "acctName", CREATE_PARAMS, cancellation=token).result()

        assert token.waits == [12.0]

    def test_cancel_mid_wait_stops_polling(self):
        client, transport = make_client([_accepted(), (200, {}, {"status": "Succeeded"})])
        poller = client.accounts.begin_create("foo", "acctName", CREATE_PARAMS, polling_interval=30)
        threading.Timer(0.1, poller.cancel).start()

        started = time.monotonic()
        with pytest.raises(OperationCancelledError):
            poller.result()

        assert time.monotonic() - started < 5
        assert poller.status() == "Canceled"
        assert poller.done() is True
        assert len(transport.calls) == 1

        with pytest.raises(OperationCancelledError):
            poller.result()
        assert len(transport.calls) == 1

    def test_cancel_via_shared_token(self):
        token = CancellationToken()
        client, transport = make_client([_accepted(), (200, {}, {"status": "InProgress"})])
        poller = client.accounts.begin_delete("foo", "acctName", cancellation=token)
        token.cancel()

        with pytest.raises(OperationCancelledError):
            poller.result()
        assert len(transport.calls) == 1

    def test_timeout_leaves_poller_resumable(self):
        token = RecordingToken()
        client, transport = make_client([_accepted(), (200, {}, {"status": "Succeeded"}), (200, {}, account_body())])
        poller = client.accounts.begin_create(
            "foo", "acctName", CREATE_PARAMS, polling_interval=30, cancellation=token
        )

        with pytest.raises(OperationTimeoutError) as exc_info:
            poller.result(timeout=1)

        assert exc_info.value.details["polling_url"] == POLL_URL
        assert poller.done() is False
        assert len(transport.calls) == 1

        assert poller.result().name == "acctName"
        assert poller.status() == "Succeeded"

    def test_config_polling_timeout_applies_to_create(self):
        client, transport = make_client(
            [_accepted(), (200, {}, {"status": "Succeeded"})],
            config=make_config(polling_interval=30.0, polling_timeout=0.05),
        )

        started = time.monotonic()
        with pytest.raises(OperationTimeoutError):
            client.accounts.create("foo", "acctName", CREATE_PARAMS)
        assert time.monotonic() - started < 5
        assert len(transport.calls) == 1
