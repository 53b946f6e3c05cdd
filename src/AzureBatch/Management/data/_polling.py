# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Long-running operation polling.

Create and delete calls on Batch accounts may be executed asynchronously by
the service: the initiating request answers ``202 Accepted`` with a polling URL
in ``Azure-AsyncOperation`` or ``Location``. :class:`LROPoller` drives such an
operation to a terminal state:

``Initiated -> Polling -> Succeeded | Failed | Canceled``

Each poll is a GET on the polling URL. Before each poll the poller waits for
the ``Retry-After`` seconds of the latest response, or for the configured
polling interval. Polls of one operation are strictly sequential, and a failed
operation is reported, never retried.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Generic, Optional, TypeVar, Union

from ..common.constants import LRO_STATUS_CANCELED, LRO_STATUS_FAILED, LRO_STATUS_SUCCEEDED
from ..core._error_codes import (
    OPERATION_CANCELED_BY_SERVICE,
    OPERATION_FAILED,
    OPERATION_POLL_HTTP_FAILURE,
)
from ..core.cancellation import CancellationToken, Deadline
from ..core.errors import (
    BatchManagementError,
    MalformedResponseError,
    OperationCancelledError,
    OperationFailedError,
    OperationTimeoutError,
)
from ..core.results import RequestMetadata
from ..models.error import ErrorEnvelope
from ._classifier import (
    Failure,
    Pending,
    Terminal,
    _parse_retry_after,
    _polling_url,
    classify,
    error_for_failure,
)

if TYPE_CHECKING:
    from ._rest import _Exchange, _ManagementClient

T = TypeVar("T")


class OperationState(str, Enum):
    """Lifecycle of a long-running operation as tracked by the client."""

    INITIATED = "Initiated"
    POLLING = "Polling"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELED = "Canceled"


class LROKind(str, Enum):
    """What the operation does to its resource; decides how completion is recognised."""

    CREATE_OR_UPDATE = "create_or_update"
    DELETE = "delete"


_TERMINAL_STATES = frozenset({OperationState.SUCCEEDED, OperationState.FAILED, OperationState.CANCELED})


def _operation_status(body: Any) -> Optional[str]:
    """
    Status reported by a polling response.

    Operation-status resources carry ``status``; resources polled through
    ``Location`` carry ``properties.provisioningState``.
    """
    if not isinstance(body, dict):
        return None
    status = body.get("status")
    if isinstance(status, str) and status:
        return status
    properties = body.get("properties")
    if isinstance(properties, dict):
        state = properties.get("provisioningState")
        if isinstance(state, str) and state:
            return state
    return None


def _is_status_envelope(body: Any) -> bool:
    """``True`` when the body describes the operation rather than the resource."""
    return body is None or (isinstance(body, dict) and "status" in body)


class LROPoller(Generic[T]):
    """
    Poller for a long-running Batch management operation.

    Returned by ``begin_*`` methods. The initiating request has already been
    sent; call :meth:`result` to poll until the operation finishes.

    :param client: Low-level client used for polls and the final GET.
    :param operation: Operation name used for telemetry and error messages.
    :param initial: Classified outcome of the initiating call.
    :param initial_exchange: Response and metadata of the initiating call.
    :param kind: Create/update or delete semantics.
    :param resource_url: URL of the resource, for the final GET after success.
    :param deserialize: Parser for the final resource body.
    :param polling_interval: Seconds between polls when ``Retry-After`` is absent.
    :param cancellation: Caller-supplied token; a private one is created if omitted.

    Example::

        poller = client.accounts.begin_create("my-rg", "myaccount", params)
        print(poller.status())          # "Initiated"
        account = poller.result(timeout=600)
        print(poller.status())          # "Succeeded"

    Cancellation from another thread::

        poller = client.accounts.begin_delete("my-rg", "myaccount")
        threading.Timer(5, poller.cancel).start()
        poller.result()  # raises OperationCancelledError
    """

    def __init__(
        self,
        client: "_ManagementClient",
        operation: str,
        initial: Union[Terminal, Pending],
        initial_exchange: "_Exchange",
        *,
        kind: LROKind = LROKind.CREATE_OR_UPDATE,
        resource_url: Optional[str] = None,
        deserialize: Optional[Callable[[Dict[str, Any]], T]] = None,
        polling_interval: float = 30.0,
        cancellation: Optional[CancellationToken] = None,
    ) -> None:
        self._client = client
        self._operation = operation
        self._kind = LROKind(kind)
        self._resource_url = resource_url
        self._deserialize = deserialize
        self._polling_interval = max(0.0, float(polling_interval))
        self._token = cancellation or CancellationToken()
        self._lock = threading.Lock()

        self._state = OperationState.INITIATED
        self._metadata: RequestMetadata = initial_exchange.metadata
        self._attempts = 0
        self._last_status: Optional[str] = None
        self._result: Optional[T] = None
        self._error: Optional[BatchManagementError] = None
        self._polling_url: Optional[str] = None
        self._retry_after: Optional[int] = None
        self._final_get_pending = False

        if isinstance(initial, Pending):
            self._polling_url = client._absolute_url(initial.polling_url)
            self._retry_after = initial.retry_after
        else:
            self._last_status = _operation_status(initial.body)
            self._on_succeeded(initial.body, initial_exchange)

    # ----------------------------- public API -------------------------------

    @property
    def polling_url(self) -> Optional[str]:
        return self._polling_url

    @property
    def attempts(self) -> int:
        """Number of polls issued so far."""
        return self._attempts

    @property
    def last_status(self) -> Optional[str]:
        """Status string reported by the latest poll, if any."""
        return self._last_status

    @property
    def metadata(self) -> RequestMetadata:
        """Metadata of the most recent exchange (initial call, poll or final GET)."""
        return self._metadata

    def status(self) -> str:
        return self._state.value

    def done(self) -> bool:
        return self._state in _TERMINAL_STATES

    def cancel(self) -> None:
        """
        Stop polling.

        A poll already on the wire is allowed to finish; no further requests are
        issued and :meth:`result` raises
        :class:`~AzureBatch.Management.core.errors.OperationCancelledError`.
        """
        self._token.cancel()

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the operation is terminal; raise its error if it failed."""
        self.run_until_terminal(Deadline.from_timeout(timeout))

    def result(self, timeout: Optional[float] = None) -> Optional[T]:
        """
        Poll until the operation is terminal and return its result.

        :param timeout: Seconds to wait; ``None`` waits indefinitely.
        :type timeout: float | None
        :return: The deserialized resource for create/update, ``None`` for delete.
        :raises ~AzureBatch.Management.core.errors.OperationFailedError: The operation failed.
        :raises ~AzureBatch.Management.core.errors.HttpError: A non-delete operation polled to 404.
        :raises ~AzureBatch.Management.core.errors.OperationTimeoutError: ``timeout`` elapsed
            first; polling resumes on the next call to :meth:`result`.
        :raises ~AzureBatch.Management.core.errors.OperationCancelledError: :meth:`cancel` was called.
        """
        return self.run_until_terminal(Deadline.from_timeout(timeout))

    def run_until_terminal(self, deadline: Optional[Deadline] = None) -> Optional[T]:
        deadline = deadline or Deadline.from_timeout(None)
        with self._lock:
            while not self.done():
                self._check_cancelled()
                deadline.raise_if_expired(self._polling_url)
                try:
                    if self._final_get_pending:
                        self._final_get()
                        continue
                    self._wait_before_poll(deadline)
                    self._state = OperationState.POLLING
                    self._poll_once()
                except OperationCancelledError:
                    self._state = OperationState.CANCELED
                    raise
        if self._error is not None:
            raise self._error
        if self._state is OperationState.CANCELED:
            raise OperationCancelledError(polling_url=self._polling_url)
        return self._result

    # ----------------------------- internals --------------------------------

    def _check_cancelled(self) -> None:
        if self._token.is_cancelled:
            self._state = OperationState.CANCELED
            raise OperationCancelledError(polling_url=self._polling_url)

    def _wait_before_poll(self, deadline: Deadline) -> None:
        delay = float(self._retry_after) if self._retry_after is not None else self._polling_interval
        remaining = deadline.remaining()
        if remaining is not None and remaining < delay:
            if self._token.wait(remaining):
                self._check_cancelled()
            raise OperationTimeoutError(
                f"Operation did not reach a terminal state within {deadline.timeout}s.",
                timeout=deadline.timeout,
                polling_url=self._polling_url,
            )
        if self._token.wait(delay):
            self._check_cancelled()

    def _succeed(self, value: Optional[T]) -> None:
        self._result = value
        self._state = OperationState.SUCCEEDED

    def _fail(self, error: BatchManagementError) -> None:
        self._error = error
        self._state = OperationState.FAILED

    def _poll_once(self) -> None:
        exchange = self._client._request(
            f"{self._operation}.poll", "GET", self._polling_url, cancellation=self._token
        )
        self._attempts += 1
        self._metadata = exchange.metadata
        response = exchange.response
        status = response.status_code
        self._retry_after = _parse_retry_after(response.headers)

        if status == 404 and self._kind is LROKind.DELETE:
            self._last_status = LRO_STATUS_SUCCEEDED
            self._succeed(None)
            return

        if status == 202:
            new_url = _polling_url(response.headers)
            if new_url:
                self._polling_url = self._client._absolute_url(new_url)
            return

        if 200 <= status < 300:
            outcome = classify(response, {status})
            if isinstance(outcome, Failure):
                self._fail(
                    error_for_failure(
                        outcome, operation=self._operation, client_request_id=exchange.metadata.client_request_id
                    )
                )
                return
            self._on_poll_body(outcome.body, exchange)
            return

        outcome = classify(response, frozenset())
        if status == 404:
            self._fail(
                error_for_failure(
                    outcome, operation=self._operation, client_request_id=exchange.metadata.client_request_id
                )
            )
            return
        error = outcome.error if isinstance(outcome, Failure) else None
        self._fail(
            OperationFailedError(
                f"{self._operation}: polling returned status {status}.",
                status_code=status,
                subcode=OPERATION_POLL_HTTP_FAILURE,
                polling_url=self._polling_url,
                service_error_code=error.code if error else None,
                service_error_message=error.message if error else None,
                request_id=exchange.metadata.request_id,
                correlation_id=exchange.metadata.correlation_id,
                client_request_id=exchange.metadata.client_request_id,
            )
        )

    def _on_poll_body(self, body: Any, exchange: "_Exchange") -> None:
        op_status = _operation_status(body)
        self._last_status = op_status

        if op_status is None or op_status.lower() == LRO_STATUS_SUCCEEDED.lower():
            self._last_status = LRO_STATUS_SUCCEEDED
            self._on_succeeded(body, exchange)
            return

        if op_status.lower() in (LRO_STATUS_FAILED.lower(), LRO_STATUS_CANCELED.lower()):
            error = ErrorEnvelope.from_api_response(body) if isinstance(body, dict) else None
            canceled = op_status.lower() == LRO_STATUS_CANCELED.lower()
            detail = f": {error.message}" if error and error.message else "."
            self._fail(
                OperationFailedError(
                    f"{self._operation}: operation finished with status {op_status!r}{detail}",
                    operation_status=op_status,
                    status_code=exchange.response.status_code,
                    subcode=OPERATION_CANCELED_BY_SERVICE if canceled else OPERATION_FAILED,
                    polling_url=self._polling_url,
                    service_error_code=error.code if error else None,
                    service_error_message=error.message if error else None,
                    request_id=exchange.metadata.request_id,
                    correlation_id=exchange.metadata.correlation_id,
                    client_request_id=exchange.metadata.client_request_id,
                )
            )
        # Anything else (InProgress, Running, Creating, unknown values) keeps polling.

    def _on_succeeded(self, body: Any, exchange: "_Exchange") -> None:
        if self._kind is LROKind.DELETE:
            self._succeed(None)
            return
        if _is_status_envelope(body):
            # Fetched by the polling loop; stays pending until the GET completes.
            self._final_get_pending = True
            return
        self._deliver(body, exchange)

    def _deliver(self, body: Any, exchange: "_Exchange") -> None:
        try:
            value = self._client._deserialize(self._operation, self._deserialize, body, exchange)
        except MalformedResponseError as e:
            self._fail(e)
            return
        self._succeed(value)

    def _final_get(self) -> None:
        """Fetch the resource once the operation succeeded without returning it."""
        if not self._resource_url:
            self._final_get_pending = False
            self._succeed(None)
            return
        exchange = self._client._request(
            f"{self._operation}.final", "GET", self._resource_url, cancellation=self._token
        )
        self._final_get_pending = False
        self._metadata = exchange.metadata
        outcome = classify(exchange.response, {200})
        if isinstance(outcome, Failure):
            self._fail(
                error_for_failure(
                    outcome,
                    operation=f"{self._operation} (final GET)",
                    client_request_id=exchange.metadata.client_request_id,
                )
            )
            return
        if not isinstance(outcome, Terminal) or outcome.body is None:
            self._fail(
                MalformedResponseError(
                    f"{self._operation}: final GET returned no resource body.",
                    status_code=exchange.response.status_code,
                    request_id=exchange.metadata.request_id,
                    correlation_id=exchange.metadata.correlation_id,
                    client_request_id=exchange.metadata.client_request_id,
                )
            )
            return
        self._deliver(outcome.body, exchange)


__all__ = ["LROPoller", "LROKind", "OperationState"]
