# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured exceptions raised by the Batch management client.

Every error carries a machine-readable ``code`` (the error kind), an optional
``subcode``, the HTTP status when one is known, and a ``details`` mapping with
correlation identifiers returned by the service.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional


class BatchManagementError(Exception):
    """Base structured error for the Batch management client."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    @property
    def request_id(self) -> Optional[str]:
        """Server-assigned ``x-ms-request-id`` of the failing exchange, if any."""
        return self.details.get("request_id")

    @property
    def correlation_id(self) -> Optional[str]:
        """``x-ms-correlation-request-id`` of the failing exchange, if any."""
        return self.details.get("correlation_id")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ValidationError(BatchManagementError):
    """A required argument is missing or malformed. Raised before any request is sent."""

    def __init__(
        self,
        message: str,
        *,
        parameter: Optional[str] = None,
        subcode: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if parameter is not None:
            d["parameter"] = parameter
        super().__init__(message, code="validation_error", subcode=subcode, details=d, source="client")

    @property
    def parameter(self) -> Optional[str]:
        return self.details.get("parameter")


class TransportError(BatchManagementError):
    """The transport could not complete the HTTP exchange."""

    def __init__(self, message: str, *, method: Optional[str] = None, url: Optional[str] = None) -> None:
        d: Dict[str, Any] = {}
        if method is not None:
            d["method"] = method
        if url is not None:
            d["url"] = url
        super().__init__(message, code="transport_error", details=d, source="client", is_transient=True)


def _response_details(
    request_id: Optional[str],
    correlation_id: Optional[str],
    client_request_id: Optional[str],
    details: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    d = details or {}
    if request_id is not None:
        d["request_id"] = request_id
    if correlation_id is not None:
        d["correlation_id"] = correlation_id
    if client_request_id is not None:
        d["client_request_id"] = client_request_id
    return d


class HttpError(BatchManagementError):
    """The service answered with a status outside the operation's accepted set."""

    def __init__(
        self,
        message: str,
        status_code: int,
        is_transient: bool = False,
        subcode: Optional[str] = None,
        service_error_code: Optional[str] = None,
        service_error_message: Optional[str] = None,
        request_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
        client_request_id: Optional[str] = None,
        body_excerpt: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = _response_details(request_id, correlation_id, client_request_id, details)
        if service_error_code is not None:
            d["service_error_code"] = service_error_code
        if service_error_message is not None:
            d["service_error_message"] = service_error_message
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        if retry_after is not None:
            d["retry_after"] = retry_after
        super().__init__(
            message,
            code="http_error",
            subcode=subcode,
            status_code=status_code,
            details=d,
            source="server",
            is_transient=is_transient,
        )

    @property
    def service_error_code(self) -> Optional[str]:
        return self.details.get("service_error_code")


# Name used by callers that think in terms of "the service rejected the call".
ServiceError = HttpError


class MalformedResponseError(BatchManagementError):
    """The status code was meaningful but the body did not have the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        subcode: Optional[str] = None,
        body_excerpt: Optional[str] = None,
        request_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
        client_request_id: Optional[str] = None,
    ) -> None:
        d = _response_details(request_id, correlation_id, client_request_id, None)
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        super().__init__(
            message,
            code="malformed_response",
            subcode=subcode,
            status_code=status_code,
            details=d,
            source="server",
        )


class OperationFailedError(BatchManagementError):
    """A long-running operation reached a terminal failed state."""

    def __init__(
        self,
        message: str,
        *,
        operation_status: Optional[str] = None,
        status_code: Optional[int] = None,
        subcode: Optional[str] = None,
        polling_url: Optional[str] = None,
        service_error_code: Optional[str] = None,
        service_error_message: Optional[str] = None,
        request_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
        client_request_id: Optional[str] = None,
    ) -> None:
        d = _response_details(request_id, correlation_id, client_request_id, None)
        if operation_status is not None:
            d["operation_status"] = operation_status
        if polling_url is not None:
            d["polling_url"] = polling_url
        if service_error_code is not None:
            d["service_error_code"] = service_error_code
        if service_error_message is not None:
            d["service_error_message"] = service_error_message
        super().__init__(
            message,
            code="operation_failed",
            subcode=subcode,
            status_code=status_code,
            details=d,
            source="server",
        )

    @property
    def operation_status(self) -> Optional[str]:
        return self.details.get("operation_status")


class OperationCancelledError(BatchManagementError):
    """The caller cancelled a poll or page fetch before it finished."""

    def __init__(self, message: str = "Operation was cancelled by the caller.", *, polling_url: Optional[str] = None) -> None:
        d: Dict[str, Any] = {}
        if polling_url is not None:
            d["polling_url"] = polling_url
        super().__init__(message, code="operation_cancelled", details=d, source="client")


class OperationTimeoutError(BatchManagementError):
    """The caller-imposed deadline elapsed while polling or paginating."""

    def __init__(
        self,
        message: str,
        *,
        timeout: Optional[float] = None,
        polling_url: Optional[str] = None,
    ) -> None:
        d: Dict[str, Any] = {}
        if timeout is not None:
            d["timeout"] = timeout
        if polling_url is not None:
            d["polling_url"] = polling_url
        super().__init__(message, code="operation_timeout", details=d, source="client")


__all__ = [
    "BatchManagementError",
    "ValidationError",
    "TransportError",
    "HttpError",
    "ServiceError",
    "MalformedResponseError",
    "OperationFailedError",
    "OperationCancelledError",
    "OperationTimeoutError",
]
