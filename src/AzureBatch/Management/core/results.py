# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Result types for Batch management operations.

- :class:`RequestMetadata`: HTTP request/response identifiers for diagnostics
- :class:`BatchResponse`: Result value plus a telemetry dictionary
- :class:`OperationResult`: Wrapper that behaves like its value by default and
  exposes telemetry through ``.with_response_details()``

Example::

    keys = client.accounts.list_keys("rg", "acct")
    print(keys.primary)  # attribute access is forwarded to the value

    response = client.accounts.list_keys("rg", "acct").with_response_details()
    print(response.telemetry["request_id"])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterator, Mapping, Optional, TypeVar

from ..common.constants import (
    HEADER_CORRELATION_REQUEST_ID,
    HEADER_REQUEST_ID,
)

T = TypeVar("T")


@dataclass(frozen=True)
class RequestMetadata:
    """
    HTTP request/response metadata for diagnostics and tracing.

    :param client_request_id: Client-generated ID sent in ``x-ms-client-request-id``.
    :type client_request_id: :class:`str` | None
    :param request_id: Server-returned ``x-ms-request-id``.
    :type request_id: :class:`str` | None
    :param correlation_id: Server-returned ``x-ms-correlation-request-id``.
    :type correlation_id: :class:`str` | None
    :param http_status_code: HTTP response status code.
    :type http_status_code: :class:`int` | None
    :param timing_ms: Duration of the exchange in milliseconds.
    :type timing_ms: :class:`float` | None
    """

    client_request_id: Optional[str] = None
    request_id: Optional[str] = None
    correlation_id: Optional[str] = None
    http_status_code: Optional[int] = None
    timing_ms: Optional[float] = None

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        *,
        client_request_id: Optional[str] = None,
        status_code: Optional[int] = None,
        timing_ms: Optional[float] = None,
    ) -> "RequestMetadata":
        return cls(
            client_request_id=client_request_id,
            request_id=headers.get(HEADER_REQUEST_ID),
            correlation_id=headers.get(HEADER_CORRELATION_REQUEST_ID),
            http_status_code=status_code,
            timing_ms=timing_ms,
        )


@dataclass
class BatchResponse(Generic[T]):
    """
    Operation result combined with telemetry data.

    :param result: The operation result.
    :type result: T
    :param telemetry: ``client_request_id``, ``request_id``, ``correlation_id``,
        ``http_status_code`` and ``timing_ms``.
    :type telemetry: :class:`dict`
    """

    result: T
    telemetry: Dict[str, Any] = field(default_factory=dict)


class OperationResult(Generic[T]):
    """
    Wrapper that acts like its underlying value and carries request metadata.

    Attribute access, iteration, indexing, ``len``, ``in``, equality and
    truthiness are forwarded to the wrapped value. Call
    :meth:`with_response_details` to obtain a :class:`BatchResponse`.
    """

    __slots__ = ("_result", "_metadata")

    def __init__(self, result: T, metadata: Optional[RequestMetadata] = None) -> None:
        self._result = result
        self._metadata = metadata or RequestMetadata()

    @property
    def value(self) -> T:
        return self._result

    @property
    def metadata(self) -> RequestMetadata:
        return self._metadata

    def with_response_details(self) -> BatchResponse[T]:
        telemetry: Dict[str, Any] = {
            "client_request_id": self._metadata.client_request_id,
            "request_id": self._metadata.request_id,
            "correlation_id": self._metadata.correlation_id,
            "http_status_code": self._metadata.http_status_code,
            "timing_ms": self._metadata.timing_ms,
        }
        return BatchResponse(result=self._result, telemetry=telemetry)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not defined on the wrapper itself.
        if name.startswith("__") or name in OperationResult.__slots__:
            raise AttributeError(name)
        return getattr(self._result, name)

    def __iter__(self) -> Iterator:
        if isinstance(self._result, (list, tuple)):
            return iter(self._result)
        return iter([self._result])

    def __getitem__(self, key: Any) -> Any:
        return self._result[key]  # type: ignore

    def __len__(self) -> int:
        if isinstance(self._result, (list, tuple, dict)):
            return len(self._result)
        return 1

    def __contains__(self, item: Any) -> bool:
        if isinstance(self._result, (list, tuple, dict, str)):
            return item in self._result
        return item == self._result

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OperationResult):
            return self._result == other._result
        return self._result == other

    def __bool__(self) -> bool:
        return bool(self._result)

    def __hash__(self) -> int:
        if isinstance(self._result, (list, dict)):
            raise TypeError(f"unhashable type: 'OperationResult' with {type(self._result).__name__}")
        return hash(self._result)

    def __str__(self) -> str:
        return str(self._result)

    def __repr__(self) -> str:
        return f"OperationResult({self._result!r})"


__all__ = ["RequestMetadata", "BatchResponse", "OperationResult"]
