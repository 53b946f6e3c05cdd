# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Response classification.

:func:`classify` maps a completed :class:`~AzureBatch.Management.core._http.HttpResponse`
and the status codes an operation accepts onto one of three outcomes:

- :class:`Terminal`: the call finished; ``body`` holds the decoded JSON (or ``None``).
- :class:`Pending`: the service accepted the call (202) and named a polling URL.
- :class:`Failure`: anything else, including bodies that do not decode.

Classification never raises because of body shape. :func:`raise_for_failure`
turns a :class:`Failure` into the matching exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, Any, Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict

from ..common.constants import (
    HEADER_ASYNC_OPERATION,
    HEADER_CORRELATION_REQUEST_ID,
    HEADER_LOCATION,
    HEADER_REQUEST_ID,
    HEADER_RETRY_AFTER,
)
from ..core._error_codes import (
    MALFORMED_BODY,
    MALFORMED_ERROR_BODY,
    MALFORMED_MISSING_POLLING_URL,
    _http_subcode,
    _is_transient_status,
)
from ..core._http import HttpResponse
from ..core.errors import BatchManagementError, HttpError, MalformedResponseError
from ..models.error import ErrorEnvelope

_ACCEPTED = 202
_BODY_EXCERPT_LIMIT = 200


@dataclass(frozen=True)
class Terminal:
    """The operation completed with an accepted status."""

    status_code: int
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)


@dataclass(frozen=True)
class Pending:
    """The service is executing the operation asynchronously."""

    polling_url: str
    status_code: int = _ACCEPTED
    retry_after: Optional[int] = None
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)


@dataclass(frozen=True)
class Failure:
    """
    The exchange did not produce a usable result.

    :param status_code: HTTP status of the response.
    :param error: Parsed service error envelope, when the body had that shape.
    :param raw_body: Undecoded response body.
    :param malformed: ``True`` when the body could not be decoded as expected.
    :param subcode: Reason for a malformed classification, if any.
    """

    status_code: int
    error: Optional[ErrorEnvelope] = None
    raw_body: bytes = b""
    malformed: bool = False
    subcode: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)


Outcome = Union[Terminal, Pending, Failure]


def _parse_retry_after(headers: Mapping[str, str]) -> Optional[int]:
    """Integer seconds from ``Retry-After``; ``None`` if absent or not an integer."""
    value = headers.get(HEADER_RETRY_AFTER)
    if value is None:
        return None
    try:
        seconds = int(str(value).strip())
    except (ValueError, TypeError):
        return None
    return seconds if seconds >= 0 else None


def _polling_url(headers: Mapping[str, str]) -> Optional[str]:
    for name in (HEADER_ASYNC_OPERATION, HEADER_LOCATION):
        value = headers.get(name)
        if value and value.strip():
            return value.strip()
    return None


def classify(response: HttpResponse, acceptable_codes: AbstractSet[int]) -> Outcome:
    """
    Classify a response against the status codes an operation accepts.

    :param response: Completed HTTP exchange.
    :type response: ~AzureBatch.Management.core._http.HttpResponse
    :param acceptable_codes: Statuses the operation treats as "request accepted".
    :type acceptable_codes: set[int]
    :return: :class:`Terminal`, :class:`Pending` or :class:`Failure`.
    """
    status = response.status_code
    headers = response.headers

    if status == _ACCEPTED:
        url = _polling_url(headers)
        if url:
            return Pending(
                polling_url=url,
                status_code=status,
                retry_after=_parse_retry_after(headers),
                headers=headers,
            )
        if status in acceptable_codes:
            return Failure(
                status_code=status,
                raw_body=response.body,
                malformed=True,
                subcode=MALFORMED_MISSING_POLLING_URL,
                headers=headers,
            )

    if status in acceptable_codes and status != _ACCEPTED:
        if not response.body.strip():
            return Terminal(status_code=status, body=None, headers=headers)
        try:
            body = response.json()
        except ValueError:
            return Failure(
                status_code=status,
                raw_body=response.body,
                malformed=True,
                subcode=MALFORMED_BODY,
                headers=headers,
            )
        return Terminal(status_code=status, body=body, headers=headers)

    if not response.body.strip():
        return Failure(status_code=status, raw_body=response.body, headers=headers)
    try:
        error = ErrorEnvelope.from_api_response(response.json())
    except ValueError:
        error = None
    return Failure(
        status_code=status,
        error=error,
        raw_body=response.body,
        malformed=error is None,
        subcode=MALFORMED_ERROR_BODY if error is None else None,
        headers=headers,
    )


def _body_excerpt(raw: bytes) -> Optional[str]:
    if not raw:
        return None
    return raw.decode("utf-8", errors="replace")[:_BODY_EXCERPT_LIMIT]


def error_for_failure(
    failure: Failure,
    *,
    operation: str,
    client_request_id: Optional[str] = None,
) -> BatchManagementError:
    """
    Build the exception describing ``failure``.

    A 2xx status with an undecodable body yields :class:`MalformedResponseError`;
    every other status yields :class:`HttpError` carrying the service error
    envelope when available and the raw body excerpt otherwise.
    """
    headers = failure.headers
    request_id = headers.get(HEADER_REQUEST_ID)
    correlation_id = headers.get(HEADER_CORRELATION_REQUEST_ID)
    excerpt = _body_excerpt(failure.raw_body)

    if failure.malformed and 200 <= failure.status_code < 300:
        return MalformedResponseError(
            f"{operation}: status {failure.status_code} returned a body that could not be decoded.",
            status_code=failure.status_code,
            subcode=failure.subcode,
            body_excerpt=excerpt,
            request_id=request_id,
            correlation_id=correlation_id,
            client_request_id=client_request_id,
        )

    error = failure.error
    if error is not None and error.message:
        message = f"{operation} failed with status {failure.status_code}: {error.message}"
    else:
        message = f"{operation} failed with status {failure.status_code}."
    return HttpError(
        message,
        status_code=failure.status_code,
        is_transient=_is_transient_status(failure.status_code),
        subcode=_http_subcode(failure.status_code),
        service_error_code=error.code if error is not None else None,
        service_error_message=error.message if error is not None else None,
        request_id=request_id,
        correlation_id=correlation_id,
        client_request_id=client_request_id,
        body_excerpt=excerpt if error is None else None,
        retry_after=_parse_retry_after(headers),
        details={"malformed_body": True} if failure.malformed else None,
    )


def raise_for_failure(
    outcome: Outcome,
    *,
    operation: str,
    client_request_id: Optional[str] = None,
) -> None:
    """Raise the matching exception if ``outcome`` is a :class:`Failure`."""
    if isinstance(outcome, Failure):
        raise error_for_failure(outcome, operation=operation, client_request_id=client_request_id)


__all__ = [
    "Terminal",
    "Pending",
    "Failure",
    "Outcome",
    "classify",
    "error_for_failure",
    "raise_for_failure",
]
