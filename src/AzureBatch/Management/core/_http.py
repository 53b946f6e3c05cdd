# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
HTTP transport with automatic retry of network errors, timeout handling, and
optional session support.

This module provides :class:`~AzureBatch.Management.core._http._HttpClient`, a
wrapper around the requests library that sends one logical HTTP exchange and
returns an immutable :class:`HttpResponse`. Only network-level failures are
retried here; status codes are interpreted by the response classifier.
"""

from __future__ import annotations

import json
import random
import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol

import requests
from requests.structures import CaseInsensitiveDict

from .cancellation import CancellationToken
from .errors import TransportError


@dataclass(frozen=True)
class HttpResponse:
    """
    Completed HTTP exchange as seen by the rest of the client.

    :param status_code: HTTP status code.
    :type status_code: int
    :param headers: Response headers (case-insensitive lookup).
    :type headers: ~requests.structures.CaseInsensitiveDict
    :param body: Raw response body.
    :type body: bytes
    """

    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""

    @classmethod
    def build(cls, status_code: int, headers: Optional[Mapping[str, str]] = None, body: Any = None) -> "HttpResponse":
        """Build a response from loosely-typed parts (``dict``/``list`` bodies are JSON-encoded)."""
        if body is None:
            raw = b""
        elif isinstance(body, bytes):
            raw = body
        elif isinstance(body, str):
            raw = body.encode("utf-8")
        else:
            raw = json.dumps(body).encode("utf-8")
        return cls(status_code=status_code, headers=CaseInsensitiveDict(headers or {}), body=raw)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON.

        :raises ValueError: If the body is not valid JSON.
        """
        return json.loads(self.text)


class HttpTransport(Protocol):
    """Anything able to perform one HTTP exchange on behalf of the client."""

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[bytes] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> HttpResponse: ...


class _HttpClient:
    """
    HTTP client with configurable retry logic, timeout handling, and optional session support.

    Retries transient network failures with exponential backoff and jitter. HTTP
    status codes are never retried here: an operation that the service rejects
    is reported to the caller as-is.

    :param retries: Maximum number of attempts for network errors. Default is 5.
    :type retries: :class:`int` | None
    :param backoff: Base delay in seconds between attempts. Default is 0.5.
    :type backoff: :class:`float` | None
    :param max_backoff: Upper bound on a single delay in seconds. Default is 60.0.
    :type max_backoff: :class:`float` | None
    :param timeout: Default request timeout in seconds. If None, uses per-method defaults.
    :type timeout: :class:`float` | None
    :param jitter: Whether to add ±25% random variation to delays. Default is True.
    :type jitter: :class:`bool` | None
    :param session: Optional requests.Session for connection pooling.
    :type session: :class:`requests.Session` | None
    """

    def __init__(
        self,
        retries: Optional[int] = None,
        backoff: Optional[float] = None,
        max_backoff: Optional[float] = None,
        timeout: Optional[float] = None,
        jitter: Optional[bool] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        # At least one attempt is always made.
        self.max_attempts = max(1, retries) if retries is not None else 5
        self.base_delay = backoff if backoff is not None else 0.5
        self.max_backoff = max_backoff if max_backoff is not None else 60.0
        self.default_timeout: Optional[float] = timeout
        self.jitter = jitter if jitter is not None else True
        self._session = session

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[bytes] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> HttpResponse:
        """
        Execute an HTTP request with automatic retry of network errors.

        Applies default timeouts based on HTTP method (120s for PUT/POST/DELETE,
        30s for others). When a session is configured, uses the session for
        connection pooling; otherwise uses standalone requests.

        :param method: HTTP method (GET, PUT, POST, PATCH, DELETE).
        :type method: :class:`str`
        :param url: Absolute target URL.
        :type url: :class:`str`
        :param headers: Request headers.
        :type headers: :class:`dict` | None
        :param body: Encoded request body.
        :type body: :class:`bytes` | None
        :param cancellation: Token checked before each attempt and during backoff waits.
        :type cancellation: ~AzureBatch.Management.core.cancellation.CancellationToken | None
        :return: The completed response.
        :rtype: ~AzureBatch.Management.core._http.HttpResponse
        :raises ~AzureBatch.Management.core.errors.TransportError: If all attempts fail.
        :raises ~AzureBatch.Management.core.errors.OperationCancelledError: If cancelled before sending.
        """
        if self.default_timeout is not None:
            timeout = self.default_timeout
        else:
            m = (method or "").lower()
            timeout = 120 if m in ("put", "post", "delete") else 30

        for attempt in range(self.max_attempts):
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            try:
                r = self._raw_request(method, url, headers=dict(headers or {}), data=body, timeout=timeout)
            except requests.exceptions.RequestException as e:
                if attempt >= self.max_attempts - 1:
                    raise TransportError(f"{method.upper()} {url} failed: {e}", method=method.upper(), url=url) from e
                delay = self._calculate_retry_delay(attempt)
                if cancellation is not None:
                    if cancellation.wait(delay):
                        cancellation.raise_if_cancelled()
                else:
                    time.sleep(delay)
                continue
            return HttpResponse(
                status_code=r.status_code,
                headers=CaseInsensitiveDict(r.headers or {}),
                body=r.content or b"",
            )

        raise RuntimeError("Unexpected end of retry loop")  # pragma: no cover

    def _raw_request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        if self._session is not None:
            return self._session.request(method, url, **kwargs)
        return requests.request(method, url, **kwargs)

    def _calculate_retry_delay(self, attempt: int) -> float:
        """
        Exponential backoff ``base_delay * 2**attempt`` capped at ``max_backoff``,
        with ±25% jitter when enabled. Always >= 0.
        """
        delay = min(self.base_delay * (2**attempt), self.max_backoff)
        if self.jitter:
            jitter_range = delay * 0.25
            delay = max(0.0, delay + random.uniform(-jitter_range, jitter_range))
        return delay

    def close(self) -> None:
        """
        Close the HTTP client and release resources.

        If a session was provided, this method closes it. Safe to call multiple times.
        """
        if self._session is not None:
            self._session.close()
            self._session = None
