# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Low-level management-plane client.

:class:`_ManagementClient` owns the transport, the credential and the telemetry
manager. It stamps the standard headers on every outbound request and exposes
one generic :meth:`_ManagementClient._invoke` that turns a
:class:`~AzureBatch.Management.operations._descriptors.ResourceOperation`
descriptor into a typed result, a long-running operation poller, or a lazily
paged sequence.
"""

from __future__ import annotations

import json
import platform
import time
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional
from urllib.parse import quote, urlencode, urljoin

import requests

from ..common.constants import (
    ARM_SCOPE,
    HEADER_ACCEPT_LANGUAGE,
    HEADER_AUTHORIZATION,
    HEADER_CLIENT_REQUEST_ID,
    HEADER_CORRELATION_REQUEST_ID,
    HEADER_REQUEST_ID,
    HEADER_USER_AGENT,
    SDK_NAME,
    SDK_VERSION,
)
from ..core._auth import _AuthManager
from ..core._http import HttpResponse, HttpTransport, _HttpClient
from ..core.cancellation import CancellationToken, Deadline
from ..core.config import BatchManagementConfig
from ..core.errors import MalformedResponseError
from ..core.results import OperationResult, RequestMetadata
from ..core.telemetry import create_telemetry_manager
from ._classifier import Failure, Pending, Terminal, classify, error_for_failure
from ._paging import ItemPaged, PageIterator
from ._polling import LROPoller

if TYPE_CHECKING:
    from ..operations._descriptors import ResourceOperation


@dataclass(frozen=True)
class _Exchange:
    """One HTTP response together with the identifiers needed to report on it."""

    response: HttpResponse
    metadata: RequestMetadata


def _user_agent(suffix: Optional[str]) -> str:
    ua = f"{SDK_NAME}/{SDK_VERSION} Python/{platform.python_version()} ({platform.platform(terse=True)})"
    if suffix:
        ua = f"{ua} {suffix}"
    return ua


class _ManagementClient:
    """Azure Resource Manager client scoped to one subscription."""

    def __init__(
        self,
        auth: _AuthManager,
        subscription_id: str,
        config: Optional[BatchManagementConfig] = None,
        *,
        transport: Optional[HttpTransport] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.auth = auth
        self.subscription_id = subscription_id
        self.config = config or BatchManagementConfig.from_env()
        self.base_url = (self.config.base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("base_url is required.")
        self._http: HttpTransport = transport or _HttpClient(
            retries=self.config.http_retries,
            backoff=self.config.http_backoff,
            max_backoff=self.config.http_max_backoff,
            timeout=self.config.http_timeout,
            jitter=self.config.http_jitter,
            session=session,
        )
        self._telemetry = create_telemetry_manager(self.config.telemetry)
        self._user_agent = _user_agent(self.config.user_agent_suffix)

    # ----------------------------- plumbing ---------------------------------

    def _headers(self, client_request_id: str) -> Dict[str, str]:
        """Build the standard management-plane headers with bearer auth."""
        token = self.auth._acquire_token(ARM_SCOPE).access_token
        headers = {
            HEADER_AUTHORIZATION: f"Bearer {token}",
            "Accept": "application/json",
            "Content-Type": "application/json; charset=utf-8",
            HEADER_USER_AGENT: self._user_agent,
            HEADER_CLIENT_REQUEST_ID: client_request_id,
            HEADER_ACCEPT_LANGUAGE: self.config.accept_language,
        }
        headers.update(self._telemetry.get_additional_headers())
        return headers

    def _url(self, path: str, path_params: Mapping[str, str], query: Optional[Mapping[str, Any]] = None) -> str:
        """Expand ``path`` and append ``api-version`` plus any extra query parameters."""
        params = {"subscriptionId": self.subscription_id, **path_params}
        expanded = path.format(**{k: quote(str(v), safe="") for k, v in params.items()})
        q: Dict[str, Any] = {"api-version": self.config.api_version}
        for k, v in (query or {}).items():
            if v is not None:
                q[k] = v
        return f"{self.base_url}{expanded}?{urlencode(q)}"

    def _absolute_url(self, link: str) -> str:
        """Resolve a next link or polling URL that the service may send relative."""
        return urljoin(self.base_url + "/", link)

    def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        body: Any = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> _Exchange:
        """
        Send one request through the transport with telemetry around it.

        :raises ~AzureBatch.Management.core.errors.TransportError: If the transport fails.
        :raises ~AzureBatch.Management.core.errors.OperationCancelledError: If ``cancellation`` fired.
        """
        client_request_id = str(uuid.uuid4())
        payload = json.dumps(body).encode("utf-8") if body is not None else None
        with self._telemetry.trace_request(operation, method, url, client_request_id) as ctx:
            started = time.perf_counter()
            response = self._http.send(
                method,
                url,
                headers=self._headers(client_request_id),
                body=payload,
                cancellation=cancellation,
            )
            timing_ms = (time.perf_counter() - started) * 1000
            self._telemetry.record_response(
                ctx,
                response.status_code,
                request_id=response.headers.get(HEADER_REQUEST_ID),
                correlation_id=response.headers.get(HEADER_CORRELATION_REQUEST_ID),
                response_size=len(response.body),
            )
        metadata = RequestMetadata.from_headers(
            response.headers,
            client_request_id=client_request_id,
            status_code=response.status_code,
            timing_ms=timing_ms,
        )
        return _Exchange(response=response, metadata=metadata)

    def _deserialize(self, operation: str, deserialize, body: Any, exchange: _Exchange, *, many: bool = False) -> Any:
        """
        Apply a model parser, reporting a wrong body shape as a malformed response.

        With ``many`` the body must be a JSON array of objects and a list of
        parsed items is returned.
        """
        if deserialize is None:
            return None
        if body is None:
            return [] if many else None
        expected = list if many else dict
        if not isinstance(body, expected) or (many and not all(isinstance(item, dict) for item in body)):
            raise MalformedResponseError(
                f"{operation}: expected a JSON {'array of objects' if many else 'object'}, got {type(body).__name__}.",
                status_code=exchange.response.status_code,
                request_id=exchange.metadata.request_id,
                correlation_id=exchange.metadata.correlation_id,
                client_request_id=exchange.metadata.client_request_id,
            )
        try:
            if many:
                return [deserialize(item) for item in body]
            return deserialize(body)
        except (TypeError, ValueError, AttributeError) as exc:
            raise MalformedResponseError(
                f"{operation}: response body could not be parsed: {exc}",
                status_code=exchange.response.status_code,
                request_id=exchange.metadata.request_id,
                correlation_id=exchange.metadata.correlation_id,
                client_request_id=exchange.metadata.client_request_id,
            ) from exc

    # ----------------------------- facade -----------------------------------

    def _invoke(
        self,
        op: "ResourceOperation",
        path_params: Mapping[str, str],
        *,
        body: Any = None,
        query: Optional[Mapping[str, Any]] = None,
        cancellation: Optional[CancellationToken] = None,
        polling_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        """
        Execute a resource operation described by ``op``.

        :return: :class:`~AzureBatch.Management.core.results.OperationResult` for plain calls,
            :class:`~AzureBatch.Management.data._polling.LROPoller` when ``op.lro`` is set,
            :class:`~AzureBatch.Management.data._paging.ItemPaged` when ``op.paged`` is set.
        """
        url = self._url(op.path, path_params, query)
        if body is not None and op.build_body is not None:
            body = op.build_body(body)

        if op.paged:
            return ItemPaged(
                lambda deadline: PageIterator(
                    self,
                    op.name,
                    url,
                    op.deserialize,
                    cancellation=cancellation,
                    deadline=deadline,
                ),
                timeout=timeout,
            )

        exchange = self._request(op.name, op.method, url, body=body, cancellation=cancellation)
        outcome = classify(exchange.response, op.accepted)

        if op.lro is not None:
            if isinstance(outcome, Failure):
                raise error_for_failure(
                    outcome, operation=op.name, client_request_id=exchange.metadata.client_request_id
                )
            resource_url = self._url(op.path, path_params)
            return LROPoller(
                self,
                op.name,
                outcome,
                exchange,
                kind=op.lro,
                resource_url=resource_url,
                deserialize=op.deserialize,
                polling_interval=(
                    polling_interval if polling_interval is not None else self.config.polling_interval
                ),
                cancellation=cancellation,
            )

        if isinstance(outcome, Pending):
            raise MalformedResponseError(
                f"{op.name}: service accepted the call asynchronously but the operation is synchronous.",
                status_code=outcome.status_code,
                request_id=exchange.metadata.request_id,
                correlation_id=exchange.metadata.correlation_id,
                client_request_id=exchange.metadata.client_request_id,
            )
        if isinstance(outcome, Terminal):
            value = self._deserialize(op.name, op.deserialize, outcome.body, exchange, many=op.many)
            return OperationResult(value, exchange.metadata)
        raise error_for_failure(outcome, operation=op.name, client_request_id=exchange.metadata.client_request_id)

    def _list_next(
        self,
        op: "ResourceOperation",
        next_link: str,
        *,
        cancellation: Optional[CancellationToken] = None,
    ):
        """Fetch exactly one page starting at ``next_link``."""
        iterator = PageIterator(
            self,
            op.name,
            self._absolute_url(next_link),
            op.deserialize,
            cancellation=cancellation,
            deadline=Deadline.from_timeout(None),
        )
        return iterator.first()

    def close(self) -> None:
        close = getattr(self._http, "close", None)
        if callable(close):
            close()
