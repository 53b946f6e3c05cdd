# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Lazy pagination over ``nextLink`` list responses.

A list response is ``{"value": [...], "nextLink": "..."}``. The iterator
follows ``nextLink`` until it is absent or empty. A page with no items but a
next link is still followed. Pages are fetched only when requested, in service
order, and only the current page is held in memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Generic,
    Iterator,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from ..core.cancellation import CancellationToken, Deadline
from ..core.errors import MalformedResponseError
from ..core.results import RequestMetadata
from ._classifier import Failure, Pending, classify, error_for_failure

if TYPE_CHECKING:
    from ._rest import _Exchange, _ManagementClient

T = TypeVar("T")


class _End:
    """Marker returned by :meth:`PageIterator.next` after the last page."""

    _instance: Optional["_End"] = None

    def __new__(cls) -> "_End":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END"

    def __bool__(self) -> bool:
        return False


END = _End()


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    One page of a list response.

    :param items: Deserialized items, in service order.
    :type items: tuple
    :param next_link: Absolute URL of the next page, or ``None`` on the last page.
    :type next_link: str | None
    :param metadata: Request metadata of the exchange that produced this page.
    :type metadata: ~AzureBatch.Management.core.results.RequestMetadata
    """

    items: Tuple[T, ...]
    next_link: Optional[str]
    metadata: RequestMetadata

    @property
    def is_last(self) -> bool:
        return not self.next_link

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


class PageIterator(Generic[T]):
    """
    Fetches the pages of one list call.

    :param client: Low-level client that sends the requests.
    :param operation: Operation name used for telemetry and error messages.
    :param url: Absolute URL of the first page.
    :param deserialize: Parser applied to each item.
    :param cancellation: Checked before every fetch.
    :param deadline: Checked before every fetch.
    """

    def __init__(
        self,
        client: "_ManagementClient",
        operation: str,
        url: str,
        deserialize: Optional[Callable[[Dict[str, Any]], T]],
        *,
        cancellation: Optional[CancellationToken] = None,
        deadline: Optional[Deadline] = None,
    ) -> None:
        self._client = client
        self._operation = operation
        self._url = url
        self._deserialize = deserialize
        self._token = cancellation
        self._deadline = deadline or Deadline.from_timeout(None)

    def first(self) -> Page[T]:
        return self._fetch(self._url)

    def next(self, page: Page[T]) -> Union[Page[T], _End]:
        """Fetch the page after ``page``, or return :data:`END` when ``page`` is the last one."""
        if page.is_last:
            return END
        return self._fetch(page.next_link)

    def pages(self) -> Iterator[Page[T]]:
        page: Union[Page[T], _End] = self.first()
        while isinstance(page, Page):
            yield page
            page = self.next(page)

    def _fetch(self, url: str) -> Page[T]:
        if self._token is not None:
            self._token.raise_if_cancelled()
        self._deadline.raise_if_expired()

        exchange = self._client._request(self._operation, "GET", url, cancellation=self._token)
        outcome = classify(exchange.response, {200})
        if isinstance(outcome, Pending):
            raise self._malformed(exchange, "list call answered 202 Accepted")
        if isinstance(outcome, Failure):
            raise error_for_failure(
                outcome, operation=self._operation, client_request_id=exchange.metadata.client_request_id
            )

        body = outcome.body
        if isinstance(body, list):
            raw_items, next_link = body, None
        elif isinstance(body, dict):
            raw_items = body.get("value")
            if raw_items is None:
                raw_items = []
            next_link = body.get("nextLink")
        elif body is None:
            raw_items, next_link = [], None
        else:
            raise self._malformed(exchange, "list body is neither an object nor an array")

        if not isinstance(raw_items, list):
            raise self._malformed(exchange, "'value' is not an array")
        items = []
        for raw in raw_items:
            if not isinstance(raw, dict):
                raise self._malformed(exchange, f"list item is {type(raw).__name__}, expected an object")
            if self._deserialize is None:
                items.append(raw)
                continue
            try:
                items.append(self._deserialize(raw))
            except (TypeError, ValueError, AttributeError) as exc:
                raise self._malformed(exchange, f"list item could not be parsed: {exc}") from exc

        if isinstance(next_link, str) and next_link.strip():
            next_link = self._client._absolute_url(next_link.strip())
        else:
            next_link = None
        return Page(items=tuple(items), next_link=next_link, metadata=exchange.metadata)

    def _malformed(self, exchange: "_Exchange", reason: str) -> MalformedResponseError:
        return MalformedResponseError(
            f"{self._operation}: {reason}.",
            status_code=exchange.response.status_code,
            request_id=exchange.metadata.request_id,
            correlation_id=exchange.metadata.correlation_id,
            client_request_id=exchange.metadata.client_request_id,
        )


class ItemPaged(Generic[T]):
    """
    Lazy iterable over the items of a paged list call.

    Nothing is requested until iteration starts. Each new iteration starts
    again from the first page.

    Example::

        for account in client.accounts.list():
            print(account.name)

        for page in client.accounts.list("my-rg").by_page():
            print(len(page.items), page.next_link)
    """

    def __init__(
        self,
        factory: Callable[[Deadline], PageIterator[T]],
        *,
        timeout: Optional[float] = None,
    ) -> None:
        self._factory = factory
        self._timeout = timeout

    def by_page(self) -> Iterator[Page[T]]:
        """Iterate page by page instead of item by item."""
        return self._factory(Deadline.from_timeout(self._timeout)).pages()

    def __iter__(self) -> Iterator[T]:
        for page in self.by_page():
            yield from page.items


__all__ = ["Page", "PageIterator", "ItemPaged", "END"]
