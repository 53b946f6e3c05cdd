# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Declarative descriptions of the Batch management REST operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Optional

from ..data._polling import LROKind


@dataclass(frozen=True)
class ResourceOperation:
    """
    One REST operation of the management plane.

    :param name: Operation name used in telemetry spans, logs and error messages.
    :type name: str
    :param method: HTTP verb.
    :type method: str
    :param path: Path template below the endpoint; ``{subscriptionId}`` is always filled in.
    :type path: str
    :param accepted: Status codes that mean the request was accepted.
    :type accepted: frozenset[int]
    :param deserialize: Parser for the response body, or ``None`` when the body is ignored.
    :param build_body: Turns the caller's parameter object into the JSON request body.
    :param lro: Long-running operation semantics, or ``None`` for a plain call.
    :type lro: LROKind | None
    :param paged: ``True`` for list operations that follow ``nextLink``.
    :type paged: bool
    :param many: ``True`` when the body is a bare JSON array of items, each parsed with ``deserialize``.
    :type many: bool
    """

    name: str
    method: str
    path: str
    accepted: FrozenSet[int]
    deserialize: Optional[Callable[[Dict[str, Any]], Any]] = None
    build_body: Optional[Callable[[Any], Any]] = None
    lro: Optional[LROKind] = None
    paged: bool = False
    many: bool = False


def _to_wire(parameters: Any) -> Any:
    """Serialize a parameter model, passing plain mappings through."""
    to_dict = getattr(parameters, "to_dict", None)
    return to_dict() if callable(to_dict) else parameters


def _codes(*codes: int) -> FrozenSet[int]:
    return frozenset(codes)


__all__ = ["ResourceOperation", "LROKind"]
