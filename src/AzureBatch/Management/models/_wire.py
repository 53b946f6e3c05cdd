# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Lenient conversions for values read from service JSON."""

from __future__ import annotations

import datetime as _dt
import re
from typing import Any, Dict, Optional

_FRACTION_RE = re.compile(r"\.(\d+)")


def _parse_datetime(value: Any) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp as emitted by the service.

    Accepts a trailing ``Z`` and fractional seconds of any precision (the
    service commonly sends seven digits); returns ``None`` for missing or
    unparseable values.
    """
    if isinstance(value, _dt.datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return _dt.datetime.fromisoformat(text)
    except ValueError:
        return None


def _format_datetime(value: Optional[_dt.datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def _parse_int(value: Any) -> Optional[int]:
    """Read an integer that may arrive as a JSON number or a numeric string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _parse_bool(value: Any) -> Optional[bool]:
    """Read a boolean that may arrive as ``true``/``"true"``."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
    return None


def _drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Remove keys whose value is ``None`` so PATCH payloads only carry set fields."""
    return {k: v for k, v in payload.items() if v is not None}


def _parse_enum(enum_cls, value: Any):
    """
    Match ``value`` against ``enum_cls`` members case-insensitively.

    Values the client does not know yet are returned unchanged as strings.
    """
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    text = str(value)
    for member in enum_cls:
        if member.value.lower() == text.lower():
            return member
    return text


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)
