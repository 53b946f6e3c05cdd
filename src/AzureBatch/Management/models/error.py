# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Error envelope returned by Azure Resource Manager on failed calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ErrorEnvelope:
    """
    Service-reported error.

    The management plane wraps errors as ``{"error": {"code", "message",
    "target", "details"}}``; some endpoints return the inner object directly.

    :param code: Service error code, e.g. ``"AccountNotFound"``.
    :type code: str | None
    :param message: Human-readable message.
    :type message: str | None
    :param target: Name of the offending parameter or resource, if reported.
    :type target: str | None
    :param details: Nested error envelopes.
    :type details: list[ErrorEnvelope]
    """

    code: Optional[str] = None
    message: Optional[str] = None
    target: Optional[str] = None
    details: List["ErrorEnvelope"] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: Any) -> Optional["ErrorEnvelope"]:
        """
        Parse an error body.

        :return: The envelope, or ``None`` if ``data`` does not look like an error.
        :rtype: ErrorEnvelope | None
        """
        if not isinstance(data, dict):
            return None
        inner = data.get("error", data)
        if not isinstance(inner, dict):
            return None
        code = inner.get("code")
        message = inner.get("message")
        if not isinstance(code, str) and not isinstance(message, str):
            return None
        details: List[ErrorEnvelope] = []
        raw_details = inner.get("details")
        for item in raw_details if isinstance(raw_details, list) else []:
            parsed = cls.from_api_response(item)
            if parsed is not None:
                details.append(parsed)
        return cls(
            code=code if isinstance(code, str) else None,
            message=message if isinstance(message, str) else None,
            target=inner.get("target") if isinstance(inner.get("target"), str) else None,
            details=details,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "target": self.target,
            "details": [d.to_dict() for d in self.details],
        }
