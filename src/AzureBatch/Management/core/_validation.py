# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Argument checks performed before any request leaves the client."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Pattern

from ._error_codes import (
    VALIDATION_LENGTH,
    VALIDATION_PATTERN,
    VALIDATION_REQUIRED,
)
from .errors import ValidationError


@dataclass(frozen=True)
class NameRule:
    """Pattern and length bounds for a path segment."""

    pattern: Optional[Pattern[str]] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None


RESOURCE_GROUP_NAME = NameRule(re.compile(r"^[-\w\._()]+$"), 1, 90)
ACCOUNT_NAME = NameRule(re.compile(r"^[-\w\._]+$"), 3, 24)


def _require(value: Any, parameter: str) -> Any:
    """Raise :class:`ValidationError` if ``value`` is ``None`` or an empty string."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{parameter} is required.", parameter=parameter, subcode=VALIDATION_REQUIRED)
    return value


def _check_name(value: Optional[str], parameter: str, rule: Optional[NameRule] = None) -> str:
    """Require ``value`` to be a non-empty string satisfying ``rule``."""
    _require(value, parameter)
    if not isinstance(value, str):
        raise ValidationError(f"{parameter} must be a string.", parameter=parameter, subcode=VALIDATION_PATTERN)
    if rule is None:
        return value
    if rule.min_length is not None and len(value) < rule.min_length:
        raise ValidationError(
            f"{parameter} must be at least {rule.min_length} characters long.",
            parameter=parameter,
            subcode=VALIDATION_LENGTH,
        )
    if rule.max_length is not None and len(value) > rule.max_length:
        raise ValidationError(
            f"{parameter} must be at most {rule.max_length} characters long.",
            parameter=parameter,
            subcode=VALIDATION_LENGTH,
        )
    if rule.pattern is not None and not rule.pattern.fullmatch(value):
        raise ValidationError(
            f"{parameter} {value!r} does not match pattern {rule.pattern.pattern!r}.",
            parameter=parameter,
            subcode=VALIDATION_PATTERN,
        )
    return value
