# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the Batch management client.

This module contains the foundational components including configuration,
cancellation, the HTTP transport, result wrappers and error handling.
"""

from .cancellation import CancellationToken, Deadline
from .config import BatchManagementConfig
from .errors import (
    BatchManagementError,
    ValidationError,
    TransportError,
    HttpError,
    ServiceError,
    MalformedResponseError,
    OperationFailedError,
    OperationCancelledError,
    OperationTimeoutError,
)
from .results import RequestMetadata, BatchResponse, OperationResult

__all__ = [
    "CancellationToken",
    "Deadline",
    "BatchManagementConfig",
    "BatchManagementError",
    "ValidationError",
    "TransportError",
    "HttpError",
    "ServiceError",
    "MalformedResponseError",
    "OperationFailedError",
    "OperationCancelledError",
    "OperationTimeoutError",
    "RequestMetadata",
    "BatchResponse",
    "OperationResult",
]
