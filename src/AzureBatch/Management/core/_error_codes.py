# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# HTTP subcode constants
HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_409 = "http_409"
HTTP_412 = "http_412"
HTTP_429 = "http_429"
HTTP_500 = "http_500"
HTTP_502 = "http_502"
HTTP_503 = "http_503"
HTTP_504 = "http_504"

_HTTP_STATUS_TO_SUBCODE = {
    400: HTTP_400,
    401: HTTP_401,
    403: HTTP_403,
    404: HTTP_404,
    409: HTTP_409,
    412: HTTP_412,
    429: HTTP_429,
    500: HTTP_500,
    502: HTTP_502,
    503: HTTP_503,
    504: HTTP_504,
}

TRANSIENT_STATUS = {429, 502, 503, 504}

# Validation subcodes
VALIDATION_REQUIRED = "validation_required"
VALIDATION_PATTERN = "validation_pattern"
VALIDATION_LENGTH = "validation_length"
VALIDATION_TYPE = "validation_type"
VALIDATION_RANGE = "validation_range"

# Response body subcodes
MALFORMED_BODY = "malformed_body"
MALFORMED_ERROR_BODY = "malformed_error_body"
MALFORMED_MISSING_POLLING_URL = "malformed_missing_polling_url"

# Long-running operation subcodes
OPERATION_FAILED = "operation_failed"
OPERATION_CANCELED_BY_SERVICE = "operation_canceled_by_service"
OPERATION_POLL_HTTP_FAILURE = "operation_poll_http_failure"


def _http_subcode(status: int) -> str:
    """Map an HTTP status to its subcode, falling back to ``http_<status>``."""
    return _HTTP_STATUS_TO_SUBCODE.get(status, f"http_{status}")


def _is_transient_status(status: int) -> bool:
    return status in TRANSIENT_STATUS
