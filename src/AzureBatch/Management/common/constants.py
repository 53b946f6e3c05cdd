# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Constants for the Azure Resource Manager wire protocol used by the Batch
management plane.
"""

SDK_NAME = "azure-batch-management-python"
SDK_VERSION = "0.1.0"

ARM_SCOPE = "https://management.azure.com/.default"
BATCH_PROVIDER = "Microsoft.Batch"

# Request headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_USER_AGENT = "User-Agent"
HEADER_CLIENT_REQUEST_ID = "x-ms-client-request-id"
HEADER_ACCEPT_LANGUAGE = "accept-language"

# Response headers
HEADER_REQUEST_ID = "x-ms-request-id"
HEADER_CORRELATION_REQUEST_ID = "x-ms-correlation-request-id"
HEADER_LOCATION = "Location"
HEADER_ASYNC_OPERATION = "Azure-AsyncOperation"
HEADER_RETRY_AFTER = "Retry-After"

# Long-running operation status values reported by the polling endpoint
LRO_STATUS_SUCCEEDED = "Succeeded"
LRO_STATUS_FAILED = "Failed"
LRO_STATUS_CANCELED = "Canceled"
LRO_IN_PROGRESS_STATUSES = frozenset(
    {"InProgress", "Running", "Accepted", "Creating", "Updating", "Deleting", "NotStarted"}
)

# OpenTelemetry semantic attribute names
OTEL_ATTR_HTTP_METHOD = "http.request.method"
OTEL_ATTR_HTTP_URL = "url.full"
OTEL_ATTR_HTTP_STATUS_CODE = "http.response.status_code"
OTEL_ATTR_BATCH_OPERATION = "azure.batch.operation"
OTEL_ATTR_BATCH_PHASE = "azure.batch.lro.phase"
OTEL_ATTR_BATCH_CLIENT_REQUEST_ID = "azure.batch.client_request_id"
OTEL_ATTR_BATCH_REQUEST_ID = "azure.batch.request_id"
OTEL_ATTR_BATCH_CORRELATION_ID = "azure.batch.correlation_id"
