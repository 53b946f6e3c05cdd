# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request telemetry for the Batch management client.

Each HTTP exchange is reported under an operation name such as
``accounts.create``. Exchanges made on behalf of a long-running operation carry
a suffix naming their phase: ``accounts.create.poll`` for every poll and
``accounts.create.final`` for the GET that fetches the finished resource. The
phase is exposed on :class:`RequestContext`, written to log records and set as
a span attribute, so poll traffic can be told apart from the calls that
started it.

Logging uses the standard :mod:`logging` module; tracing uses OpenTelemetry
when the ``opentelemetry-api`` package is installed.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional, Protocol, Union, runtime_checkable

from ..common.constants import (
    OTEL_ATTR_BATCH_CLIENT_REQUEST_ID,
    OTEL_ATTR_BATCH_CORRELATION_ID,
    OTEL_ATTR_BATCH_OPERATION,
    OTEL_ATTR_BATCH_PHASE,
    OTEL_ATTR_BATCH_REQUEST_ID,
    OTEL_ATTR_HTTP_METHOD,
    OTEL_ATTR_HTTP_STATUS_CODE,
    OTEL_ATTR_HTTP_URL,
)

try:
    from opentelemetry import trace
    from opentelemetry.trace import Status, StatusCode

    _OTEL_AVAILABLE = True
except ImportError:
    _OTEL_AVAILABLE = False
    trace = None  # type: ignore
    Status = None  # type: ignore
    StatusCode = None  # type: ignore

_TRACER_NAME = "AzureBatch.Management"
_LRO_PHASES = ("poll", "final")

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TelemetryConfig:
    """
    Opt-in telemetry settings.

    :param enable_tracing: Emit an OpenTelemetry client span per exchange. Ignored
        when ``opentelemetry-api`` is not installed.
    :param enable_logging: Log one record per exchange to ``logger_name``.
    :param log_level: Level set on that logger.
    :param logger_name: Logger receiving exchange records.
    :param hooks: Objects implementing any subset of :class:`TelemetryHook`.

    Example::

        config = BatchManagementConfig(
            telemetry=TelemetryConfig(enable_logging=True, log_level="DEBUG")
        )
    """

    enable_tracing: bool = False
    enable_logging: bool = False
    log_level: str = "WARNING"
    logger_name: str = "AzureBatch.Management"
    hooks: List["TelemetryHook"] = field(default_factory=list)

    @property
    def enabled(self) -> bool:
        return bool(self.enable_tracing or self.enable_logging or self.hooks)


@dataclass
class RequestContext:
    """One outbound exchange as seen by hooks."""

    client_request_id: str
    method: str
    url: str
    operation: str
    start_time: float = field(default_factory=time.perf_counter)
    custom_data: Dict[str, Any] = field(default_factory=dict)
    _span: Any = field(default=None, repr=False)

    @property
    def phase(self) -> str:
        """``"poll"`` or ``"final"`` for long-running operation traffic, else ``"initial"``."""
        suffix = self.operation.rsplit(".", 1)[-1]
        return suffix if suffix in _LRO_PHASES else "initial"


@dataclass
class ResponseContext:
    """Outcome of one exchange as seen by hooks."""

    status_code: int
    duration_ms: float
    request_id: Optional[str] = None
    correlation_id: Optional[str] = None
    response_size: Optional[int] = None


@runtime_checkable
class TelemetryHook(Protocol):
    """Callbacks invoked around every exchange. Implement only the ones you need."""

    def on_request_start(self, context: RequestContext) -> None: ...

    def on_request_end(self, request: RequestContext, response: ResponseContext) -> None: ...

    def on_request_error(self, request: RequestContext, error: Exception) -> None: ...

    def get_additional_headers(self) -> Dict[str, str]: ...


class TelemetryManager:
    """Drives logging, tracing and hooks for a client. Internal."""

    def __init__(self, config: Optional[TelemetryConfig] = None) -> None:
        self._config = config or TelemetryConfig()
        self._hooks = list(self._config.hooks)
        self._tracer = trace.get_tracer(_TRACER_NAME) if self._config.enable_tracing and _OTEL_AVAILABLE else None
        self._logger: Optional[logging.Logger] = None
        if self._config.enable_logging:
            self._logger = logging.getLogger(self._config.logger_name)
            self._logger.setLevel(getattr(logging, self._config.log_level.upper()))

    @property
    def is_tracing_enabled(self) -> bool:
        return self._tracer is not None

    def _notify(self, callback: str, *args: Any) -> Dict[str, str]:
        """Call ``callback`` on every hook that has it; merge any dict results."""
        merged: Dict[str, str] = {}
        for hook in self._hooks:
            fn = getattr(hook, callback, None)
            if fn is None:
                continue
            try:
                result = fn(*args)
            except Exception:
                _log.debug("Telemetry hook %r failed in %s", hook, callback, exc_info=True)
                continue
            if isinstance(result, dict):
                merged.update(result)
        return merged

    @contextmanager
    def trace_request(
        self,
        operation: str,
        method: str,
        url: str,
        client_request_id: str,
    ) -> Generator[RequestContext, None, None]:
        """
        Wrap one exchange.

        The caller sends the request inside the block and reports the status with
        :meth:`record_response`. An exception escaping the block is recorded on the
        span, logged and passed to ``on_request_error`` before it propagates.
        """
        ctx = RequestContext(client_request_id=client_request_id, method=method, url=url, operation=operation)
        self._notify("on_request_start", ctx)

        if self._tracer is not None:
            ctx._span = self._tracer.start_span(
                f"{operation} {method}",
                kind=trace.SpanKind.CLIENT,
                attributes={
                    OTEL_ATTR_BATCH_OPERATION: operation,
                    OTEL_ATTR_BATCH_PHASE: ctx.phase,
                    OTEL_ATTR_HTTP_METHOD: method,
                    OTEL_ATTR_HTTP_URL: url,
                    OTEL_ATTR_BATCH_CLIENT_REQUEST_ID: client_request_id,
                },
            )

        try:
            yield ctx
        except Exception as e:
            if ctx._span is not None:
                ctx._span.set_status(Status(StatusCode.ERROR, str(e)))
                ctx._span.record_exception(e)
            if self._logger:
                self._logger.warning(
                    "%s %s (%s) failed: %s",
                    operation,
                    method,
                    ctx.phase,
                    e,
                    extra={"client_request_id": client_request_id, "phase": ctx.phase},
                )
            self._notify("on_request_error", ctx, e)
            raise
        finally:
            if ctx._span is not None:
                ctx._span.end()

    def record_response(
        self,
        ctx: RequestContext,
        status_code: int,
        request_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
        response_size: Optional[int] = None,
    ) -> None:
        """Report the status of the exchange opened by :meth:`trace_request`."""
        response = ResponseContext(
            status_code=status_code,
            duration_ms=(time.perf_counter() - ctx.start_time) * 1000,
            request_id=request_id,
            correlation_id=correlation_id,
            response_size=response_size,
        )

        span = ctx._span
        if span is not None:
            span.set_attribute(OTEL_ATTR_HTTP_STATUS_CODE, status_code)
            if request_id:
                span.set_attribute(OTEL_ATTR_BATCH_REQUEST_ID, request_id)
            if correlation_id:
                span.set_attribute(OTEL_ATTR_BATCH_CORRELATION_ID, correlation_id)

        if self._logger:
            self._logger.log(
                logging.WARNING if status_code >= 400 else logging.DEBUG,
                "%s %s (%s) -> %s in %.1fms",
                ctx.operation,
                ctx.method,
                ctx.phase,
                status_code,
                response.duration_ms,
                extra={
                    "client_request_id": ctx.client_request_id,
                    "request_id": request_id,
                    "correlation_id": correlation_id,
                    "phase": ctx.phase,
                },
            )

        self._notify("on_request_end", ctx, response)

    def get_additional_headers(self) -> Dict[str, str]:
        """Headers contributed by hooks, merged in hook order."""
        return self._notify("get_additional_headers")


class NoOpTelemetryManager:
    """Stand-in used when telemetry is disabled."""

    @contextmanager
    def trace_request(
        self,
        operation: str,
        method: str,
        url: str,
        client_request_id: str,
    ) -> Generator[RequestContext, None, None]:
        yield RequestContext(client_request_id=client_request_id, method=method, url=url, operation=operation)

    def record_response(self, *args: Any, **kwargs: Any) -> None:
        pass

    def get_additional_headers(self) -> Dict[str, str]:
        return {}


def create_telemetry_manager(config: Optional[TelemetryConfig]) -> Union[TelemetryManager, NoOpTelemetryManager]:
    if config is None or not config.enabled:
        return NoOpTelemetryManager()
    return TelemetryManager(config)


__all__ = [
    "TelemetryConfig",
    "TelemetryHook",
    "TelemetryManager",
    "NoOpTelemetryManager",
    "RequestContext",
    "ResponseContext",
    "create_telemetry_manager",
]
