"""OpenTelemetry bootstrap -- configure Azure Monitor export.

Telemetry is optional.  Until :func:`configure_otel` succeeds every
helper in this module is a no-op, so the attachment pipeline can be
instrumented unconditionally.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from ..util.singletons import register_singleton

logger = logging.getLogger(__name__)

_otel_active = False

_TRACER_NAME = "chatdrop"

# Azure SDK loggers that flood the console at INFO level.
_NOISY_LOGGERS = (
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.monitor.opentelemetry.exporter.export._base",
    "azure.identity",
)


def _quiet_noisy_loggers() -> None:
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _reset_otel_state() -> None:
    """Reset module-level OTel state -- for test isolation only."""
    global _otel_active
    _otel_active = False


register_singleton(_reset_otel_state)


def configure_otel(connection_string: str, *, sampling_ratio: float = 1.0) -> bool:
    """Initialise the Azure Monitor OpenTelemetry distro.

    Returns ``True`` if initialisation succeeded, ``False`` otherwise.
    A failure here never prevents attachments from being processed.
    """
    global _otel_active

    if _otel_active:
        logger.info("[otel.configure] OTel already active, skipping re-init")
        return True

    if not connection_string:
        logger.info("[otel.configure] No connection string provided, skipping")
        return False

    try:
        from azure.monitor.opentelemetry import configure_azure_monitor

        configure_azure_monitor(
            connection_string=connection_string,
            sampling_ratio=sampling_ratio,
        )
    except Exception:
        logger.error("[otel.configure] Failed to configure OTel", exc_info=True)
        return False

    _otel_active = True
    _quiet_noisy_loggers()
    logger.info("[otel.configure] Azure Monitor OpenTelemetry configured (sampling=%.2f)", sampling_ratio)
    return True


def shutdown_otel() -> None:
    """Flush and shut down the tracer provider."""
    global _otel_active

    if not _otel_active:
        return

    try:
        from opentelemetry import trace

        tp = trace.get_tracer_provider()
        if hasattr(tp, "shutdown"):
            tp.shutdown()
        logger.info("[otel.shutdown] OpenTelemetry providers shut down")
    except Exception:
        logger.warning("[otel.shutdown] Error during OTel shutdown", exc_info=True)
    finally:
        _otel_active = False


def is_active() -> bool:
    return _otel_active


# ---------------------------------------------------------------------------
# Span helpers
# ---------------------------------------------------------------------------


@contextmanager
def agent_span(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[Any, None, None]:
    """Create a span around a pipeline operation.

    Usage::

        with agent_span("attachments.parse", attributes={"attachments.count": 3}):
            ...

    Yields ``None`` when OTel is not active.  Exceptions raised by the
    wrapped block propagate unchanged.
    """
    if not _otel_active:
        yield None
        return

    from opentelemetry import trace

    tracer = trace.get_tracer(_TRACER_NAME)
    with tracer.start_as_current_span(name, attributes=attributes) as span:
        yield span


def record_event(name: str, attributes: dict[str, Any] | None = None) -> None:
    """Record an event on the current active span (if any)."""
    if not _otel_active:
        return
    try:
        from opentelemetry import trace

        span = trace.get_current_span()
        if span and span.is_recording():
            span.add_event(name, attributes=attributes)
    except Exception:
        logger.debug("[otel.record_event] Failed to record %s", name, exc_info=True)


def set_span_attribute(key: str, value: Any) -> None:
    """Set an attribute on the current active span (if any)."""
    if not _otel_active:
        return
    try:
        from opentelemetry import trace

        span = trace.get_current_span()
        if span and span.is_recording():
            span.set_attribute(key, value)
    except Exception:
        logger.debug("[otel.set_span_attribute] Failed to set %s", key, exc_info=True)
