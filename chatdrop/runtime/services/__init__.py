"""External service integrations."""

from .otel import agent_span, configure_otel, record_event, shutdown_otel

__all__ = ["agent_span", "configure_otel", "record_event", "shutdown_otel"]
