"""
Observability and tracing with Arize Phoenix.

Provides OpenTelemetry-based tracing for the LangGraph pipeline
with automatic instrumentation of LangChain components.
"""

from debaterag.tracing.phoenix import add_span_attributes, record_exception, setup_tracing, traced

__all__ = ["add_span_attributes", "record_exception", "setup_tracing", "traced"]
