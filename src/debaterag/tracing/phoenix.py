"""
Arize Phoenix tracing integration.

Sets up OpenTelemetry tracing for observability of the RAG pipeline.
Traces are sent to a local Phoenix instance for visualization.

Usage:
    from debaterag.tracing import setup_tracing
    setup_tracing()  # Call once at application startup
"""

import functools
import inspect
import warnings
from typing import Any, Callable, TypeVar

from debaterag.config import settings

F = TypeVar("F", bound=Callable[..., Any])


def setup_tracing() -> bool:
    """
    Initialize Phoenix tracing with OpenTelemetry.

    Should be called once at application startup before any
    LangChain/LangGraph operations.

    Returns:
        True if tracing was registered, False otherwise
    """
    if not settings.enable_tracing:
        return False

    try:
        from openinference.instrumentation.langchain import LangChainInstrumentor
        from phoenix.otel import register

        tracer_provider = register(
            project_name="debaterag",
            endpoint=f"{settings.phoenix_endpoint}/v1/traces",
        )

        # Instrument LangChain / LangGraph for automatic tracing
        LangChainInstrumentor().instrument(tracer_provider=tracer_provider)
        return True

    except ImportError:
        warnings.warn(
            "Phoenix tracing dependencies not installed. "
            "Install with: pip install debaterag[tracing]"
        )
    except Exception as e:
        warnings.warn(f"Failed to setup tracing: {e}")

    return False


def traced(name: str | None = None) -> Callable[[F], F]:
    """
    Decorator to add a tracing span to a sync or async function.

    Args:
        name: Span name (defaults to function name)

    Example:
        @traced("rag.index")
        async def index_node(state):
            ...
    """
    def decorator(func: F) -> F:
        span_name = name or func.__name__

        def _start_span():
            from opentelemetry import trace

            return trace.get_tracer(__name__).start_as_current_span(span_name)

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                if not settings.enable_tracing:
                    return await func(*args, **kwargs)
                try:
                    span_cm = _start_span()
                except ImportError:
                    return await func(*args, **kwargs)
                with span_cm as span:
                    span.set_attribute("function.name", func.__name__)
                    return await func(*args, **kwargs)

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not settings.enable_tracing:
                return func(*args, **kwargs)
            try:
                span_cm = _start_span()
            except ImportError:
                return func(*args, **kwargs)
            with span_cm as span:
                span.set_attribute("function.name", func.__name__)
                return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def add_span_attributes(**attributes: Any) -> None:
    """
    Add attributes to the current span.

    Example:
        add_span_attributes(client_id="u1", chunks_indexed=12)
    """
    if not settings.enable_tracing:
        return

    try:
        from opentelemetry import trace
    except ImportError:
        return

    span = trace.get_current_span()
    for key, value in attributes.items():
        if isinstance(value, (str, int, float, bool)):
            span.set_attribute(key, value)
        else:
            span.set_attribute(key, str(value))


def record_exception(exception: Exception) -> None:
    """
    Record an exception in the current span.

    Args:
        exception: Exception to record
    """
    if not settings.enable_tracing:
        return

    try:
        from opentelemetry import trace
    except ImportError:
        return

    span = trace.get_current_span()
    span.record_exception(exception)
    span.set_status(trace.Status(trace.StatusCode.ERROR))
