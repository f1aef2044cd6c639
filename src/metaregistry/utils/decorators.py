import functools
from typing import Any, Callable, Dict, Optional, TypeVar

from opentelemetry.trace import SpanKind, Status, StatusCode

from metaregistry.logging import get_logger
from metaregistry.telemetry import get_tracer

F = TypeVar("F", bound=Callable[..., Any])

logger = get_logger(__name__)

AttributeGetter = Callable[..., Optional[Dict[str, Any]]]


def _span_attributes(
    static: Optional[Dict[str, Any]],
    getter: Optional[AttributeGetter],
    args: tuple,
    kwargs: dict,
) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(static or {})
    if getter is not None:
        try:
            merged.update(getter(*args, **kwargs) or {})
        except Exception as exc:
            # the getter sees unvalidated arguments; the call itself reports them
            logger.warning("Span attribute getter failed", extra={"reason": str(exc)})
    # OpenTelemetry rejects None attribute values
    return {key: value for key, value in merged.items() if value is not None}


def traced(
    span_name: Optional[str] = None,
    *,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[Dict[str, Any]] = None,
    attribute_getter: Optional[AttributeGetter] = None,
) -> Callable[[F], F]:
    """Run each call of the decorated function inside its own span.

    Exceptions are recorded on the span, which is marked as failed, and then
    re-raised unchanged.

    Args:
        span_name: Span name; ``module.qualname`` of the function if omitted
        kind: OpenTelemetry span kind
        attributes: Attributes set on every span
        attribute_getter: Called with the function's arguments to compute
            per-call attributes
    """

    def decorator(func: F) -> F:
        name = span_name or f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = get_tracer(func.__module__)
            with tracer.start_as_current_span(name, kind=kind) as span:
                span.set_attributes(_span_attributes(attributes, attribute_getter, args, kwargs))
                try:
                    return func(*args, **kwargs)
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc)))
                    raise

        return wrapper  # type: ignore[return-value]

    return decorator
