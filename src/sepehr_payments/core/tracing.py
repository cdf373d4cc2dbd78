"""
Distributed-tracing propagation for outgoing gateway requests.

The propagator used for a call is taken from the caller's OpenTelemetry
context when one was attached with :func:`with_propagator`; otherwise the
process-wide global propagator is used.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from opentelemetry import context as otel_context
from opentelemetry import propagate, trace
from opentelemetry.propagators.textmap import TextMapPropagator

if TYPE_CHECKING:
    from opentelemetry.context import Context

    from .request import OutgoingRequest

__all__ = [
    "get_propagator",
    "inject_tracing_headers",
    "with_propagator",
]

_PROPAGATOR_KEY = otel_context.create_key("sepehr-payments-propagator")


def with_propagator(
    propagator: TextMapPropagator,
    context: Optional["Context"] = None,
) -> "Context":
    """
    Return a copy of ``context`` carrying ``propagator`` for outgoing requests.
    """
    return otel_context.set_value(_PROPAGATOR_KEY, propagator, context)


def get_propagator(context: Optional["Context"] = None) -> TextMapPropagator:
    propagator = otel_context.get_value(_PROPAGATOR_KEY, context)
    if isinstance(propagator, TextMapPropagator):
        return propagator
    return propagate.get_global_textmap()


def inject_tracing_headers(
    context: Optional["Context"],
    request: "OutgoingRequest",
) -> "OutgoingRequest":
    # no span in context, nothing to propagate
    span = trace.get_current_span(context)
    if not span.get_span_context().is_valid:
        return request

    propagator = get_propagator(context)
    carrier = dict(request.headers)
    try:
        propagator.inject(carrier, context=context)
    except Exception:  # noqa: BLE001
        logging.debug("Skipping tracing headers, injection failed", exc_info=True)
        return request

    request.headers.update(carrier)
    return request
