"""Shared fixtures: a recording requests.Session and canned responses."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any, Optional, Union

import pytest
import requests
from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags

TRACE_ID = 0x4BF92F3577B34DA6A3CE929D0E0E4736
SPAN_ID = 0x00F067AA0BA902B7
TRACEPARENT = "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"


def make_response(
    status_code: int = 200,
    body: Union[bytes, str, dict, list, None] = None,
    *,
    reason: Optional[str] = None,
    url: str = "http://gw.example.com/",
) -> requests.Response:
    """Build a ``requests.Response`` the way the adapter would."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason if reason is not None else HTTPStatus(status_code).phrase
    response.url = url
    response.encoding = "utf-8"
    if body is None:
        response._content = b""
    elif isinstance(body, bytes):
        response._content = body
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    return response


class FakeSession(requests.Session):
    """Session that records prepared requests instead of hitting the network."""

    def __init__(self, *outcomes: Any) -> None:
        super().__init__()
        self.outcomes = list(outcomes)
        self.sent: list[requests.PreparedRequest] = []
        self.send_kwargs: list[dict[str, Any]] = []

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> Any:  # type: ignore[override]
        self.sent.append(request)
        self.send_kwargs.append(kwargs)
        outcome = self.outcomes.pop(0) if self.outcomes else make_response(200, {})
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def sent_json(self, index: int = -1) -> Any:
        return json.loads(self.sent[index].body)


@pytest.fixture
def span_context() -> Context:
    """A context carrying a valid, sampled span."""
    span = NonRecordingSpan(
        SpanContext(
            trace_id=TRACE_ID,
            span_id=SPAN_ID,
            is_remote=False,
            trace_flags=TraceFlags(TraceFlags.SAMPLED),
        )
    )
    return trace.set_span_in_context(span, Context())


@pytest.fixture
def empty_context() -> Context:
    return Context()
