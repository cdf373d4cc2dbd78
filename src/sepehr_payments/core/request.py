"""
Builders for requests sent to the Sepehr gateway.

Each builder returns a fresh :class:`OutgoingRequest` bound to the caller's
OpenTelemetry context, armed to decode the gateway's structured error body and
carrying tracing headers when the context holds an active span.
"""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any, Dict, Optional

import requests
from opentelemetry import context as otel_context
from requests.structures import CaseInsensitiveDict

from .errors import HTTPErrorResponse
from .tracing import inject_tracing_headers

if TYPE_CHECKING:
    from opentelemetry.context import Context

__all__ = [
    "DeadlineExceeded",
    "OutgoingRequest",
    "base_request",
    "normal_request",
    "remaining_time",
    "request_with_bearer_auth",
    "request_with_bearer_auth_no_cache",
    "with_deadline",
]

_DEADLINE_KEY = otel_context.create_key("sepehr-payments-deadline")


class DeadlineExceeded(requests.exceptions.Timeout):
    """Raised when the caller's deadline expired before the request was sent."""


def with_deadline(seconds: float, context: Optional["Context"] = None) -> "Context":
    """
    Return a copy of ``context`` that expires ``seconds`` from now.

    Requests built from the returned context never wait past the deadline.
    """
    return otel_context.set_value(
        _DEADLINE_KEY, time.monotonic() + seconds, context
    )


def remaining_time(context: Optional["Context"] = None) -> Optional[float]:
    deadline = otel_context.get_value(_DEADLINE_KEY, context)
    if deadline is None:
        return None
    return deadline - time.monotonic()


class OutgoingRequest:
    """
    Mutable request builder scoped to a single gateway call.
    """

    def __init__(
        self,
        context: "Context",
        *,
        error_type: type = HTTPErrorResponse,
    ) -> None:
        self.context = context
        self.headers: CaseInsensitiveDict = CaseInsensitiveDict()
        self.body: Any = None
        self.result_type: Optional[type] = None
        self.error_type = error_type

    def set_header(self, name: str, value: str) -> "OutgoingRequest":
        self.headers[name] = value
        return self

    def set_auth_token(self, token: str) -> "OutgoingRequest":
        return self.set_header("Authorization", f"Bearer {token}")

    def set_body(self, body: Any) -> "OutgoingRequest":
        self.body = body
        return self

    def set_result(self, result_type: type) -> "OutgoingRequest":
        self.result_type = result_type
        return self

    def post(
        self,
        session: requests.Session,
        url: str,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[requests.Response]:
        """
        Send the request through ``session`` and return the raw response.
        """
        remaining = remaining_time(self.context)
        if remaining is not None:
            if remaining <= 0:
                raise DeadlineExceeded(f"deadline exceeded before POST {url}")
            timeout = remaining if timeout is None else min(timeout, remaining)

        prepared = session.prepare_request(
            requests.Request(
                method="POST",
                url=url,
                headers=dict(self.headers),
                json=self.body,
            )
        )
        return session.send(prepared, timeout=timeout)

    def decode_result(self, response: requests.Response) -> Any:
        """
        Decode a successful response body into :attr:`result_type`.

        An empty body (e.g. ``204 No Content``) decodes to an empty result.
        Raises ``ValueError`` when a non-empty body is not a JSON object.
        """
        if self.result_type is None:
            return None
        if not response.content:
            return self.result_type.from_response({})
        payload: Dict[str, Any] = json.loads(response.content)
        if not isinstance(payload, dict):
            raise ValueError(
                f"expected a JSON object from {response.url}, got {response.text!r}"
            )
        return self.result_type.from_response(payload)

    def decode_error(self, response: requests.Response) -> HTTPErrorResponse:
        """Decode a failed response body into :attr:`error_type`."""
        return self.error_type.from_body(response.content)


def base_request(context: Optional["Context"] = None) -> OutgoingRequest:
    if context is None:
        context = otel_context.get_current()
    request = OutgoingRequest(context, error_type=HTTPErrorResponse)
    return inject_tracing_headers(context, request)


def request_with_bearer_auth_no_cache(
    context: Optional["Context"],
    token: str,
) -> OutgoingRequest:
    """JSON request carrying a bearer token and a no-cache header."""
    return (
        base_request(context)
        .set_auth_token(token)
        .set_header("Content-Type", "application/json")
        .set_header("Cache-Control", "no-cache")
    )


def request_with_bearer_auth(
    context: Optional["Context"],
    token: str,
) -> OutgoingRequest:
    """JSON request carrying a bearer token."""
    return (
        base_request(context)
        .set_auth_token(token)
        .set_header("Content-Type", "application/json")
    )


def normal_request(context: Optional["Context"] = None) -> OutgoingRequest:
    return base_request(context).set_header("Content-Type", "application/json")
