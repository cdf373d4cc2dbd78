"""Tests for the request builders and OutgoingRequest."""

from __future__ import annotations

import pytest
from opentelemetry import context as otel_context
from opentelemetry.context import Context
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from conftest import TRACEPARENT, FakeSession, make_response
from sepehr_payments.core.errors import EMPTY_ERROR, HTTPErrorResponse
from sepehr_payments.core.payloads import GetTokenResponse
from sepehr_payments.core.request import (
    DeadlineExceeded,
    base_request,
    normal_request,
    remaining_time,
    request_with_bearer_auth,
    request_with_bearer_auth_no_cache,
    with_deadline,
)
from sepehr_payments.core.tracing import with_propagator


class TestBuilders:
    def test_base_request(self, empty_context: Context) -> None:
        request = base_request(empty_context)

        assert request.context is empty_context
        assert request.error_type is HTTPErrorResponse
        assert dict(request.headers) == {}

    def test_normal_request(self, empty_context: Context) -> None:
        request = normal_request(empty_context)

        assert dict(request.headers) == {"Content-Type": "application/json"}

    def test_bearer_auth(self, empty_context: Context) -> None:
        request = request_with_bearer_auth(empty_context, "tok-123")

        assert request.headers["authorization"] == "Bearer tok-123"
        assert request.headers["Content-Type"] == "application/json"
        assert "Cache-Control" not in request.headers

    def test_bearer_auth_no_cache(self, empty_context: Context) -> None:
        request = request_with_bearer_auth_no_cache(empty_context, "tok-123")

        assert request.headers["Authorization"] == "Bearer tok-123"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Cache-Control"] == "no-cache"

    def test_each_call_builds_a_new_request(self, empty_context: Context) -> None:
        first = normal_request(empty_context)
        second = normal_request(empty_context)
        first.set_header("X-Extra", "1")

        assert first is not second
        assert "X-Extra" not in second.headers

    def test_tracing_headers_added_when_span_present(self, span_context: Context) -> None:
        ctx = with_propagator(TraceContextTextMapPropagator(), span_context)

        request = request_with_bearer_auth(ctx, "tok")

        assert request.headers["traceparent"] == TRACEPARENT
        assert request.headers["Authorization"] == "Bearer tok"

    def test_defaults_to_current_context(self, span_context: Context) -> None:
        ctx = with_propagator(TraceContextTextMapPropagator(), span_context)
        token = otel_context.attach(ctx)
        try:
            request = normal_request()
        finally:
            otel_context.detach(token)

        assert request.headers["traceparent"] == TRACEPARENT


class TestPost:
    def test_post_sends_json_body(self, empty_context: Context) -> None:
        session = FakeSession(make_response(200, {"Status": 0}))
        request = normal_request(empty_context).set_body({"Amount": 1000})

        response = request.post(session, "http://gw.example.com/V1/PeymentApi/GetToken", timeout=30)

        assert response is not None and response.status_code == 200
        prepared = session.sent[0]
        assert prepared.method == "POST"
        assert prepared.url == "http://gw.example.com/V1/PeymentApi/GetToken"
        assert session.sent_json() == {"Amount": 1000}
        assert session.send_kwargs[0]["timeout"] == 30

    def test_deadline_caps_timeout(self, empty_context: Context) -> None:
        session = FakeSession()
        ctx = with_deadline(5, empty_context)

        normal_request(ctx).post(session, "http://gw.example.com/x", timeout=30)

        assert 0 < session.send_kwargs[0]["timeout"] <= 5

    def test_expired_deadline_never_sends(self, empty_context: Context) -> None:
        session = FakeSession()
        ctx = with_deadline(-1, empty_context)

        with pytest.raises(DeadlineExceeded):
            normal_request(ctx).post(session, "http://gw.example.com/x", timeout=30)
        assert session.sent == []

    def test_remaining_time_without_deadline(self, empty_context: Context) -> None:
        assert remaining_time(empty_context) is None


class TestDecodeResult:
    def test_decodes_into_result_type(self, empty_context: Context) -> None:
        request = normal_request(empty_context).set_result(GetTokenResponse)

        result = request.decode_result(make_response(200, {"Status": 0, "Accesstoken": "abc"}))

        assert isinstance(result, GetTokenResponse)
        assert result.access_token == "abc"

    @pytest.mark.parametrize("body", [b"not json", b"[1]", b"null"])
    def test_rejects_non_object_bodies(self, empty_context: Context, body: bytes) -> None:
        request = normal_request(empty_context).set_result(GetTokenResponse)

        with pytest.raises(ValueError):
            request.decode_result(make_response(200, body))

    def test_empty_body_decodes_to_empty_result(self, empty_context: Context) -> None:
        request = normal_request(empty_context).set_result(GetTokenResponse)

        result = request.decode_result(make_response(204))

        assert result == GetTokenResponse(status=None, access_token=None, raw={})


class TestDecodeError:
    def test_decodes_structured_error(self, empty_context: Context) -> None:
        request = normal_request(empty_context)

        err = request.decode_error(make_response(400, {"Status": -1, "Message": "Invalid terminal"}))

        assert isinstance(err, HTTPErrorResponse)
        assert err.message == "Invalid terminal"
        assert err.status == -1

    def test_uses_armed_error_type(self, empty_context: Context) -> None:
        class TerminalError(HTTPErrorResponse):
            @classmethod
            def from_body(cls, body: bytes | None) -> HTTPErrorResponse:
                return cls(message="terminal error")

        request = normal_request(empty_context)
        request.error_type = TerminalError

        assert str(request.decode_error(make_response(500, "boom"))) == "terminal error"

    def test_plain_text_body_is_empty(self, empty_context: Context) -> None:
        err = normal_request(empty_context).decode_error(make_response(502, "gateway down"))

        assert err is EMPTY_ERROR
