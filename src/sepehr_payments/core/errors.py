"""
Unified error model for Sepehr gateway calls.

Every failure path (network errors, missing responses, HTTP error statuses,
structured error bodies) collapses into a single :class:`APIError` whose
``kind`` callers can branch on.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import requests

__all__ = [
    "APIError",
    "EMPTY_ERROR",
    "ErrorKind",
    "HTTPErrorResponse",
    "classify",
    "parse_error_kind",
    "status_line",
]


class ErrorKind(str, Enum):
    TRANSPORT_FAILURE = "transport_failure"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"


class APIError(Exception):
    """
    Raised by every failed gateway call.

    ``code`` is the HTTP status code, or ``0`` when the request never produced
    a response. The attributes are read-only once the error is built.
    """

    def __init__(self, code: int, message: str, kind: ErrorKind) -> None:
        super().__init__(message)
        self._code = code
        self._message = message
        self._kind = kind

    @property
    def code(self) -> int:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    def __str__(self) -> str:
        return self._message

    def __repr__(self) -> str:
        return (
            f"APIError(code={self._code!r}, message={self._message!r}, "
            f"kind={self._kind.value!r})"
        )


_MESSAGE_KEYS = ("Message", "message", "error", "Error")
_STATUS_KEYS = ("Status", "status", "code", "Code")


@dataclass(frozen=True)
class HTTPErrorResponse:
    """
    Structured error body returned by the gateway on failed calls.
    """

    status: Optional[Any] = None
    message: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Optional[bytes]) -> "HTTPErrorResponse":
        """
        Decode ``body``; anything that is not a JSON object yields :data:`EMPTY_ERROR`.
        """
        if not body:
            return EMPTY_ERROR
        try:
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            return EMPTY_ERROR
        if not isinstance(payload, dict):
            return EMPTY_ERROR

        message = next(
            (str(payload[key]) for key in _MESSAGE_KEYS if payload.get(key)), None
        )
        status = next(
            (payload[key] for key in _STATUS_KEYS if payload.get(key) is not None),
            None,
        )
        if message is None and status is None:
            return EMPTY_ERROR
        return cls(status=status, message=message, raw=payload)

    def is_empty(self) -> bool:
        return self.status is None and not self.message

    def __str__(self) -> str:
        if self.message and self.status is not None:
            return f"{self.message} (status {self.status})"
        if self.message:
            return self.message
        if self.status is not None:
            return f"status {self.status}"
        return ""


EMPTY_ERROR = HTTPErrorResponse()


def parse_error_kind(
    error: Optional[BaseException],
    status_code: Optional[int] = None,
) -> ErrorKind:
    """
    Map a transport error and/or HTTP status code onto an :class:`ErrorKind`.

    Total over its inputs: unrecognised combinations map to ``UNKNOWN``.
    """
    if error is not None:
        # requests reports undecodable bodies as a RequestException subclass.
        if isinstance(error, requests.exceptions.InvalidJSONError):
            return ErrorKind.UNKNOWN
        if isinstance(error, (requests.RequestException, OSError)):
            return ErrorKind.TRANSPORT_FAILURE
        return ErrorKind.UNKNOWN
    if isinstance(status_code, int):
        if 400 <= status_code < 500:
            return ErrorKind.CLIENT_ERROR
        if 500 <= status_code < 600:
            return ErrorKind.SERVER_ERROR
    return ErrorKind.UNKNOWN


def status_line(response: requests.Response) -> str:
    reason = response.reason
    if isinstance(reason, bytes):
        reason = reason.decode("iso-8859-1")
    if reason:
        return f"{response.status_code} {reason}"
    return str(response.status_code)


def _raw_body_text(response: requests.Response) -> str:
    if not response.content:
        return ""
    return response.text


def classify(
    error: Optional[BaseException],
    response: Optional[requests.Response],
    message: str,
    *,
    structured_error: Optional[HTTPErrorResponse] = None,
) -> Optional[APIError]:
    """
    Turn the outcome of a single gateway round trip into an :class:`APIError`.

    ``structured_error`` is the already decoded error body; when omitted the
    body is decoded as an :class:`HTTPErrorResponse`. Returns ``None`` when the
    call succeeded.
    """
    if error is not None:
        return APIError(
            code=0,
            message=f"{message}: {error}",
            kind=parse_error_kind(error),
        )

    if response is None:
        return APIError(
            code=0,
            message="empty response",
            kind=ErrorKind.TRANSPORT_FAILURE,
        )

    if response.status_code >= 400:
        line = status_line(response)
        structured = structured_error
        if structured is None:
            structured = HTTPErrorResponse.from_body(response.content)
        body_text = _raw_body_text(response)
        if not structured.is_empty():
            msg = f"{line}: {structured}"
        elif body_text:
            msg = f"{line}: {body_text}"
        else:
            msg = line

        return APIError(
            code=response.status_code,
            message=msg,
            kind=parse_error_kind(None, response.status_code),
        )

    return None
