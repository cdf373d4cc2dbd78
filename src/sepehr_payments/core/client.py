"""
HTTP client for the Sepehr payment gateway.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

import requests

from .errors import classify
from .payloads import AdviceRequest, AdviceResponse, GetTokenRequest, GetTokenResponse
from .request import (
    OutgoingRequest,
    base_request,
    normal_request,
    request_with_bearer_auth,
    request_with_bearer_auth_no_cache,
)

if TYPE_CHECKING:
    from opentelemetry.context import Context

__all__ = [
    "DEFAULT_TIMEOUT",
    "ClientOptions",
    "GatewayClient",
    "make_url",
]

DEFAULT_TIMEOUT = 30

URL_SEPARATOR = "/"


def make_url(*path: str) -> str:
    return URL_SEPARATOR.join(path)


@dataclass(frozen=True)
class ClientOptions:
    """
    Optional settings applied once when a :class:`GatewayClient` is built.

    ``session`` replaces the default transport (and resets the timeout);
    the endpoint fields replace the derived endpoint paths.
    """

    session: Optional[requests.Session] = None
    get_token_endpoint: Optional[str] = None
    advice_endpoint: Optional[str] = None


class GatewayClient:
    """
    Thin client around the GetToken and Advice endpoints.
    """

    def __init__(
        self,
        base_path: str,
        options: Optional[ClientOptions] = None,
    ) -> None:
        self._base_path = base_path.rstrip(URL_SEPARATOR)
        self._get_token_endpoint = make_url("V1", "PeymentApi", "GetToken")
        self._advice_endpoint = make_url("V1", "PeymentApi", "Advice")
        self.timeout: float = DEFAULT_TIMEOUT
        self._session = requests.Session()

        options = options or ClientOptions()
        if options.session is not None:
            self.set_session(options.session)
        if options.get_token_endpoint:
            self._get_token_endpoint = options.get_token_endpoint.strip(URL_SEPARATOR)
        if options.advice_endpoint:
            self._advice_endpoint = options.advice_endpoint.strip(URL_SEPARATOR)

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def get_token_endpoint(self) -> str:
        return self._get_token_endpoint

    @property
    def advice_endpoint(self) -> str:
        return self._advice_endpoint

    @property
    def session(self) -> requests.Session:
        """
        The underlying :class:`requests.Session`, exposed for further configuration.
        """
        return self._session

    def set_session(self, session: requests.Session) -> None:
        """
        Replace the transport. The request timeout goes back to :data:`DEFAULT_TIMEOUT`.

        Meant for setup; it is not synchronised with calls already in flight.
        """
        self._session = session
        self.timeout = DEFAULT_TIMEOUT

    def request(self, context: Optional["Context"] = None) -> OutgoingRequest:
        return base_request(context)

    def request_with_bearer_auth_no_cache(
        self,
        context: Optional["Context"],
        token: str,
    ) -> OutgoingRequest:
        return request_with_bearer_auth_no_cache(context, token)

    def request_with_bearer_auth(
        self,
        context: Optional["Context"],
        token: str,
    ) -> OutgoingRequest:
        return request_with_bearer_auth(context, token)

    def normal_request(self, context: Optional["Context"] = None) -> OutgoingRequest:
        return normal_request(context)

    def get_token(
        self,
        request: GetTokenRequest,
        context: Optional["Context"] = None,
    ) -> GetTokenResponse:
        url = self._base_path + URL_SEPARATOR + self._get_token_endpoint
        logging.info("Requesting purchase token for invoice %s from %s", request.invoice_id, url)
        outgoing = (
            self.normal_request(context)
            .set_body(request.to_payload())
            .set_result(GetTokenResponse)
        )
        return self._execute(outgoing, url, "error getting token")

    def advice(
        self,
        request: AdviceRequest,
        context: Optional["Context"] = None,
    ) -> AdviceResponse:
        url = self._base_path + URL_SEPARATOR + self._advice_endpoint
        logging.info("Submitting advice for receipt %s to %s", request.digital_receipt, url)
        outgoing = (
            self.normal_request(context)
            .set_body(request.to_payload())
            .set_result(AdviceResponse)
        )
        return self._execute(outgoing, url, "error getting advice")

    def _execute(self, outgoing: OutgoingRequest, url: str, err_message: str) -> Any:
        response: Optional[requests.Response] = None
        error: Optional[Exception] = None
        result: Any = None

        try:
            response = outgoing.post(self._session, url, timeout=self.timeout)
        except (requests.RequestException, OSError) as exc:
            error = exc

        structured_error = None
        if error is None and response is not None:
            if response.status_code < 400:
                try:
                    result = outgoing.decode_result(response)
                except (ValueError, TypeError) as exc:
                    error = exc
            else:
                structured_error = outgoing.decode_error(response)

        api_error = classify(error, response, err_message, structured_error=structured_error)
        if api_error is not None:
            logging.warning(
                "Gateway call to %s failed (%s): %s", url, api_error.kind.value, api_error
            )
            raise api_error from error

        return result
