"""
Core primitives for calling the Sepehr payment gateway.
"""

from .client import DEFAULT_TIMEOUT, ClientOptions, GatewayClient, make_url
from .config import ConfigError, GatewayConfig, load_gateway_config
from .environment import GatewayEnvironment, build_environment, load_env_file
from .errors import (
    APIError,
    EMPTY_ERROR,
    ErrorKind,
    HTTPErrorResponse,
    classify,
    parse_error_kind,
)
from .payloads import AdviceRequest, AdviceResponse, GetTokenRequest, GetTokenResponse
from .request import (
    DeadlineExceeded,
    OutgoingRequest,
    base_request,
    normal_request,
    request_with_bearer_auth,
    request_with_bearer_auth_no_cache,
    with_deadline,
)
from .tracing import inject_tracing_headers, with_propagator

__all__ = [
    "APIError",
    "AdviceRequest",
    "AdviceResponse",
    "ClientOptions",
    "ConfigError",
    "DEFAULT_TIMEOUT",
    "DeadlineExceeded",
    "EMPTY_ERROR",
    "ErrorKind",
    "GatewayClient",
    "GatewayConfig",
    "GatewayEnvironment",
    "GetTokenRequest",
    "GetTokenResponse",
    "HTTPErrorResponse",
    "OutgoingRequest",
    "base_request",
    "build_environment",
    "classify",
    "inject_tracing_headers",
    "load_env_file",
    "load_gateway_config",
    "make_url",
    "normal_request",
    "parse_error_kind",
    "request_with_bearer_auth",
    "request_with_bearer_auth_no_cache",
    "with_deadline",
    "with_propagator",
]
