"""
Public facade for the Sepehr payment gateway client.

The most useful pieces are re-exported so integrators can
``from sepehr_payments import ...`` without navigating the package.
"""

from .api import create_gateway_client
from .core import (
    APIError,
    AdviceRequest,
    AdviceResponse,
    ClientOptions,
    ConfigError,
    DEFAULT_TIMEOUT,
    DeadlineExceeded,
    ErrorKind,
    GatewayClient,
    GatewayConfig,
    GatewayEnvironment,
    GetTokenRequest,
    GetTokenResponse,
    HTTPErrorResponse,
    build_environment,
    classify,
    load_env_file,
    load_gateway_config,
    with_deadline,
    with_propagator,
)

__all__ = (
    "APIError",
    "AdviceRequest",
    "AdviceResponse",
    "ClientOptions",
    "ConfigError",
    "DEFAULT_TIMEOUT",
    "DeadlineExceeded",
    "ErrorKind",
    "GatewayClient",
    "GatewayConfig",
    "GatewayEnvironment",
    "GetTokenRequest",
    "GetTokenResponse",
    "HTTPErrorResponse",
    "build_environment",
    "classify",
    "create_gateway_client",
    "load_env_file",
    "load_gateway_config",
    "with_deadline",
    "with_propagator",
)
