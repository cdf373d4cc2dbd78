"""
Public, high-level helpers for the Sepehr payment gateway client.
"""

from __future__ import annotations

from typing import Mapping, Optional

import requests

from .core.client import ClientOptions, GatewayClient
from .core.config import GatewayConfig, load_gateway_config

__all__ = [
    "create_gateway_client",
]


def create_gateway_client(
    *,
    config: Optional[GatewayConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    base_url: Optional[str] = None,
    terminal_id: Optional[int | str] = None,
    callback_url: Optional[str] = None,
) -> GatewayClient:
    """
    Construct a :class:`GatewayClient`.

    Callers either pass a ready-made :class:`GatewayConfig` or let the helper
    assemble one from environment data, not both.
    """
    if config is not None:
        extras = (overrides, base, base_url, terminal_id, callback_url)
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built GatewayConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_gateway_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            base_url=base_url,
            terminal_id=terminal_id,
            callback_url=callback_url,
        )
    return GatewayClient(cfg.base_url, ClientOptions(session=session))
