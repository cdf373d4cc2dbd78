"""
Configuration for talking to a Sepehr gateway deployment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from .environment import GatewayEnvironment, build_environment

__all__ = [
    "ConfigError",
    "DEFAULT_BASE_URL",
    "GatewayConfig",
    "load_gateway_config",
]

DEFAULT_BASE_URL = "https://sepehr.shaparak.ir:8081"

_FIELD_TO_ENV_KEY = {
    "base_url": "SEPEHR_BASE_URL",
    "terminal_id": "SEPEHR_TERMINAL_ID",
    "callback_url": "SEPEHR_CALLBACK_URL",
}


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _explicit_overrides(values: Mapping[str, Any]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for field_name, value in values.items():
        if value is None:
            continue
        overrides[_FIELD_TO_ENV_KEY[field_name]] = str(value)
    return overrides


def _normalize_url(raw_url: str, env_key: str) -> str:
    value = raw_url.strip()
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"{env_key} must be an http(s) URL, got '{raw_url}'")
    return value


def _parse_terminal_id(raw_value: str) -> int:
    try:
        terminal_id = int(raw_value.strip())
    except ValueError as exc:
        raise ConfigError(
            f"SEPEHR_TERMINAL_ID must be an integer, got '{raw_value}'"
        ) from exc
    if terminal_id <= 0:
        raise ConfigError("SEPEHR_TERMINAL_ID must be greater than zero")
    return terminal_id


@dataclass(frozen=True)
class GatewayConfig:
    base_url: str
    terminal_id: int
    callback_url: str

    @classmethod
    def from_environment(cls, environment: GatewayEnvironment) -> "GatewayConfig":
        base_url = _normalize_url(
            environment.get("SEPEHR_BASE_URL", DEFAULT_BASE_URL), "SEPEHR_BASE_URL"
        ).rstrip("/")

        try:
            terminal_raw = environment.require("SEPEHR_TERMINAL_ID")
            callback_raw = environment.require("SEPEHR_CALLBACK_URL")
        except KeyError as exc:
            raise ConfigError(f"{exc.args[0]} must be provided") from exc

        return cls(
            base_url=base_url,
            terminal_id=_parse_terminal_id(terminal_raw),
            callback_url=_normalize_url(callback_raw, "SEPEHR_CALLBACK_URL"),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        base_url: Optional[str] = None,
        terminal_id: Optional[int | str] = None,
        callback_url: Optional[str] = None,
    ) -> "GatewayConfig":
        merged_overrides = dict(overrides or {})
        merged_overrides.update(
            _explicit_overrides(
                {
                    "base_url": base_url,
                    "terminal_id": terminal_id,
                    "callback_url": callback_url,
                }
            )
        )
        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_environment(environment)


def load_gateway_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    base_url: Optional[str] = None,
    terminal_id: Optional[int | str] = None,
    callback_url: Optional[str] = None,
) -> GatewayConfig:
    """
    Convenience wrapper around :meth:`GatewayConfig.from_env`.

    Settings may come from environment variables, a ``.env`` file, keyword
    arguments, or any mix of the three.
    """
    return GatewayConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        base_url=base_url,
        terminal_id=terminal_id,
        callback_url=callback_url,
    )
