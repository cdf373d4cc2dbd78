"""
Layered environment loading for the gateway configuration.

Values come from the process environment, an optional ``.env`` file and
explicit overrides. The ``.env`` file only fills keys the environment does not
already define; overrides always win.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional

__all__ = [
    "GatewayEnvironment",
    "build_environment",
    "load_env_file",
    "parse_env_text",
]

_QUOTES = ("'", '"')


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    # strip trailing inline comments from unquoted values
    if " #" in value:
        value = value.split(" #", 1)[0].rstrip()
    return value


def parse_env_text(text: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            values[key] = _unquote(value.strip())
    return values


def _read_env_file(path: Path) -> Dict[str, str]:
    try:
        return parse_env_text(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Copy the keys of ``path`` into ``environ`` (defaults to :data:`os.environ`).

    Keys already present are left alone.
    """
    target: MutableMapping[str, str] = environ if environ is not None else os.environ
    for key, value in _read_env_file(Path(path)).items():
        target.setdefault(key, value)
    return dict(target)


@dataclass(frozen=True)
class GatewayEnvironment:
    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.variables.get(key)
        if value is None or value == "":
            return default
        return value

    def require(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> GatewayEnvironment:
    """
    Merge ``base`` (default :data:`os.environ`), ``env_file`` and ``overrides``.

    Pass ``env_file=None`` to skip file loading.
    """
    merged: Dict[str, str] = dict(os.environ if base is None else base)

    if env_file is not None:
        for key, value in _read_env_file(Path(env_file)).items():
            merged.setdefault(key, value)

    if overrides:
        merged.update(overrides)

    return GatewayEnvironment(variables=merged)
