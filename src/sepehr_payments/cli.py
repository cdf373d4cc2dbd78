"""
Command-line interface for exercising the Sepehr gateway endpoints.
"""

from __future__ import annotations

import argparse
import logging
from typing import Iterable, Sequence, Tuple

from .api import create_gateway_client
from .core.config import ConfigError, GatewayConfig, load_gateway_config
from .core.client import GatewayClient
from .core.errors import APIError
from .core.payloads import AdviceRequest, GetTokenRequest


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    return {key: value for key, value in pairs}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sepehr-payments",
        description="Call the Sepehr payment gateway GetToken and Advice endpoints",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing SEPEHR_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    get_token = commands.add_parser("get-token", help="Request a purchase token")
    get_token.add_argument("--amount", type=int, required=True, help="Amount in Rials")
    get_token.add_argument("--invoice-id", required=True, help="Merchant invoice identifier")
    get_token.add_argument(
        "--payload",
        default="",
        help="Opaque merchant data echoed back on the callback",
    )

    advice = commands.add_parser("advice", help="Confirm a completed purchase")
    advice.add_argument(
        "--digital-receipt",
        required=True,
        help="Digital receipt returned to the callback URL",
    )
    return parser


def _run_get_token(client: GatewayClient, config: GatewayConfig, args: argparse.Namespace) -> int:
    request = GetTokenRequest(
        amount=args.amount,
        invoice_id=args.invoice_id,
        terminal_id=config.terminal_id,
        callback_url=config.callback_url,
        payload=args.payload,
    )
    try:
        response = client.get_token(request)
    except APIError as exc:
        logging.error("Token request failed [%s]: %s", exc.kind.value, exc)
        return 1

    if not response.succeeded:
        logging.error("Gateway refused the token request: %s", response.raw)
        return 1

    logging.info("Purchase token for invoice %s: %s", args.invoice_id, response.access_token)
    return 0


def _run_advice(client: GatewayClient, config: GatewayConfig, args: argparse.Namespace) -> int:
    request = AdviceRequest(
        digital_receipt=args.digital_receipt,
        terminal_id=config.terminal_id,
    )
    try:
        response = client.advice(request)
    except APIError as exc:
        logging.error("Advice request failed [%s]: %s", exc.kind.value, exc)
        return 1

    if not response.succeeded:
        logging.error("Gateway rejected the advice: %s", response.raw)
        return 1

    logging.info(
        "Advice accepted with status %s, amount %s",
        response.status,
        response.return_id,
    )
    return 0


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_gateway_config(env_file=args.env_file, overrides=overrides)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_gateway_client(config=config)

    if args.command == "get-token":
        return _run_get_token(client, config, args)
    return _run_advice(client, config, args)
