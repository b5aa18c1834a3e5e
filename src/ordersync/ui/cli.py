# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from ordersync.app import fetch_shopify_token, run_order_sync
from ordersync.common import configure_logging, preview_secret
from ordersync.config import ConfigurationError, get_app_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync Shopify orders into Netvisor")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run one incremental order sync")
    run.add_argument(
        "--state-file",
        type=Path,
        help="Checkpoint file to use instead of STATE_FILE",
    )
    run.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    token = subparsers.add_parser(
        "token",
        help="Fetch a Shopify access token with the client-credentials grant",
    )
    token.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    return parser.parse_args(list(argv))


def _run(args: argparse.Namespace) -> int:
    try:
        config = get_app_config()
    except ConfigurationError:
        log.exception("Configuration error")
        return 1

    try:
        run_order_sync(config=config, state_file=args.state_file)
    except Exception:
        log.exception("Fatal error during order sync")
        return 1
    return 0


def _token(_args: argparse.Namespace) -> int:
    try:
        token, lifetime = fetch_shopify_token()
    except ConfigurationError:
        log.exception("Configuration error")
        return 1
    except Exception:
        log.exception("Token fetch failed")
        return 1

    print(f"Access token: {preview_secret(token)}")
    print(f"Expires in: {lifetime} seconds")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "run":
        sys.exit(_run(args))
    if args.command == "token":
        sys.exit(_token(args))
    log.error("Unsupported command: %s", args.command)
    sys.exit(2)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run_cli() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run_cli()
