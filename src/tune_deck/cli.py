"""Command-line interface for TuneDeck."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import threading
from types import TracebackType
from typing import Iterable, Optional, Tuple

from tune_deck.automation import osascript_available
from tune_deck.config import AppConfig, get_config_path, load_config, save_config
from tune_deck.logging_setup import init_logging

logger = logging.getLogger(__name__)


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="tune-deck", description="Terminal control surface for Music"
    )
    parser.add_argument(
        "--queue-name",
        default=None,
        help="Name of the playlist used as the managed queue",
    )
    parser.add_argument(
        "--poll-interval",
        type=_positive_float,
        default=None,
        help="Seconds between playback status polls",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Write the effective settings to the config file before starting",
    )
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return ``config`` with command-line values taking precedence."""
    changes: dict[str, object] = {}
    if args.queue_name:
        changes["queue_name"] = args.queue_name
    if args.poll_interval is not None:
        changes["poll_interval"] = max(0.25, min(30.0, args.poll_interval))
    return dataclasses.replace(config, **changes) if changes else config


def _run_tui(config: AppConfig) -> int:
    try:
        from tune_deck.tui import run_tui
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return run_tui(config)


def _install_excepthooks() -> None:
    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))

    sys.excepthook = excepthook

    def thread_hook(args: threading.ExceptHookArgs) -> None:
        exc_value = args.exc_value or RuntimeError("unknown")
        exc_info: Tuple[
            type[BaseException], BaseException, Optional[TracebackType]
        ] = (
            args.exc_type,
            exc_value,
            args.exc_traceback,
        )
        thread_name = args.thread.name if args.thread else "thread"
        logger.exception("Thread exception in %s", thread_name, exc_info=exc_info)

    threading.excepthook = thread_hook


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    init_logging()
    logger.info("App start")
    _install_excepthooks()

    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if not osascript_available():
        print("osascript not found; TuneDeck needs macOS to run.", file=sys.stderr)
        logger.error("osascript not available")
        return 1

    config = apply_overrides(load_config(), args)
    if args.save_config:
        try:
            save_config(config)
        except OSError as exc:
            logger.exception("Failed to save config")
            print(f"Could not save config: {exc}", file=sys.stderr)
        else:
            logger.info("Saved config to %s", get_config_path())
    exit_code = _run_tui(config)
    logger.info("App exit code=%s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
