"""Command-line runner for headless game sessions."""

from __future__ import annotations

import argparse
import logging
import sys

from sheet_games.config import GameKind, SessionConfig
from sheet_games.grid import CellLocation
from sheet_games.session import GameSession

logger = logging.getLogger(__name__)


def _parse_location(text: str) -> CellLocation:
    try:
        row, column = (int(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected ROW,COLUMN, got {text!r}"
        ) from None
    return CellLocation(row, column)


def _parse_assignment(text: str) -> tuple[CellLocation, str]:
    location, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(
            f"expected ROW,COLUMN=VALUE, got {text!r}"
        )
    return _parse_location(location), value


def _parse_key_press(text: str) -> tuple[int, str]:
    tick, sep, key = text.partition(":")
    if not sep or not key or not tick.isdigit():
        raise argparse.ArgumentTypeError(f"expected TICK:KEY, got {text!r}")
    return int(tick), key


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheet-games",
        description="Run Life, Snake, or Tetros on an in-memory grid.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    run_p = sub.add_parser("run", help="Run a headless game session.")
    run_p.add_argument(
        "--game", type=str, default=None,
        choices=[kind.value for kind in GameKind],
    )
    run_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON session config (flags override it).",
    )
    run_p.add_argument("--rows", type=int, default=None)
    run_p.add_argument("--columns", type=int, default=None)
    run_p.add_argument("--seed", type=int, default=None)
    run_p.add_argument("--ticks", type=int, default=10)
    run_p.add_argument(
        "--set", dest="cells", type=_parse_assignment, action="append",
        default=[], metavar="ROW,COLUMN=VALUE",
        help="Write a cell before starting; repeatable.",
    )
    run_p.add_argument(
        "--start", type=_parse_location, default=None, metavar="ROW,COLUMN",
        help="Selected cell passed to the start command.",
    )
    run_p.add_argument(
        "--key", dest="keys", type=_parse_key_press, action="append",
        default=[], metavar="TICK:KEY",
        help="Press KEY just before tick TICK; repeatable.",
    )
    run_p.add_argument(
        "--quiet", action="store_true",
        help="Only print the final grid.",
    )
    return parser


def _run(args: argparse.Namespace) -> int:
    config = (
        SessionConfig.load(args.config) if args.config else SessionConfig()
    )
    overrides: dict = {}
    for name in ("game", "rows", "columns", "seed"):
        val = getattr(args, name, None)
        if val is not None:
            overrides[name] = val
    if overrides:
        d = config.to_dict()
        d.update(overrides)
        config = SessionConfig(**d)

    session = GameSession(config, notify=print)
    for location, value in args.cells:
        session.set_cell(location, value or None)
    session.start(args.start)

    presses: dict[int, list[str]] = {}
    for tick, key in args.keys:
        presses.setdefault(tick, []).append(key)

    for tick in range(1, args.ticks + 1):
        for key in presses.get(tick, []):
            session.press(key)
        session.tick()
        if not args.quiet:
            print(f"-- tick {tick}")  # noqa: T201
            print(session.grid.render_text())  # noqa: T201
        if session.ended:
            break

    if args.quiet:
        print(session.grid.render_text())  # noqa: T201
    logger.info("Session finished after %d ticks.", session.ticks)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``sheet-games`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {"run": _run}
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
