#!/usr/bin/env python3
"""
SC Noticeboard — Terminal Poller
=================================

Polls the live cause-list board and alerts when a tracked matter is near.

Usage:
    python main.py "1/12, RC1/7"                 # Poll every 10s until Ctrl-C
    python main.py "1/12" --threshold 3 --once   # Single cycle, then exit
    python main.py "1/12" --rehearse             # Play TEST alerts along the window
    TRACKED_MATTERS="3/40" python main.py        # Matters from the environment
"""

from __future__ import annotations

import argparse
import logging
import sys

from noticeboard.cache import BoardCache
from noticeboard.config import LOG_FORMAT, load_settings
from noticeboard.matters import parse_matters
from noticeboard.models import Board, EvaluationResult, StatusKind
from noticeboard.notifier import LogNotifier
from noticeboard.poller import PollLoop
from noticeboard.proximity import ProximityEngine
from noticeboard.upstream import UpstreamClient

# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72

_KIND_COLORS = {
    StatusKind.CONFIRMED: _GREEN,
    StatusKind.APPROXIMATE: _YELLOW,
    StatusKind.TARGET_NOT_LISTED: _RED,
    StatusKind.OUTSIDE_WINDOW: _CYAN,
    StatusKind.WAITING: _DIM,
}


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_cycle(board: Board, result: EvaluationResult) -> None:
    """Print the ticker and one line per tracked matter."""
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  NOTICEBOARD{_RESET}  {_DIM}updated {board.updated_at}{_RESET}")
    print(f"{'─' * _WIDTH}")
    print(f"  {_DIM}{board.ticker_text[: _WIDTH * 2]}{_RESET}")
    print(f"{'─' * _WIDTH}")

    if not result.statuses:
        print("  No tracked matters.")
    for status in result.statuses:
        color = _KIND_COLORS[status.kind]
        current = status.current_item if status.current_item is not None else "—"
        note = f" {_DIM}(estimated window){_RESET}" if status.window_synthesized else ""
        print(
            f"  {str(status.matter):<12} current {current!s:<6} "
            f"{color}{_BOLD}{status.status}{_RESET}{note}"
        )

    for alert in result.due:
        print(f"  {_YELLOW}{_BOLD}ALERT{_RESET} {alert.title} · {alert.body}")
    print(f"{'=' * _WIDTH}")


# ─── Main ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Poll the court noticeboard for tracked matters.")
    parser.add_argument("matters", nargs="?", help='Tracked matters, e.g. "1/12, RC1/7"')
    parser.add_argument("--threshold", type=int, help="Items before the target to alert on")
    parser.add_argument("--interval", type=float, help="Seconds between polls")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument("--rehearse", action="store_true", help="Play TEST alerts and exit")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the poll loop and print a report every cycle."""
    args = build_parser().parse_args(argv)
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    matters = parse_matters(args.matters if args.matters is not None else settings.tracked_matters)
    if not matters:
        print('  Enter at least one matter, e.g. python main.py "1/12"')
        return 2

    client = UpstreamClient(
        settings.upstream_url,
        timeout=settings.upstream_timeout_seconds,
        user_agent=settings.user_agent,
    )
    cache = BoardCache(client.fetch_board, ttl_seconds=settings.cache_ttl_seconds)
    loop = PollLoop(
        cache.get,
        ProximityEngine(),
        LogNotifier(),
        matters,
        threshold=args.threshold or settings.alert_threshold,
        interval_seconds=args.interval or settings.poll_interval_seconds,
        on_cycle=print_cycle,
    )

    if args.rehearse:
        try:
            sent = loop.rehearse()
        except Exception as e:
            print(f"  {_RED}Rehearsal failed: {e}{_RESET}")
            return 1
        print(f"  Rehearsed {sent} alert(s).")
        return 0

    if args.once:
        return 0 if loop.run_once() is not None else 1

    try:
        loop.run()
    except KeyboardInterrupt:
        loop.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
