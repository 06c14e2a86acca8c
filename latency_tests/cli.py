from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import Optional, Sequence

from ._cancel import CancellationToken
from .config import ConfigError, resolve_settings
from .report import ConsoleReporter
from .session import run_session
from .settings import settings as engine_settings
from .transport import build_client

POSITIONALS = ("url", "concurrency", "seconds", "repeat", "delay_ms", "authorization", "percentiles")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="latency-tests",
        description="Measure HTTP GET latency from concurrent workers",
    )
    p.add_argument("url", nargs="?", help="target URL (required)")
    p.add_argument("concurrency", nargs="?", help="worker threads (default 2)")
    p.add_argument("seconds", nargs="?", help="duration of each run (default 60)")
    p.add_argument("repeat", nargs="?", help="number of measured runs (default 1)")
    p.add_argument("delay_ms", nargs="?", help="pause between calls per worker (default 0)")
    p.add_argument("authorization", nargs="?", help="Authorization header value")
    p.add_argument("percentiles", nargs="?", help="comma separated, default 5,25,50,75,95,99")
    p.add_argument("--limit", type=int, default=None, help="max calls per worker per run")
    p.add_argument("--warmup", type=float, default=None, help="warm-up seconds (0 disables)")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="logging level for stderr diagnostics",
    )
    return p


def _positional_args(ns: argparse.Namespace) -> list[str]:
    args: list[str] = []
    for name in POSITIONALS:
        value = getattr(ns, name)
        if value is None:
            break
        args.append(value)
    return args


def _configure_logging(level: Optional[str]) -> None:
    level = (level or engine_settings.log_level).upper()
    if level not in LOG_LEVELS:
        raise SystemExit(f"error: unknown log level {level!r}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        stream=sys.stderr,
    )


def _install_interrupt(cancel: CancellationToken):
    def handler(signum, frame) -> None:
        print("Cancelling...", flush=True)
        cancel.cancel()

    return signal.signal(signal.SIGINT, handler)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ns = build_parser().parse_args(argv)
    _configure_logging(ns.log_level)

    try:
        settings = resolve_settings(_positional_args(ns), limit=ns.limit)
    except ConfigError as exc:
        raise SystemExit(f"error: {exc}")

    if ns.warmup is not None and ns.warmup < 0:
        raise SystemExit("--warmup must be >= 0")

    cancel = CancellationToken()
    previous = _install_interrupt(cancel)
    try:
        with build_client() as client:
            result = run_session(
                settings,
                cancel,
                client=client,
                reporter=ConsoleReporter(),
                warmup_duration=ns.warmup,
            )
    finally:
        signal.signal(signal.SIGINT, previous)

    return 130 if result.cancelled else 0


if __name__ == "__main__":
    raise SystemExit(main())
