from __future__ import annotations

import datetime as dt
import sys
from typing import Protocol, Sequence, TextIO

from .config import RunSettings
from .results import AggregateRow

SEP = "-------"
HEADER_SEP = "\t".join([SEP] * 6)


class Reporter(Protocol):
    def announce(self, settings: RunSettings) -> None: ...

    def warmup(self, settings: RunSettings) -> None: ...

    def start(self, settings: RunSettings) -> None: ...

    def row(self, iteration: int, row: AggregateRow) -> None: ...

    def done(self, elapsed_s: float) -> None: ...


def format_span(seconds: float) -> str:
    return str(dt.timedelta(seconds=seconds))


def format_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def format_row(iteration: int, row: AggregateRow) -> str:
    pcts = ", ".join(format_number(v) for _, v in row.percentiles)
    return "\t".join(
        [
            str(iteration),
            str(row.outcome),
            str(row.count),
            format_number(row.stdev),
            format_number(row.mean),
            pcts,
        ]
    )


def format_header(percentiles: Sequence[int]) -> str:
    return f"#\tCode\tCount\tSTDev\tAvg\tPercentiles ({','.join(str(p) for p in percentiles)})"


class ConsoleReporter:
    """Tab separated report on a text stream (stdout by default)."""

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out

    def _print(self, line: str = "") -> None:
        print(line, file=self._out or sys.stdout, flush=True)

    def announce(self, settings: RunSettings) -> None:
        self._print(f"URL: {settings.url}")

    def warmup(self, settings: RunSettings) -> None:
        self._print(f"Warmup: run for {format_span(settings.duration)}")

    def start(self, settings: RunSettings) -> None:
        self._print(
            f"Settings: run for {format_span(settings.duration)} using {settings.concurrency} threads "
            f"with {format_span(settings.delay)} delay between calls "
            f"and repeat everything {settings.repeat} times"
        )
        if settings.limit is not None:
            self._print(f"Limit: {settings.limit} calls per thread")
        self._print(HEADER_SEP)
        self._print(format_header(settings.percentiles))
        self._print(HEADER_SEP)

    def row(self, iteration: int, row: AggregateRow) -> None:
        self._print(format_row(iteration, row))

    def done(self, elapsed_s: float) -> None:
        self._print()
        self._print(f"done; total-time: {format_span(elapsed_s)}")
