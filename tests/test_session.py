from __future__ import annotations

import io
import itertools

import httpx

from latency_tests import CancellationToken, Outcome, RunSettings, run_session
from latency_tests.report import ConsoleReporter


class RecordingReporter:
    def __init__(self, on_row=None) -> None:
        self.events: list[tuple] = []
        self._on_row = on_row

    def announce(self, settings: RunSettings) -> None:
        self.events.append(("announce", settings.url))

    def warmup(self, settings: RunSettings) -> None:
        self.events.append(("warmup", settings.duration))

    def start(self, settings: RunSettings) -> None:
        self.events.append(("start", settings.duration))

    def row(self, iteration: int, row) -> None:
        self.events.append(("row", iteration, row))
        if self._on_row is not None:
            self._on_row()

    def done(self, elapsed_s: float) -> None:
        self.events.append(("done", elapsed_s))

    def rows(self) -> list:
        return [e for e in self.events if e[0] == "row"]


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_two_outcomes_across_three_workers() -> None:
    counter = itertools.count()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200 if next(counter) % 2 == 0 else 500)

    settings = RunSettings(url="http://target/ping", concurrency=3, duration=30, limit=4, percentiles=(50,))
    reporter = RecordingReporter()

    with _client(handler) as client:
        result = run_session(
            settings, CancellationToken(), client=client, reporter=reporter, warmup_duration=0, poll_interval=0.05
        )

    rows = result.iterations[1]
    assert len(rows) == 2
    by_outcome = {r.outcome: r.count for r in rows}
    assert by_outcome == {Outcome.response(200): 6, Outcome.response(500): 6}
    assert len(reporter.rows()) == 2


def test_warmup_result_is_discarded() -> None:
    calls = itertools.count()

    def handler(request: httpx.Request) -> httpx.Response:
        next(calls)
        return httpx.Response(200)

    settings = RunSettings(url="http://target/ping", concurrency=1, duration=30, limit=2, repeat=1)
    reporter = RecordingReporter()

    with _client(handler) as client:
        result = run_session(
            settings, CancellationToken(), client=client, reporter=reporter, warmup_duration=0.5, poll_interval=0.05
        )

    assert next(calls) == 4  # 2 warm-up + 2 measured
    assert result.iterations[1][0].count == 2
    assert ("warmup", 0.5) in reporter.events
    assert ("start", 30) in reporter.events
    assert settings.duration == 30


def test_repeats_each_produce_rows() -> None:
    settings = RunSettings(url="http://target/ping", concurrency=2, duration=30, limit=1, repeat=3)
    reporter = RecordingReporter()

    with _client(lambda request: httpx.Response(204)) as client:
        result = run_session(
            settings, CancellationToken(), client=client, reporter=reporter, warmup_duration=0, poll_interval=0.05
        )

    assert sorted(result.iterations) == [1, 2, 3]
    assert [e[1] for e in reporter.rows()] == [1, 2, 3]
    assert reporter.events[-1][0] == "done"
    assert result.cancelled is False


def test_cancellation_stops_remaining_iterations() -> None:
    cancel = CancellationToken()
    settings = RunSettings(url="http://target/ping", concurrency=1, duration=30, limit=1, repeat=5)
    reporter = RecordingReporter(on_row=cancel.cancel)

    with _client(lambda request: httpx.Response(200)) as client:
        result = run_session(settings, cancel, client=client, reporter=reporter, warmup_duration=0, poll_interval=0.05)

    assert list(result.iterations) == [1]
    assert result.cancelled is True
    assert reporter.events[-1][0] == "done"


def test_console_report_layout() -> None:
    out = io.StringIO()
    settings = RunSettings(url="http://target/ping", concurrency=1, duration=30, limit=3, percentiles=(50, 99))

    with _client(lambda request: httpx.Response(200)) as client:
        run_session(
            settings,
            CancellationToken(),
            client=client,
            reporter=ConsoleReporter(out),
            warmup_duration=5,
            poll_interval=0.05,
        )

    lines = out.getvalue().splitlines()
    assert lines[0] == "URL: http://target/ping"
    assert lines[1] == "Warmup: run for 0:00:05"
    assert lines[2].startswith("Settings: run for 0:00:30 using 1 threads with 0:00:00 delay")
    assert "#\tCode\tCount\tSTDev\tAvg\tPercentiles (50,99)" in lines
    data = [line for line in lines if line.startswith("1\t")]
    assert len(data) == 1
    assert data[0].split("\t")[1:3] == ["200", "3"]
    assert lines[-1].startswith("done; total-time: ")
