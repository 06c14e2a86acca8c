from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from ._cancel import CancellationToken
from .config import RunSettings
from .report import Reporter
from .results import AggregateRow, SessionResult
from .runner import run_once
from .settings import settings as engine_settings
from .stats import aggregate

logger = logging.getLogger(__name__)


def run_session(
    settings: RunSettings,
    process_cancel: CancellationToken,
    *,
    client: httpx.Client,
    reporter: Reporter,
    warmup_duration: Optional[float] = None,
    poll_interval: Optional[float] = None,
) -> SessionResult:
    """Warm up once, then run ``settings.repeat`` measured runs.

    Cancellation is checked before each run only; a run already started
    finishes on its own deadline or through the cancelled workers.
    """
    if warmup_duration is None:
        warmup_duration = engine_settings.warmup_seconds

    reporter.announce(settings)

    if warmup_duration > 0 and not process_cancel.cancelled:
        warm = settings.with_duration(warmup_duration)
        reporter.warmup(warm)
        run_once(warm, process_cancel, client=client, poll_interval=poll_interval)

    reporter.start(settings)

    iterations: dict[int, list[AggregateRow]] = {}
    start = time.perf_counter()
    for stage in range(1, settings.repeat + 1):
        if process_cancel.cancelled:
            logger.info("cancelled before iteration %d", stage)
            break
        results = run_once(settings, process_cancel, client=client, poll_interval=poll_interval)
        rows = aggregate(results, settings.percentiles)
        iterations[stage] = rows
        for row in rows:
            reporter.row(stage, row)

    elapsed = time.perf_counter() - start
    reporter.done(elapsed)
    return SessionResult(iterations=iterations, elapsed_s=elapsed, cancelled=process_cancel.cancelled)
