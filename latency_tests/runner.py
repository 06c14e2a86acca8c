from __future__ import annotations

import concurrent.futures
import logging
import threading
import time
from typing import Optional

import httpx

from ._cancel import CancellationToken
from .config import RunSettings
from .results import StatAccumulator
from .settings import settings as engine_settings
from .worker import run_worker

logger = logging.getLogger(__name__)


def run_deadline(
    duration: float,
    run_cancel: CancellationToken,
    process_cancel: CancellationToken,
    *,
    poll_interval: float = 1.0,
) -> bool:
    """Cancel ``run_cancel`` once ``duration`` seconds have elapsed.

    Returns True if the deadline fired. Returns False, without cancelling
    anything, when the process shuts down first or the run was already
    stopped by its owner.
    """
    start = time.monotonic()
    while not process_cancel.cancelled:
        remaining = duration - (time.monotonic() - start)
        if remaining <= 0:
            logger.debug("run deadline of %.3fs reached", duration)
            run_cancel.cancel()
            return True
        if run_cancel.wait(min(poll_interval, remaining)) and not process_cancel.cancelled:
            return False
    return False


def run_once(
    settings: RunSettings,
    process_cancel: CancellationToken,
    *,
    client: httpx.Client,
    poll_interval: Optional[float] = None,
) -> list[StatAccumulator]:
    """One bounded run: ``settings.concurrency`` workers plus a deadline timer.

    Does not return before every worker has stopped. Returns one accumulator
    per worker, including empty ones.
    """
    if poll_interval is None:
        poll_interval = engine_settings.poll_interval_s

    run_cancel = process_cancel.child()
    timer = threading.Thread(
        target=run_deadline,
        args=(settings.duration, run_cancel, process_cancel),
        kwargs={"poll_interval": poll_interval},
        name="deadline-timer",
        daemon=True,
    )
    timer.start()
    logger.info("run started: %d workers for %.1fs against %s", settings.concurrency, settings.duration, settings.url)

    try:
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=settings.concurrency, thread_name_prefix="worker"
        ) as ex:
            futs = [
                ex.submit(run_worker, settings, run_cancel, process_cancel, client=client)
                for _ in range(settings.concurrency)
            ]
            concurrent.futures.wait(futs, return_when=concurrent.futures.FIRST_EXCEPTION)
            # a failed worker stops its siblings; after a normal finish this only stops the timer
            run_cancel.cancel()
    finally:
        run_cancel.cancel()
        timer.join()
        run_cancel.detach()

    results = [fut.result() for fut in futs]
    logger.info("run finished: %d requests", sum(acc.total for acc in results))
    return results
