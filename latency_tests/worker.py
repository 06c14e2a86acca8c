from __future__ import annotations

import concurrent.futures
import logging
import queue
import threading
import time
from typing import Optional

import httpx

from ._cancel import CancellationToken
from .config import RunSettings
from .results import TRANSPORT_ERROR, Outcome, StatAccumulator

logger = logging.getLogger(__name__)


def _send(client: httpx.Client, settings: RunSettings) -> Outcome:
    response = client.get(settings.url, headers=settings.headers())
    # client.get() reads the whole body; make the drain explicit for streamed transports
    response.read()
    return Outcome.response(response.status_code)


def _timed_send(client: httpx.Client, settings: RunSettings) -> tuple[Outcome, float]:
    start = time.perf_counter()
    try:
        outcome = _send(client, settings)
    except httpx.RequestError as exc:
        outcome = TRANSPORT_ERROR
        logger.debug("request to %s failed: %r", settings.url, exc)
    return outcome, (time.perf_counter() - start) * 1000.0


class _Sender:
    """Daemon thread that performs one worker's requests.

    The worker only waits on the result, so a process interrupt can abandon a
    request that never completes. An abandoned request finishes (or dies with
    the process) on its own and its result is dropped.
    """

    def __init__(self, client: httpx.Client, settings: RunSettings) -> None:
        self._client = client
        self._settings = settings
        self._jobs: queue.SimpleQueue[Optional[concurrent.futures.Future]] = queue.SimpleQueue()
        self._thread = threading.Thread(target=self._loop, name="sender", daemon=True)
        self._thread.start()

    def _loop(self) -> None:
        while True:
            fut = self._jobs.get()
            if fut is None:
                return
            try:
                result = _timed_send(self._client, self._settings)
            except BaseException as exc:
                fut.set_exception(exc)
            else:
                fut.set_result(result)

    def submit(self) -> concurrent.futures.Future:
        fut: concurrent.futures.Future = concurrent.futures.Future()
        self._jobs.put(fut)
        return fut

    def close(self) -> None:
        self._jobs.put(None)


def _await_call(fut: concurrent.futures.Future, process_cancel: CancellationToken) -> Optional[tuple[Outcome, float]]:
    """Result of the call, or None if the process was cancelled first."""
    waker = process_cancel.child()
    fut.add_done_callback(lambda _: waker.cancel())
    try:
        waker.wait()
    finally:
        waker.detach()
    if not fut.done():
        return None
    return fut.result()


def run_worker(
    settings: RunSettings,
    run_cancel: CancellationToken,
    process_cancel: CancellationToken,
    *,
    client: httpx.Client,
) -> StatAccumulator:
    """Issue requests until cancelled or the call limit is reached.

    A run deadline lets the in-flight request complete; a process
    cancellation abandons it. ``run_cancel`` must be a child of
    ``process_cancel`` so the delay wakes on either.
    """
    stats = StatAccumulator()
    calls = 0
    sender = _Sender(client, settings)

    try:
        while not (run_cancel.cancelled or process_cancel.cancelled):
            if settings.limit is not None and calls >= settings.limit:
                break
            calls += 1

            result = _await_call(sender.submit(), process_cancel)
            if result is None:
                logger.debug("in-flight request to %s abandoned on cancellation", settings.url)
                break
            stats.record(*result)

            if settings.delay > 0 and run_cancel.wait(settings.delay):
                break
    finally:
        sender.close()

    return stats
