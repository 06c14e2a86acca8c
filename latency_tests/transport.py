from __future__ import annotations

from typing import Optional

import httpx

from .settings import settings


def build_client(
    *,
    timeout_s: Optional[float] = None,
    user_agent: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Client shared by every worker thread.

    Connection limits are lifted so concurrency is bounded only by the
    number of workers.
    """
    if timeout_s is None:
        timeout_s = settings.request_timeout_s
    return httpx.Client(
        limits=httpx.Limits(max_connections=None, max_keepalive_connections=None),
        timeout=httpx.Timeout(timeout_s),
        headers={"User-Agent": user_agent or settings.user_agent},
        transport=transport,
    )
