from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import FastAPI, Header, Query
from fastapi.responses import PlainTextResponse

from app.settings import Settings, settings as default_settings


def create_app(cfg: Optional[Settings] = None) -> FastAPI:
    """Target service with predictable latency, for trying the load generator locally."""
    cfg = cfg or default_settings
    app = FastAPI(title="Latency Target", version="0.1.0")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/ping")
    async def ping(
        latency_ms: Optional[float] = Query(default=None, ge=0),
        status: Optional[int] = Query(default=None, ge=100, le=599),
        authorization: Optional[str] = Header(default=None),
    ):
        delay_ms = cfg.latency_ms if latency_ms is None else latency_ms
        if delay_ms > 0:
            await asyncio.sleep(delay_ms / 1000.0)

        headers = {"X-Authorized": "1" if authorization else "0"}
        return PlainTextResponse(
            "x" * cfg.body_bytes,
            status_code=cfg.status_code if status is None else status,
            headers=headers,
        )

    return app


app = create_app()
