from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence

import httpx

DEFAULT_CONCURRENCY = 2
DEFAULT_DURATION_S = 60.0
DEFAULT_REPEAT = 1
DEFAULT_PERCENTILES: tuple[int, ...] = (5, 25, 50, 75, 95, 99)


class ConfigError(ValueError):
    """Invalid or missing run configuration."""


def _check_url(url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ConfigError(f"invalid url {url!r}: {exc}") from None
    if parsed.scheme not in ("http", "https"):
        raise ConfigError(f"url must use http or https: {url!r}")
    if not parsed.host:
        raise ConfigError(f"url has no host: {url!r}")


@dataclass(frozen=True)
class RunSettings:
    url: str
    concurrency: int = DEFAULT_CONCURRENCY
    duration: float = DEFAULT_DURATION_S  # seconds
    limit: Optional[int] = None  # calls per worker
    delay: float = 0.0  # seconds between calls
    authorization: Optional[str] = None
    percentiles: tuple[int, ...] = DEFAULT_PERCENTILES
    repeat: int = DEFAULT_REPEAT

    def __post_init__(self) -> None:
        if not self.url or not self.url.strip():
            raise ConfigError("url is required")
        _check_url(self.url)
        if self.concurrency < 1:
            raise ConfigError("concurrency must be >= 1")
        if self.duration < 0:
            raise ConfigError("duration must be >= 0")
        if self.delay < 0:
            raise ConfigError("delay must be >= 0")
        if self.repeat < 0:
            raise ConfigError("repeat must be >= 0")
        if self.limit is not None and self.limit < 1:
            raise ConfigError("limit must be >= 1")
        for p in self.percentiles:
            if not 0 <= p <= 100:
                raise ConfigError(f"percentile out of range: {p}")

        auth = self.authorization.strip() if self.authorization else ""
        object.__setattr__(self, "authorization", auth or None)
        object.__setattr__(self, "percentiles", tuple(self.percentiles))

    def with_duration(self, seconds: float) -> RunSettings:
        return replace(self, duration=seconds)

    def headers(self) -> dict[str, str]:
        if self.authorization:
            return {"Authorization": self.authorization}
        return {}


def parse_percentiles(raw: str) -> tuple[int, ...]:
    """Parse ``"50,95,99"``; blanks are skipped and values outside [0, 100] dropped."""
    values = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            values.append(int(part))
        except ValueError:
            raise ConfigError(f"invalid percentile: {part!r}") from None
    return tuple(p for p in values if 0 <= p <= 100)


def _int_arg(args: Sequence[str], index: int, name: str, default: int) -> int:
    if len(args) <= index:
        return default
    try:
        return int(args[index])
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {args[index]!r}") from None


def resolve_settings(args: Sequence[str], *, limit: Optional[int] = None) -> RunSettings:
    """Build settings from positional arguments.

    Order: url, concurrency, seconds, repeat, delay_ms, authorization,
    percentiles. Only the url is required.
    """
    if not args:
        raise ConfigError("url is required as the first argument")

    percentiles = parse_percentiles(args[6]) if len(args) > 6 else DEFAULT_PERCENTILES

    return RunSettings(
        url=args[0],
        concurrency=_int_arg(args, 1, "concurrency", DEFAULT_CONCURRENCY),
        duration=float(_int_arg(args, 2, "seconds", int(DEFAULT_DURATION_S))),
        repeat=_int_arg(args, 3, "repeat", DEFAULT_REPEAT),
        delay=_int_arg(args, 4, "delay", 0) / 1000.0,
        authorization=args[5] if len(args) > 5 else None,
        percentiles=percentiles,
        limit=limit,
    )
