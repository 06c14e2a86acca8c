from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, Mapping


class OutcomeKind(enum.Enum):
    RESPONSE = "response"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class Outcome:
    """How a single request ended: an HTTP status, or a transport failure."""

    kind: OutcomeKind
    status_code: int = 0

    @classmethod
    def response(cls, status_code: int) -> Outcome:
        return cls(OutcomeKind.RESPONSE, int(status_code))

    @property
    def is_transport_error(self) -> bool:
        return self.kind is OutcomeKind.TRANSPORT_ERROR

    def sort_key(self) -> tuple[int, int]:
        # transport errors after every status code
        return (1 if self.is_transport_error else 0, self.status_code)

    def __str__(self) -> str:
        return "ERR" if self.is_transport_error else str(self.status_code)


TRANSPORT_ERROR = Outcome(OutcomeKind.TRANSPORT_ERROR)


@dataclass
class StatRecord:
    count: int = 0
    durations: list[float] = field(default_factory=list)  # milliseconds


class StatAccumulator:
    """Latencies grouped by outcome. Owned by exactly one worker while it runs."""

    def __init__(self) -> None:
        self._records: dict[Outcome, StatRecord] = {}

    def record(self, outcome: Outcome, latency_ms: float) -> None:
        if latency_ms < 0:
            raise ValueError("latency_ms must be >= 0")
        rec = self._records.get(outcome)
        if rec is None:
            rec = StatRecord()
            self._records[outcome] = rec
        rec.count += 1
        rec.durations.append(latency_ms)

    def get(self, outcome: Outcome) -> StatRecord | None:
        return self._records.get(outcome)

    def outcomes(self) -> list[Outcome]:
        return list(self._records)

    def items(self) -> Iterator[tuple[Outcome, StatRecord]]:
        return iter(self._records.items())

    @property
    def total(self) -> int:
        return sum(rec.count for rec in self._records.values())

    def __len__(self) -> int:
        return len(self._records)


@dataclass(frozen=True)
class AggregateRow:
    outcome: Outcome
    count: int
    stdev: float
    mean: float
    percentiles: tuple[tuple[int, float], ...]

    def percentile(self, p: int) -> float:
        for key, value in self.percentiles:
            if key == p:
                return value
        raise KeyError(p)


@dataclass(frozen=True)
class SessionResult:
    iterations: Mapping[int, list[AggregateRow]]
    elapsed_s: float
    cancelled: bool = False
