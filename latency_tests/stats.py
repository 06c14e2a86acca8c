from __future__ import annotations

import statistics
from typing import Iterable, Sequence

from .results import AggregateRow, Outcome, StatAccumulator, StatRecord


def merge(accumulators: Iterable[StatAccumulator]) -> dict[Outcome, StatRecord]:
    merged: dict[Outcome, StatRecord] = {}
    for acc in accumulators:
        for outcome, rec in acc.items():
            target = merged.get(outcome)
            if target is None:
                target = StatRecord()
                merged[outcome] = target
            target.count += rec.count
            target.durations.extend(rec.durations)
    return merged


def percentile(sorted_values: Sequence[float], p: int) -> float:
    """Nearest-rank percentile: element at ``floor(n * p / 100)``.

    ``p == 100`` lands one past the end and is clamped to the last element.
    """
    if not 0 <= p <= 100:
        raise ValueError("p must be within [0, 100]")
    n = len(sorted_values)
    if n == 0:
        return 0.0
    return sorted_values[min(n * p // 100, n - 1)]


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return statistics.fmean(values)


def sample_stdev(values: Sequence[float]) -> float:
    if len(values) <= 1:
        return 0.0
    return statistics.stdev(values)


def summarize(outcome: Outcome, rec: StatRecord, percentiles: Sequence[int]) -> AggregateRow:
    ordered = sorted(rec.durations)
    return AggregateRow(
        outcome=outcome,
        count=rec.count,
        stdev=round(sample_stdev(ordered), 2),
        mean=round(mean(ordered), 2),
        percentiles=tuple((p, round(percentile(ordered, p), 2)) for p in percentiles),
    )


def aggregate(accumulators: Iterable[StatAccumulator], percentiles: Sequence[int]) -> list[AggregateRow]:
    merged = merge(accumulators)
    return [
        summarize(outcome, merged[outcome], percentiles)
        for outcome in sorted(merged, key=Outcome.sort_key)
    ]
