from __future__ import annotations

import statistics

import pytest

from latency_tests import TRANSPORT_ERROR, Outcome, StatAccumulator, aggregate, merge, percentile
from latency_tests.stats import mean, sample_stdev


def _acc(entries: list[tuple[Outcome, float]]) -> StatAccumulator:
    acc = StatAccumulator()
    for outcome, ms in entries:
        acc.record(outcome, ms)
    return acc


def test_percentile_uses_floor_index() -> None:
    values = [float(v) for v in range(10)]

    assert percentile(values, 0) == 0.0
    assert percentile(values, 25) == 2.0
    assert percentile(values, 50) == 5.0
    assert percentile(values, 99) == 9.0


def test_percentile_100_is_clamped_to_max() -> None:
    assert percentile([1.0, 2.0, 3.0], 100) == 3.0


def test_percentile_of_empty_is_zero() -> None:
    assert percentile([], 50) == 0.0


def test_percentile_rejects_out_of_range() -> None:
    with pytest.raises(ValueError):
        percentile([1.0], 101)
    with pytest.raises(ValueError):
        percentile([1.0], -1)


def test_stdev_matches_sample_stdev() -> None:
    values = [3.1, 4.7, 9.2, 10.0, 15.5, 2.2]
    assert round(sample_stdev(values), 2) == round(statistics.stdev(values), 2)


def test_stdev_and_mean_for_short_sequences() -> None:
    assert sample_stdev([]) == 0.0
    assert sample_stdev([42.0]) == 0.0
    assert mean([]) == 0.0
    assert mean([2.0, 4.0]) == 3.0


def test_merge_disjoint_keeps_every_outcome() -> None:
    ok = Outcome.response(200)
    err = Outcome.response(500)
    a = _acc([(ok, 1.0), (ok, 2.0)])
    b = _acc([(err, 5.0), (TRANSPORT_ERROR, 7.0)])

    merged = merge([a, b])

    assert set(merged) == {ok, err, TRANSPORT_ERROR}
    assert sum(rec.count for rec in merged.values()) == a.total + b.total
    assert merged[ok].durations == [1.0, 2.0]


def test_aggregate_sorts_and_rounds() -> None:
    ok = Outcome.response(200)
    a = _acc([(ok, 30.004), (ok, 10.0)])
    b = _acc([(ok, 20.0)])

    rows = aggregate([a, b], [0, 50, 100])

    assert len(rows) == 1
    row = rows[0]
    assert row.count == 3
    assert row.mean == 20.0
    assert row.stdev == 10.0
    assert row.percentile(0) == 10.0
    assert row.percentile(50) == 20.0
    assert row.percentile(100) == 30.0


def test_aggregate_orders_outcomes_with_transport_error_last() -> None:
    acc = _acc([(TRANSPORT_ERROR, 1.0), (Outcome.response(500), 1.0), (Outcome.response(200), 1.0)])

    rows = aggregate([acc], [50])

    assert [str(r.outcome) for r in rows] == ["200", "500", "ERR"]


def test_aggregate_sums_counts_across_workers() -> None:
    ok = Outcome.response(200)
    err = Outcome.response(500)
    workers = [_acc([(ok, 1.0), (err, 2.0)]), _acc([(ok, 3.0)]), _acc([(err, 4.0), (err, 6.0)])]

    rows = {r.outcome: r for r in aggregate(workers, [50])}

    assert len(rows) == 2
    assert rows[ok].count == 2
    assert rows[err].count == 3


def test_accumulator_rejects_negative_latency() -> None:
    with pytest.raises(ValueError):
        StatAccumulator().record(Outcome.response(200), -0.1)

