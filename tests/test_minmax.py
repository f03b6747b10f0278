"""Tests for min/max-per-bucket sampling."""

import math
from decimal import Decimal

import pytest

from sampling import InvalidThresholdError, min_max_sample


def _series(values):
    return [{'timestamp': i, 'value': v} for i, v in enumerate(values)]


def test_min_and_max_per_bucket_in_time_order():
    series = _series([1, 5, 3, 2,  7, 7, 7, 7,  None, 4, None, 0])
    sampled = min_max_sample(series, 3)

    assert [s['timestamp'] for s in sampled] == [0, 1, 4, 9, 11]


def test_max_before_min_keeps_chronological_order():
    series = _series([9, 1, 5, 5,  0, 0, 0, 0,  0, 0, 0, 0])
    sampled = min_max_sample(series, 3)

    assert [s['timestamp'] for s in sampled][:2] == [0, 1]
    assert sampled[0]['value'] == 9
    assert sampled[1]['value'] == 1


def test_all_null_bucket_keeps_first_sample():
    series = _series([None, None, None, None,  1, 2, 3, 4,  5, 6, 7, 8])
    sampled = min_max_sample(series, 3)

    assert sampled[0] is series[0]
    assert sampled[0]['value'] is None
    assert [s['timestamp'] for s in sampled] == [0, 4, 7, 8, 11]


def test_pass_through_when_short():
    series = _series(range(10))
    sampled = min_max_sample(series, 5)
    assert sampled == series
    assert sampled is not series


def test_last_bucket_may_be_shorter():
    # ceil(10 / 4) = 3 per bucket: [0..2], [3..5], [6..8], [9]
    series = _series([3, 1, 2,  6, 4, 5,  8, 9, 7,  10])
    sampled = min_max_sample(series, 4)

    assert [s['timestamp'] for s in sampled] == [0, 1, 3, 4, 7, 8, 9]


@pytest.mark.parametrize('length,buckets', [(1000, 10), (1001, 7), (5000, 250), (37, 5)])
def test_bounds_hold(length, buckets):
    values = [math.sin(i / 9.0) * 50 if i % 17 else None for i in range(length)]
    series = _series(values)
    sampled = min_max_sample(series, buckets)

    assert len(sampled) <= 2 * buckets
    chunk = math.ceil(length / buckets)
    for start in range(0, length, chunk):
        window = [v for v in values[start:start + chunk] if v is not None]
        picked = [s['value'] for s in sampled
                  if start <= s['timestamp'] < start + chunk and s['value'] is not None]
        if window:
            assert max(picked) >= max(window)
            assert min(picked) <= min(window)


def test_nan_never_selected():
    series = _series([float('nan'), 2, 1, 3,  4, float('nan'), 6, 5])
    sampled = min_max_sample(series, 2)

    assert [s['timestamp'] for s in sampled] == [2, 3, 4, 6]


def test_empty_series():
    assert min_max_sample([], 10) == []


@pytest.mark.parametrize('buckets', [0, -3, 1.5, None])
def test_invalid_buckets_rejected(buckets):
    with pytest.raises(InvalidThresholdError):
        min_max_sample(_series(range(100)), buckets)


def test_decimal_values_find_real_extrema():
    series = _series([Decimal(v) for v in [0, 1, 2, 10, 3, 4, 5, 6, 7, 0]])
    sampled = min_max_sample(series, 2)

    assert [s['timestamp'] for s in sampled] == [0, 3, 8, 9]
    assert sampled[1]['value'] == Decimal(10)


def test_huge_integer_does_not_raise():
    values = list(range(100))
    values[50] = 10 ** 400
    sampled = min_max_sample(_series(values), 10)

    assert any(s['timestamp'] == 50 for s in sampled)
