"""Tests for sample value coercion and argument validation."""

import math
from decimal import Decimal
from fractions import Fraction

import pytest

from sampling import InvalidSeriesError, InvalidThresholdError, numeric_value, validate_threshold
from sampling.samples import bounded_threshold, validate_series


@pytest.mark.parametrize('raw,expected', [
    (3, 3.0),
    (2.5, 2.5),
    ('4.25', 4.25),
    (True, 1.0),
])
def test_numeric_value_accepts_numbers(raw, expected):
    assert numeric_value({'value': raw}, 'value') == expected


@pytest.mark.parametrize('raw', [None, float('nan'), 'n/a', [1], {'a': 1}])
def test_numeric_value_rejects_invalid(raw):
    assert numeric_value({'value': raw}, 'value') is None


def test_numeric_value_missing_key():
    assert numeric_value({'timestamp': 0}, 'value') is None


def test_numeric_value_keeps_infinity():
    assert math.isinf(numeric_value({'value': float('inf')}, 'value'))


def test_validate_threshold():
    assert validate_threshold(500) == 500
    with pytest.raises(InvalidThresholdError, match='buckets'):
        validate_threshold(0, 'buckets')


def test_validate_series():
    series = [{'timestamp': 0, 'value': 1}]
    assert validate_series(series) is series
    with pytest.raises(InvalidSeriesError):
        validate_series(({'timestamp': 0},))
    with pytest.raises(InvalidSeriesError, match=r'series\[1\]'):
        validate_series([{'timestamp': 0}, 5])


@pytest.mark.parametrize('raw,expected', [
    (Decimal('12.5'), 12.5),
    (Decimal('-3'), -3.0),
    (Fraction(1, 4), 0.25),
])
def test_numeric_value_accepts_decimal_and_fraction(raw, expected):
    assert numeric_value({'value': raw}, 'value') == expected


@pytest.mark.parametrize('raw', [Decimal('NaN'), Decimal('sNaN'), complex(1, 2)])
def test_numeric_value_rejects_nan_decimals_and_complex(raw):
    assert numeric_value({'value': raw}, 'value') is None


def test_numeric_value_huge_integers_become_infinite():
    assert numeric_value({'value': 10 ** 400}, 'value') == math.inf
    assert numeric_value({'value': -10 ** 400}, 'value') == -math.inf


def test_bounded_threshold():
    assert bounded_threshold(500, 1000) == 500
    assert bounded_threshold(1000, 1000) == 1000
    with pytest.raises(InvalidThresholdError, match='max_points must not exceed 1000'):
        bounded_threshold(1001, 1000, 'max_points')
    with pytest.raises(InvalidThresholdError):
        bounded_threshold(0, 1000)
