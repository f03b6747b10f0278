"""
Sample and series helpers shared by all samplers.

A sample is any mapping with a 'timestamp' key plus one or more value fields,
e.g. {'timestamp': 1700000000.0, 'value': 21.5, 'humidity': None}. A series is
an ordered list of samples and a labeled series is {'label': ..., 'series': ...}.
"""

import decimal
import math
import numbers
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .exceptions import InvalidSeriesError, InvalidThresholdError

Sample = Mapping[str, Any]
Series = Sequence[Sample]
LabeledSeries = Dict[str, Any]

TIMESTAMP_KEY = 'timestamp'
DEFAULT_VALUE_KEY = 'value'


def numeric_value(sample: Sample, value_key: str) -> Optional[float]:
    """
    Read a sample's value field as a float.

    Real numbers (int, float, Fraction), Decimal and numeric strings are
    accepted. Integers too large for a float become +/- infinity.

    Args:
        sample: Sample mapping
        value_key: Name of the value field

    Returns:
        The value as a float, or None if it is missing, None, NaN or not numeric
    """
    value = sample.get(value_key)
    if not isinstance(value, (numbers.Real, decimal.Decimal, str)):
        return None
    try:
        result = float(value)
    except OverflowError:
        result = math.inf if value > 0 else -math.inf
    except ValueError:
        return None
    if math.isnan(result):
        return None
    return result


def series_values(series: Series, value_key: str) -> List[Optional[float]]:
    """Coerce every sample of a series once, so samplers never re-parse fields."""
    return [numeric_value(sample, value_key) for sample in series]


def validate_threshold(threshold: Any, name: str = 'threshold') -> int:
    """
    Check that a threshold or bucket count is a positive integer.

    Raises:
        InvalidThresholdError: if the value is not a positive int
    """
    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Integral):
        raise InvalidThresholdError(f"{name} must be a positive integer, got {threshold!r}")
    if threshold <= 0:
        raise InvalidThresholdError(f"{name} must be a positive integer, got {threshold}")
    return int(threshold)


def bounded_threshold(threshold: Any, maximum: int, name: str = 'threshold') -> int:
    """
    Validate a caller-supplied threshold and cap it at the configured maximum.

    Raises:
        InvalidThresholdError: if the value is not a positive int or exceeds maximum
    """
    threshold = validate_threshold(threshold, name)
    if threshold > maximum:
        raise InvalidThresholdError(f"{name} must not exceed {maximum}")
    return threshold


def validate_series(series: Any, name: str = 'series') -> List[Sample]:
    """
    Check that a decoded request body field is a list of sample mappings.

    Raises:
        InvalidSeriesError: if it is not a list of mappings
    """
    if not isinstance(series, list):
        raise InvalidSeriesError(f"{name} must be a list of samples")
    for position, sample in enumerate(series):
        if not isinstance(sample, Mapping):
            raise InvalidSeriesError(f"{name}[{position}] must be an object")
    return series
