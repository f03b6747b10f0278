"""
Largest Triangle Three Buckets (LTTB) downsampling.

LTTB keeps the first and last samples and picks one sample per interior
bucket: the one forming the largest triangle with the previously picked sample
and the average of the next bucket. This preserves peaks, valleys and trends
far better than striding or averaging.

The x coordinate of every point is its index in the series, so timestamps may
be numbers or ISO strings.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .buckets import bucket_midpoint, iter_buckets
from .samples import DEFAULT_VALUE_KEY, Sample, Series, series_values, validate_threshold

logger = logging.getLogger(__name__)


def bucket_average(values: Sequence[Optional[float]], start: int, end: int) -> Tuple[float, float]:
    """
    Average position and value of the valid samples in a bucket.

    Args:
        values: Coerced series values (None for null/NaN/non-numeric)
        start: First index of the bucket
        end: Index one past the last sample of the bucket

    Returns:
        (avg_x, avg_y); ((start + end) / 2, 0.0) if the bucket has no valid value
    """
    avg_x = 0.0
    avg_y = 0.0
    count = 0
    for j in range(start, end):
        value = values[j]
        if value is not None:
            avg_x += j
            avg_y += value
            count += 1

    if count == 0:
        return (start + end) / 2, 0.0
    return avg_x / count, avg_y / count


def select_largest_triangle(values: Sequence[Optional[float]], start: int, end: int,
                            anchor_index: int, average: Tuple[float, float]) -> int:
    """
    Pick the index in [start, end) forming the largest triangle.

    The triangle is spanned by the anchor (the previously selected point), the
    candidate, and the next bucket's average point. The first index reaching
    the maximum area wins.

    Args:
        values: Coerced series values (None counts as 0)
        start: First index of the bucket
        end: Index one past the last sample of the bucket
        anchor_index: Index of the previously selected point
        average: (x, y) average of the next bucket

    Returns:
        Index of the selected sample; the bucket midpoint if the bucket is empty
    """
    if start >= end:
        return bucket_midpoint(start, end, len(values))

    avg_x, avg_y = average
    point_a_x = anchor_index
    point_a_y = values[anchor_index] or 0.0

    max_area = -1.0
    max_area_point = start

    for j in range(start, end):
        point_val = values[j] or 0.0
        area = abs(
            (point_a_x - avg_x) * (point_val - point_a_y) -
            (point_a_x - j) * (avg_y - point_a_y)
        ) * 0.5

        if area > max_area:
            max_area = area
            max_area_point = j

    return max_area_point


def lttb_indices(values: Sequence[Optional[float]], threshold: int) -> List[int]:
    """
    Run LTTB over already coerced values.

    Returns:
        Selected indices in order, exactly threshold of them
    """
    length = len(values)
    selected = [0]
    anchor = 0

    for (start, end), (next_start, next_end) in iter_buckets(length, threshold):
        average = bucket_average(values, next_start, next_end)
        anchor = select_largest_triangle(values, start, end, anchor, average)
        selected.append(anchor)

    selected.append(length - 1)
    return selected


def lttb_downsample(series: Series, threshold: int, value_key: str = DEFAULT_VALUE_KEY) -> List[Sample]:
    """
    Downsample a series using the Largest Triangle Three Buckets algorithm.

    Args:
        series: Samples sorted by timestamp ascending
        threshold: Target number of samples in the output
        value_key: Name of the value field to downsample on

    Returns:
        New list of the selected samples (the same objects as in the input).
        The whole series is returned when threshold >= len(series) or
        threshold <= 2.

    Raises:
        InvalidThresholdError: if threshold is not a positive integer
    """
    threshold = validate_threshold(threshold)

    if threshold >= len(series) or threshold <= 2:
        return list(series)

    indices = lttb_indices(series_values(series, value_key), threshold)
    sampled = [series[i] for i in indices]

    logger.debug(f"LTTB reduced {len(series)} samples to {len(sampled)} on '{value_key}'")
    return sampled
