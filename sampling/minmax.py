"""Min/max-per-bucket sampling, a cheaper alternative to LTTB."""

import logging
import math
from typing import List

from .samples import DEFAULT_VALUE_KEY, Sample, Series, series_values, validate_threshold

logger = logging.getLogger(__name__)


def min_max_sample(series: Series, buckets: int, value_key: str = DEFAULT_VALUE_KEY) -> List[Sample]:
    """
    Keep the minimum and maximum sample of each fixed-size bucket.

    Useful to answer "does the value spike anywhere in this window" when
    LTTB's shape fidelity is not needed.

    Args:
        series: Samples sorted by timestamp ascending
        buckets: Number of buckets
        value_key: Name of the value field to compare

    Returns:
        New list with at most 2 * buckets samples, in chronological order.
        Null/NaN values never win a comparison; a bucket without any valid
        value contributes its first sample so the gap stays visible.

    Raises:
        InvalidThresholdError: if buckets is not a positive integer
    """
    buckets = validate_threshold(buckets, 'buckets')

    length = len(series)
    if length <= buckets * 2:
        return list(series)

    values = series_values(series, value_key)
    chunk = math.ceil(length / buckets)
    result = []

    for start in range(0, length, chunk):
        min_index = None
        max_index = None
        for j in range(start, min(start + chunk, length)):
            value = values[j]
            if value is None:
                continue
            if min_index is None or value < values[min_index]:
                min_index = j
            if max_index is None or value > values[max_index]:
                max_index = j

        if min_index is None:
            result.append(series[start])
        elif min_index == max_index:
            result.append(series[min_index])
        else:
            for j in sorted((min_index, max_index)):
                result.append(series[j])

    logger.debug(f"Min/max reduced {length} samples to {len(result)} on '{value_key}'")
    return result
