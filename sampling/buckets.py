"""
Bucket arithmetic for LTTB downsampling.

The first and last samples are always kept, so a series of length N is split
into threshold - 2 interior buckets covering indices [1, N - 1). Bucket
boundaries come from floor() of a fractional bucket size and may differ in
length by one element.
"""

import math
from typing import Iterator, Tuple


def bucket_size(length: int, threshold: int) -> float:
    """Fractional number of samples per interior bucket."""
    return (length - 2) / (threshold - 2)


def bucket_bounds(length: int, threshold: int, index: int) -> Tuple[int, int]:
    """
    Get the half-open index range of an interior bucket.

    Args:
        length: Number of samples in the series
        threshold: Target number of output samples
        index: Bucket index, 0 <= index < threshold - 2 (larger values give the
            look-ahead range past the last bucket, which is empty)

    Returns:
        (start, end) with end clamped to length - 1
    """
    size = bucket_size(length, threshold)
    start = math.floor((index + 1) * size) + 1
    end = min(math.floor((index + 2) * size) + 1, length - 1)
    return start, end


def bucket_midpoint(start: int, end: int, length: int) -> int:
    """Fallback index for an empty bucket, never past the last sample."""
    return min((start + end) // 2, length - 1)


def iter_buckets(length: int, threshold: int) -> Iterator[Tuple[Tuple[int, int], Tuple[int, int]]]:
    """
    Yield (current_bucket, next_bucket) bounds for every interior bucket.

    Yields nothing when the series is too short to need buckets.
    """
    if length <= 2 or threshold <= 2:
        return
    for index in range(threshold - 2):
        yield bucket_bounds(length, threshold, index), bucket_bounds(length, threshold, index + 1)
