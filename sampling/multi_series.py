"""
LTTB downsampling for several related series drawn on one chart.

The longest series is reduced with plain LTTB and its selected timestamps form
a shared grid. Each other series keeps the grid timestamps it actually has,
plus its own LTTB picks at half the threshold, so lines stay comparable
without any series surfacing a point it never recorded.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, List, Optional, Set

from .lttb import lttb_downsample
from .samples import (
    DEFAULT_VALUE_KEY,
    TIMESTAMP_KEY,
    LabeledSeries,
    Sample,
    Series,
    validate_threshold,
)

logger = logging.getLogger(__name__)


def _labeled(label: Any, series: Iterable[Sample]) -> LabeledSeries:
    return {'label': label, 'series': list(series)}


def align_to_reference(series: Series, reference_timestamps: Set[Any], threshold: int,
                       value_key: str = DEFAULT_VALUE_KEY) -> List[Sample]:
    """
    Reduce a secondary series against the reference timestamp grid.

    Args:
        series: Samples sorted by timestamp ascending
        reference_timestamps: Timestamps selected from the reference series
        threshold: Threshold used for the reference series
        value_key: Name of the value field to downsample on

    Returns:
        The samples whose timestamp is on the grid or among the series' own
        LTTB picks at ceil(threshold / 2), one per timestamp, in input order
    """
    if len(series) <= threshold:
        return list(series)

    own_sampled = lttb_downsample(series, math.ceil(threshold / 2), value_key)
    keep = set(reference_timestamps)
    keep.update(sample[TIMESTAMP_KEY] for sample in own_sampled)

    aligned = []
    seen = set()
    for sample in series:
        timestamp = sample[TIMESTAMP_KEY]
        if timestamp in keep and timestamp not in seen:
            seen.add(timestamp)
            aligned.append(sample)
    return aligned


def lttb_multi_series_downsample(labeled_series: Iterable[LabeledSeries], threshold: int,
                                 value_key: str = DEFAULT_VALUE_KEY,
                                 max_workers: Optional[int] = None) -> List[LabeledSeries]:
    """
    Downsample several labeled series so they stay comparable on one chart.

    Args:
        labeled_series: Iterable of {'label': str, 'series': [samples]}
        threshold: Target number of samples for the longest series
        value_key: Name of the value field to downsample on
        max_workers: Reduce secondary series on a thread pool of this size
            when greater than 1

    Returns:
        New list of {'label', 'series'} in input order. The longest series is
        its own LTTB reduction; series no longer than threshold are unchanged.

    Raises:
        InvalidThresholdError: if threshold is not a positive integer
    """
    threshold = validate_threshold(threshold)
    datasets = list(labeled_series)
    if not datasets:
        return []

    # First of the longest series wins ties
    reference_pos = 0
    for pos, dataset in enumerate(datasets):
        if len(dataset['series']) > len(datasets[reference_pos]['series']):
            reference_pos = pos
    reference = datasets[reference_pos]['series']

    if len(reference) <= threshold:
        return [_labeled(d['label'], d['series']) for d in datasets]

    sampled_reference = lttb_downsample(reference, threshold, value_key)
    reference_timestamps = {sample[TIMESTAMP_KEY] for sample in sampled_reference}

    others = [pos for pos in range(len(datasets)) if pos != reference_pos]

    def align(pos):
        return align_to_reference(datasets[pos]['series'], reference_timestamps, threshold, value_key)

    if max_workers and max_workers > 1 and len(others) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            aligned = dict(zip(others, executor.map(align, others)))
    else:
        aligned = {pos: align(pos) for pos in others}
    aligned[reference_pos] = sampled_reference

    logger.debug(
        f"Aligned {len(datasets)} series on '{value_key}' against reference "
        f"'{datasets[reference_pos]['label']}' ({len(reference)} -> {len(sampled_reference)})"
    )
    return [_labeled(dataset['label'], aligned[pos]) for pos, dataset in enumerate(datasets)]
