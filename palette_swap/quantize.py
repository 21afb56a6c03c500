# palette_swap/quantize.py
from __future__ import annotations

"""
Median-cut palette extraction.

Buckets live in a FIFO deque. Each step pops the oldest bucket, sorts it on
the channel with the widest range and splits it at the lower median. The
palette is the rounded mean of every surviving non-empty bucket, in queue
order. Short palettes are topped up with random picks from a coarse
resample of the input.
"""

from collections import deque
from typing import Deque, List, Optional, Set, Tuple

import numpy as np

from .constants import FALLBACK_SAMPLE_STRIDE
from .core_types import (
    RGBTuple,
    SampledPixels,
    assert_sampled_pixels,
    coerce_to_rgb_tuple,
)
from .utils import debug_log


def split_axis(bucket: SampledPixels) -> int:
    """
    Channel index to split on: 0=R, 1=G, 2=B.

    G must beat both R and B; B only has to beat R; R wins remaining ties.
    """
    lo = bucket.min(axis=0).astype(np.int32)
    hi = bucket.max(axis=0).astype(np.int32)
    r_range, g_range, b_range = (int(v) for v in (hi - lo))
    if g_range > r_range and g_range > b_range:
        return 1
    if b_range > r_range:
        return 2
    return 0


def split_bucket(bucket: SampledPixels) -> Tuple[SampledPixels, SampledPixels]:
    """Stable sort on the split axis, then cut at floor(n/2). Either half may be empty."""
    axis = split_axis(bucket)
    order = np.argsort(bucket[:, axis], kind="stable")
    ordered = bucket[order]
    median = bucket.shape[0] // 2
    return ordered[:median], ordered[median:]


def bucket_mean(bucket: SampledPixels) -> RGBTuple:
    """Per-channel mean rounded half up."""
    n = bucket.shape[0]
    if n == 0:
        raise ValueError("empty bucket has no mean")
    sums = bucket.sum(axis=0, dtype=np.int64)
    return coerce_to_rgb_tuple(np.floor(sums / n + 0.5).astype(np.int64))


def _fallback_fill(
    samples: SampledPixels,
    missing: int,
    rng: np.random.Generator,
    stride: int,
) -> List[RGBTuple]:
    pool = samples[:: max(1, int(stride))]
    if missing <= 0 or pool.shape[0] == 0:
        return []
    picks = rng.integers(0, pool.shape[0], size=missing)
    return [coerce_to_rgb_tuple(pool[int(i)]) for i in picks]


def median_cut(
    samples: SampledPixels,
    k: int,
    *,
    rng: Optional[np.random.Generator] = None,
    fallback_stride: int = FALLBACK_SAMPLE_STRIDE,
    debug: bool = False,
) -> List[RGBTuple]:
    """
    Reduce `samples` to at most `k` representative colours.

    Args:
      samples        : uint8 [N,3] opaque RGB rows in scan order
      k              : target palette size (>= 1)
      rng            : random source for the fallback fill; a fresh default_rng() if None
      fallback_stride: every n-th sample forms the fallback pool
      debug          : print bucket statistics

    Returns:
      List of RGB tuples in bucket-creation order. Empty when `samples` is empty.
    """
    if k < 1:
        raise ValueError("k must be >= 1")
    assert_sampled_pixels(samples)
    if samples.shape[0] == 0:
        return []

    queue: Deque[SampledPixels] = deque([samples])
    seen_patterns: Set[Tuple[int, ...]] = set()

    while 0 < len(queue) < k:
        if all(b.shape[0] <= 1 for b in queue):
            # Only singletons and empties left: the size pattern fully
            # determines the next step, so a repeat means it never reaches k.
            pattern = tuple(b.shape[0] for b in queue)
            if pattern in seen_patterns:
                break
            seen_patterns.add(pattern)

        bucket = queue.popleft()
        if bucket.shape[0] == 0:
            continue
        lower, upper = split_bucket(bucket)
        queue.append(lower)
        queue.append(upper)

    colours = [bucket_mean(b) for b in queue if b.shape[0] > 0]

    if len(colours) < k:
        missing = k - len(colours)
        if rng is None:
            rng = np.random.default_rng()
        if debug:
            debug_log(
                f"median cut: {len(colours)}/{k} buckets, filling {missing} from "
                f"every {fallback_stride}th sample"
            )
        colours.extend(_fallback_fill(samples, missing, rng, fallback_stride))
    elif debug:
        sizes = [int(b.shape[0]) for b in queue]
        debug_log(f"median cut: {k} buckets  sizes={sizes}")

    return colours[:k]


__all__ = ["split_axis", "split_bucket", "bucket_mean", "median_cut"]
