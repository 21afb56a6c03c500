# palette_swap/classify.py
from __future__ import annotations

"""
Coverage estimation.

Functions:
  nearest_palette_indices(samples, palette) -> int array [N]
  coverage_counts(samples, palette) -> int64 array [K]
  classify_percentages(samples, palette) -> float64 array [K] or None

Each sample goes to the palette entry at the smallest squared RGB distance;
ties resolve to the lowest index.
"""

from typing import Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .constants import CLASSIFY_CHUNK
from .core_types import PaletteArray, RGBTuple, SampledPixels, palette_to_array

PaletteLike = Union[Sequence[RGBTuple], PaletteArray]


def _as_palette_array(palette: PaletteLike) -> PaletteArray:
    if isinstance(palette, np.ndarray):
        return palette.reshape(-1, 3).astype(np.uint8, copy=False)
    return palette_to_array(palette)


def nearest_palette_indices(
    samples: SampledPixels, palette: PaletteLike, chunk: int = CLASSIFY_CHUNK
) -> NDArray[np.intp]:
    """Index of the nearest palette row for every sample, chunked to bound memory."""
    pal = _as_palette_array(palette).astype(np.int32)
    if pal.shape[0] == 0:
        raise ValueError("palette is empty")
    n = samples.shape[0]
    out = np.empty((n,), dtype=np.intp)
    step = max(1, int(chunk))

    for i in range(0, n, step):
        pts = samples[i : i + step].astype(np.int32)
        diff = pts[:, None, :] - pal[None, :, :]
        d2 = np.sum(diff * diff, axis=2)
        out[i : i + step] = np.argmin(d2, axis=1)

    return out


def coverage_counts(samples: SampledPixels, palette: PaletteLike) -> NDArray[np.int64]:
    """Number of samples nearest to each palette entry."""
    pal = _as_palette_array(palette)
    idx = nearest_palette_indices(samples, pal)
    return np.bincount(idx, minlength=pal.shape[0]).astype(np.int64, copy=False)


def classify_percentages(
    samples: SampledPixels, palette: PaletteLike
) -> Optional[NDArray[np.float64]]:
    """
    Share of samples nearest to each palette entry, as 0..100 values aligned
    with the palette.

    Returns None when there are no samples or no palette entries.
    """
    pal = _as_palette_array(palette)
    total = int(samples.shape[0])
    if total == 0 or pal.shape[0] == 0:
        return None
    counts = coverage_counts(samples, pal)
    return counts.astype(np.float64) * 100.0 / float(total)


__all__ = ["nearest_palette_indices", "coverage_counts", "classify_percentages"]
