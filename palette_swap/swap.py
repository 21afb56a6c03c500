# palette_swap/swap.py
from __future__ import annotations

"""
Threshold colour swap.

Pixels within `threshold` (Euclidean RGB) of colour A become colour B; of the
rest, those within `threshold` of colour B become colour A. A is tested first,
so a pixel near both goes to B. Alpha is never touched.

The buffer is rewritten in place, one row chunk at a time.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .constants import SWAP_ROW_CHUNK, SWAP_THRESHOLD
from .core_types import PixelBuffer, RGBTuple, U8Image, assert_u8_image_rgba
from .palette_state import PaletteState
from .utils import debug_log, key_value_pairs_to_string, row_spans


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a swap. Percentages on the palette are provisional until reclassified."""

    index_a: int
    index_b: int
    colour_a: RGBTuple
    colour_b: RGBTuple
    moved_a_to_b: int
    moved_b_to_a: int


def _swap_rows(
    rgba: U8Image,
    start: int,
    end: int,
    colour_a: np.ndarray,
    colour_b: np.ndarray,
    limit2: float,
) -> Tuple[int, int]:
    rows = rgba[start:end]
    rgb = rows[..., :3].astype(np.int32)

    diff_a = rgb - colour_a
    near_a = np.sum(diff_a * diff_a, axis=-1) <= limit2
    diff_b = rgb - colour_b
    near_b = (np.sum(diff_b * diff_b, axis=-1) <= limit2) & ~near_a

    rows[near_a, :3] = colour_b.astype(np.uint8)
    rows[near_b, :3] = colour_a.astype(np.uint8)
    return int(np.count_nonzero(near_a)), int(np.count_nonzero(near_b))


def swap_pixels(
    rgba: U8Image,
    colour_a: RGBTuple,
    colour_b: RGBTuple,
    threshold: float = SWAP_THRESHOLD,
    *,
    workers: int = 1,
    row_chunk: int = SWAP_ROW_CHUNK,
) -> Tuple[int, int]:
    """
    Exchange pixels near colour_a and colour_b, in place.

    Args:
      rgba     : uint8 [H,W,4], modified in place
      colour_a : first selected colour
      colour_b : second selected colour
      threshold: max Euclidean distance for a pixel to count as "that colour"
      workers  : threads over row chunks; chunks own disjoint rows
      row_chunk: rows per chunk

    Returns:
      (pixels rewritten A->B, pixels rewritten B->A)
    """
    assert_u8_image_rgba(rgba)
    if threshold < 0:
        raise ValueError("threshold must be >= 0")
    a = np.array(colour_a, dtype=np.int32)
    b = np.array(colour_b, dtype=np.int32)
    limit2 = float(threshold) * float(threshold)
    spans = row_spans(int(rgba.shape[0]), row_chunk)

    results: List[Tuple[int, int]]
    if workers > 1 and len(spans) > 1:
        with ThreadPoolExecutor(max_workers=workers) as ex:
            futs = [ex.submit(_swap_rows, rgba, s, e, a, b, limit2) for s, e in spans]
            results = [fu.result() for fu in futs]
    else:
        results = [_swap_rows(rgba, s, e, a, b, limit2) for s, e in spans]

    return sum(r[0] for r in results), sum(r[1] for r in results)


def apply_swap(
    buffer: PixelBuffer,
    state: PaletteState,
    threshold: float = SWAP_THRESHOLD,
    *,
    workers: int = 1,
    debug: bool = False,
) -> Optional[SwapResult]:
    """
    Swap the two selected palette colours in the buffer and on the palette.

    Returns None and changes nothing unless exactly two distinct entries are
    selected. On success the two entries trade colour and percentage, the
    selection is cleared, and the percentages must be recomputed by the caller.
    """
    if not state.can_swap():
        if debug:
            debug_log(f"swap skipped: selection={list(state.selection)}")
        return None

    index_a, index_b = state.selection
    colour_a = state.entries[index_a].colour
    colour_b = state.entries[index_b].colour

    moved_ab, moved_ba = swap_pixels(
        buffer.rgba, colour_a, colour_b, threshold, workers=workers
    )
    state.swap_entries(index_a, index_b)
    state.clear_selection()

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Swap", f"{index_a}<->{index_b}"),
                    ("Threshold", float(threshold)),
                    ("A->B", moved_ab),
                    ("B->A", moved_ba),
                ]
            )
        )

    return SwapResult(index_a, index_b, colour_a, colour_b, moved_ab, moved_ba)


__all__ = ["SwapResult", "swap_pixels", "apply_swap"]
