# palette_swap/session.py
from __future__ import annotations

"""
Per-image session: the loaded buffer, its palette, and the operations that
move between them.

  load(buffer)          : extract the palette, classify coverage, install both
  select(index)         : toggle a palette entry in the two-slot selection
  swap()                : rewrite pixels and swap entries (percentages provisional)
  reclassify()          : recompute percentages from the current buffer
  swap_and_reclassify() : swap() followed by reclassify()

Calls on one session are serialised by a re-entrant lock, held across both
steps of swap_and_reclassify(). Separate images need separate
sessions.
"""

import threading
import time
from dataclasses import dataclass
from typing import Awaitable, Optional

import numpy as np

from .classify import classify_percentages
from .constants import (
    ALPHA_CUTOFF,
    CLASSIFY_SAMPLE_STRIDE,
    FALLBACK_SAMPLE_STRIDE,
    PALETTE_SIZE,
    QUANTIZE_MAX_DIMENSION,
    QUANTIZE_RESAMPLE,
    QUANTIZE_SAMPLE_STRIDE,
    SWAP_THRESHOLD,
)
from .core_types import PixelBuffer
from .errors import EmptyPixelSetError
from .image_io import downsample_for_quantize
from .palette_state import PaletteState, SelectionState
from .quantize import median_cut
from .sampler import sample_pixels
from .swap import SwapResult, apply_swap
from .utils import (
    debug_log,
    format_elapsed,
    key_value_pairs_to_string,
    print_config_line,
    resample_filter,
    warn,
)


@dataclass(frozen=True)
class SessionSettings:
    palette_size: int = PALETTE_SIZE
    alpha_cutoff: int = ALPHA_CUTOFF
    quantize_max_dimension: int = QUANTIZE_MAX_DIMENSION
    quantize_sample_stride: int = QUANTIZE_SAMPLE_STRIDE
    quantize_resample: str = QUANTIZE_RESAMPLE
    fallback_sample_stride: int = FALLBACK_SAMPLE_STRIDE
    classify_sample_stride: int = CLASSIFY_SAMPLE_STRIDE
    swap_threshold: float = SWAP_THRESHOLD
    workers: int = 1
    seed: Optional[int] = None
    debug: bool = False

    def __post_init__(self) -> None:
        if self.palette_size < 1:
            raise ValueError("palette_size must be >= 1")
        strides = (
            self.quantize_sample_stride,
            self.classify_sample_stride,
            self.fallback_sample_stride,
        )
        if min(strides) < 1:
            raise ValueError("sample strides must be >= 1")
        if self.swap_threshold < 0:
            raise ValueError("swap_threshold must be >= 0")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        resample_filter(self.quantize_resample)


class Session:
    """Owns one image buffer and its palette."""

    def __init__(
        self,
        settings: Optional[SessionSettings] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.settings = settings or SessionSettings()
        self.rng = rng if rng is not None else np.random.default_rng(self.settings.seed)
        self.buffer: Optional[PixelBuffer] = None
        self.palette: Optional[PaletteState] = None
        self.percentages_provisional = False
        self._lock = threading.RLock()

    # Loading

    def extract_palette(self, buffer: PixelBuffer) -> PaletteState:
        """Downsample, sample and median-cut `buffer` without touching session state."""
        s = self.settings
        small = downsample_for_quantize(
            buffer, s.quantize_max_dimension, s.quantize_resample
        )
        samples = sample_pixels(small, s.quantize_sample_stride, s.alpha_cutoff)
        if s.debug:
            print_config_line(
                "extract",
                [
                    ("Size", f"{buffer.width}x{buffer.height}"),
                    ("Quant size", f"{small.width}x{small.height}"),
                    ("Samples", int(samples.shape[0])),
                    ("Colours", s.palette_size),
                ],
                debug=True,
            )
        colours = median_cut(
            samples,
            s.palette_size,
            rng=self.rng,
            fallback_stride=s.fallback_sample_stride,
            debug=s.debug,
        )
        if not colours:
            raise EmptyPixelSetError("failed to extract palette")
        return PaletteState.from_colours(colours)

    def _classify_into(self, buffer: PixelBuffer, palette: PaletteState) -> bool:
        s = self.settings
        samples = sample_pixels(buffer, s.classify_sample_stride, s.alpha_cutoff)
        percentages = classify_percentages(samples, palette.colours)
        if percentages is None:
            return False
        palette.set_percentages(percentages.tolist())
        if s.debug:
            debug_log(
                key_value_pairs_to_string(
                    [
                        ("Classified", int(samples.shape[0])),
                        ("Sum", float(percentages.sum())),
                    ]
                )
            )
        return True

    def load(self, buffer: PixelBuffer) -> PaletteState:
        """
        Build a palette for `buffer` and make it the session image.

        Raises EmptyPixelSetError when no opaque pixels are found. The previous
        buffer and palette stay in place on failure.
        """
        with self._lock:
            t0 = time.perf_counter()
            palette = self.extract_palette(buffer)
            if not self._classify_into(buffer, palette):
                raise EmptyPixelSetError("failed to classify")
            self.buffer = buffer
            self.palette = palette
            self.percentages_provisional = False
            if self.settings.debug:
                debug_log(f"load took {format_elapsed(time.perf_counter() - t0)}")
            return palette

    async def load_from(self, pending: Awaitable[PixelBuffer]) -> PaletteState:
        """Await a decoded buffer, then load it."""
        buffer = await pending
        return self.load(buffer)

    # Selection / swap

    def select(self, index: int) -> SelectionState:
        with self._lock:
            if self.palette is None:
                warn("select ignored: no palette loaded")
                return "none"
            return self.palette.toggle_selection(index)

    def reclassify(self) -> bool:
        """Recompute percentages for the current palette. False when nothing could be classified."""
        with self._lock:
            if self.buffer is None or self.palette is None:
                warn("reclassify ignored: no image loaded")
                return False
            ok = self._classify_into(self.buffer, self.palette)
            if ok:
                self.percentages_provisional = False
            return ok

    def swap(self, threshold: Optional[float] = None) -> Optional[SwapResult]:
        """
        Rewrite the buffer for the two selected colours.

        The palette percentages are only provisional afterwards; follow with
        reclassify(), or use swap_and_reclassify().
        """
        with self._lock:
            if self.buffer is None or self.palette is None:
                warn("swap ignored: no image loaded")
                return None
            limit = self.settings.swap_threshold if threshold is None else threshold
            result = apply_swap(
                self.buffer,
                self.palette,
                limit,
                workers=self.settings.workers,
                debug=self.settings.debug,
            )
            if result is not None:
                self.percentages_provisional = True
            return result

    def swap_and_reclassify(self, threshold: Optional[float] = None) -> Optional[SwapResult]:
        """swap() and reclassify() under one hold of the lock."""
        with self._lock:
            result = self.swap(threshold)
            if result is not None:
                self.reclassify()
            return result


__all__ = ["SessionSettings", "Session"]
