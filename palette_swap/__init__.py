# palette_swap/__init__.py
"""
palette_swap package.

Purpose:
  Dominant-colour palettes for RGBA pixel buffers, per-colour coverage, and
  threshold-based swapping of two palette colours. See palette_swap.cli for the CLI.

Public API:
  Session          : per-image aggregate (load, select, swap, reclassify).
  SessionSettings  : strides, cutoffs, palette size and swap threshold.
  PixelBuffer      : RGBA buffer wrapper (H,W,4 uint8).
  sample_pixels    : strided opaque-pixel sampling.
  median_cut       : palette extraction.
  classify_percentages : coverage per palette entry.
  swap_pixels      : in-place two-colour swap.
  PaletteState     : palette entries plus the two-slot selection.

Quick start:
  from palette_swap import Session, PixelBuffer
  session = Session()
  palette = session.load(PixelBuffer.from_bytes(w, h, raw))
  session.select(0); session.select(3)
  session.swap_and_reclassify()
"""

__version__ = "0.1.0"

from .classify import classify_percentages, coverage_counts, nearest_palette_indices
from .core_types import PixelBuffer, RGBTuple, hex_to_rgb, is_light_colour, rgb_to_hex
from .errors import EmptyPixelSetError, PaletteSwapError
from .palette_state import PaletteEntry, PaletteState, SelectionState
from .quantize import median_cut
from .sampler import sample_pixels
from .session import Session, SessionSettings
from .swap import SwapResult, apply_swap, swap_pixels

__all__ = [
    "__version__",
    "PixelBuffer",
    "RGBTuple",
    "rgb_to_hex",
    "hex_to_rgb",
    "is_light_colour",
    "sample_pixels",
    "median_cut",
    "nearest_palette_indices",
    "coverage_counts",
    "classify_percentages",
    "PaletteEntry",
    "PaletteState",
    "SelectionState",
    "SwapResult",
    "swap_pixels",
    "apply_swap",
    "Session",
    "SessionSettings",
    "PaletteSwapError",
    "EmptyPixelSetError",
]
