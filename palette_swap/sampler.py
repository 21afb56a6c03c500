# palette_swap/sampler.py
from __future__ import annotations

"""
Strided sampling of opaque pixels.

Exports:
  sample_pixels(buffer, stride, alpha_cutoff=128) -> uint8 [N,3]
"""

import numpy as np

from .constants import ALPHA_CUTOFF
from .core_types import PixelBuffer, SampledPixels


def sample_pixels(
    buffer: PixelBuffer, stride: int, alpha_cutoff: int = ALPHA_CUTOFF
) -> SampledPixels:
    """
    Take every `stride`-th pixel in row-major order, starting at the first,
    and keep the RGB of those whose alpha is strictly above `alpha_cutoff`.

    Returns an empty (0,3) array when no pixel passes.
    """
    if stride < 1:
        raise ValueError("stride must be >= 1")
    flat = buffer.rgba.reshape(-1, 4)[::stride]
    opaque = flat[:, 3].astype(np.int16) > int(alpha_cutoff)
    if not np.any(opaque):
        return np.zeros((0, 3), dtype=np.uint8)
    return np.ascontiguousarray(flat[opaque, :3])


__all__ = ["sample_pixels"]
