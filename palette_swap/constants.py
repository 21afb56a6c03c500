# palette_swap/constants.py
"""
Tunables used across the project.

- Palette extraction (PALETTE_SIZE, QUANTIZE_*)
- Coverage estimation (CLASSIFY_*)
- Colour swap (SWAP_*)
"""
from __future__ import annotations

# ==================
# Palette extraction
# ==================
PALETTE_SIZE: int = 5
ALPHA_CUTOFF: int = 128  # alpha <= cutoff is skipped by the sampler
QUANTIZE_MAX_DIMENSION: int = 200
QUANTIZE_SAMPLE_STRIDE: int = 4
QUANTIZE_RESAMPLE: str = "bilinear"
FALLBACK_SAMPLE_STRIDE: int = 100

# ==================
# Coverage estimate
# ==================
CLASSIFY_SAMPLE_STRIDE: int = 10
CLASSIFY_CHUNK: int = 200_000

# ==================
# Swap
# ==================
SWAP_THRESHOLD: float = 30.0  # Euclidean distance in 0..255 RGB
SWAP_ROW_CHUNK: int = 256

__all__ = [
    "PALETTE_SIZE",
    "ALPHA_CUTOFF",
    "QUANTIZE_MAX_DIMENSION",
    "QUANTIZE_SAMPLE_STRIDE",
    "QUANTIZE_RESAMPLE",
    "FALLBACK_SAMPLE_STRIDE",
    "CLASSIFY_SAMPLE_STRIDE",
    "CLASSIFY_CHUNK",
    "SWAP_THRESHOLD",
    "SWAP_ROW_CHUNK",
]
