# palette_swap/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 4) interleaved RGBA
SampledPixels = NDArray[np.uint8]  # (N, 3) RGB rows in scan order
PaletteArray = NDArray[np.uint8]  # (K, 3)


# Value objects


@dataclass
class PixelBuffer:
    """
    Row-major RGBA pixel buffer, 4 bytes per pixel.

    The caller owns the buffer. Swaps rewrite `rgba` in place.
    """

    rgba: U8Image  # shape (H, W, 4)

    def __post_init__(self) -> None:
        assert_u8_image_rgba(self.rgba)

    @property
    def width(self) -> int:
        return int(self.rgba.shape[1])

    @property
    def height(self) -> int:
        return int(self.rgba.shape[0])

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @classmethod
    def from_bytes(
        cls, width: int, height: int, raw: Union[bytes, bytearray, memoryview]
    ) -> "PixelBuffer":
        """Wrap interleaved RGBA bytes; len(raw) must equal width*height*4."""
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be positive")
        expected = width * height * 4
        if len(raw) != expected:
            raise ValueError(
                f"buffer length {len(raw)} does not match {width}x{height}x4={expected}"
            )
        arr = np.frombuffer(bytes(raw), dtype=np.uint8).reshape(height, width, 4)
        return cls(arr.copy())

    def to_bytes(self) -> bytes:
        return np.ascontiguousarray(self.rgba).tobytes()

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.rgba.copy())


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        raise ValueError("hex must start with '#'")
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) != 7:
        raise ValueError("hex must be '#rrggbb' or '#rgb'")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def is_light_colour(rgb: RGBTuple) -> bool:
    """True when perceived brightness (0.299R + 0.587G + 0.114B) exceeds 128."""
    brightness = (rgb[0] * 299 + rgb[1] * 587 + rgb[2] * 114) / 1000.0
    return brightness > 128.0


def coerce_to_rgb_tuple(value: Union[Sequence[int], NDArray[np.generic]]) -> RGBTuple:
    """
    Coerce a 3-length sequence or array to an (int, int, int) RGB tuple.
    Helpful when extracting values from NumPy rows.
    """
    if isinstance(value, np.ndarray):
        if value.size < 3:
            raise ValueError("array too small for RGB")
        flat = value.reshape(-1)
        return (int(flat[0]), int(flat[1]), int(flat[2]))
    if len(value) < 3:  # type: ignore[arg-type]
        raise ValueError("sequence too small for RGB")
    v = value  # type: ignore[assignment]
    return (int(v[0]), int(v[1]), int(v[2]))


def palette_to_array(colours: Sequence[RGBTuple]) -> PaletteArray:
    """Stack RGB tuples into a (K,3) uint8 array."""
    if len(colours) == 0:
        return np.zeros((0, 3), dtype=np.uint8)
    return np.array([coerce_to_rgb_tuple(c) for c in colours], dtype=np.uint8)


def assert_u8_image_rgba(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,4) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 4:
        raise TypeError("expected uint8 (H,W,4) image")
    return image  # type: ignore[return-value]


def assert_sampled_pixels(samples: np.ndarray) -> SampledPixels:
    """Validate a uint8 (N,3) sample array."""
    if samples.dtype != np.uint8 or samples.ndim != 2 or samples.shape[-1] != 3:
        raise TypeError("expected uint8 (N,3) samples")
    return samples  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "U8Image",
    "SampledPixels",
    "PaletteArray",
    # value objects
    "PixelBuffer",
    # helpers
    "rgb_to_hex",
    "hex_to_rgb",
    "is_light_colour",
    "coerce_to_rgb_tuple",
    "palette_to_array",
    "assert_u8_image_rgba",
    "assert_sampled_pixels",
]
