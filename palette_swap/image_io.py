# palette_swap/image_io.py
from __future__ import annotations

"""
Image I/O helpers (RGBA in sRGB) and the quantizer downsample.

Alpha is kept as loaded. The sampler applies the alpha cutoff.
"""

import io
from pathlib import Path

import numpy as np
from PIL import Image, ImageCms, ImageOps, UnidentifiedImageError

from .constants import QUANTIZE_MAX_DIMENSION, QUANTIZE_RESAMPLE
from .core_types import PixelBuffer
from .utils import debug_log, resample_filter

_SRGB = ImageCms.createProfile("sRGB")


def _to_srgb(rgb: Image.Image, icc_bytes: bytes) -> Image.Image:
    """Colour-manage an RGB image from its embedded profile into sRGB."""
    src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
    out = ImageCms.profileToProfile(
        rgb,
        src_prof,
        _SRGB,
        renderingIntent=ImageCms.Intent.PERCEPTUAL,
        outputMode="RGB",
    )
    return out if out is not None else rgb


def _decode_rgba(im: Image.Image) -> Image.Image:
    """Upright RGBA in sRGB. Alpha passes through the profile conversion unchanged."""
    icc_bytes = im.info.get("icc_profile")
    rgba = ImageOps.exif_transpose(im).convert("RGBA")
    if not icc_bytes:
        return rgba
    try:
        rgb = _to_srgb(rgba.convert("RGB"), icc_bytes)
    except (ImageCms.PyCMSError, OSError, ValueError) as e:
        debug_log(f"ICC profile ignored: {e}")
        return rgba
    rgb.putalpha(rgba.getchannel("A"))
    return rgb


def load_image_rgba(path: Path) -> PixelBuffer:
    """Decode any Pillow-readable image into an RGBA PixelBuffer."""
    with Image.open(path) as im:
        rgba = _decode_rgba(im)
    return PixelBuffer(np.array(rgba, dtype=np.uint8))


def save_image_rgba(path: Path, buffer: PixelBuffer) -> Path:
    """Write the buffer as PNG. Non-png suffixes are replaced."""
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    Image.fromarray(np.ascontiguousarray(buffer.rgba)).save(path)
    return path


def quantize_dimensions(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """
    Target size with the longest side capped at max_dimension.

    Aspect ratio is kept; sizes are truncated and never drop below 1.
    Images already within the cap keep their size.
    """
    if max_dimension <= 0:
        raise ValueError("max_dimension must be positive")
    if width > height:
        if width > max_dimension:
            height = int(height / width * max_dimension)
            width = max_dimension
    elif height > max_dimension:
        width = int(width / height * max_dimension)
        height = max_dimension
    return max(1, int(width)), max(1, int(height))


def downsample_for_quantize(
    buffer: PixelBuffer,
    max_dimension: int = QUANTIZE_MAX_DIMENSION,
    resample: str = QUANTIZE_RESAMPLE,
) -> PixelBuffer:
    """Single-step resize of a copy for palette extraction. The source is untouched."""
    dst_w, dst_h = quantize_dimensions(buffer.width, buffer.height, max_dimension)
    if (dst_w, dst_h) == (buffer.width, buffer.height):
        return buffer
    im = Image.fromarray(np.ascontiguousarray(buffer.rgba))
    im2 = im.resize((dst_w, dst_h), resample=resample_filter(resample))
    return PixelBuffer(np.array(im2, dtype=np.uint8))


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "load_image_rgba",
    "save_image_rgba",
    "quantize_dimensions",
    "downsample_for_quantize",
    "is_image_file",
]
