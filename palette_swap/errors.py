# palette_swap/errors.py
"""Exceptions raised by the session layer."""


class PaletteSwapError(Exception):
    pass


class EmptyPixelSetError(PaletteSwapError, ValueError):
    """Sampling produced no usable pixels (e.g. a fully transparent image)."""


__all__ = ["PaletteSwapError", "EmptyPixelSetError"]
