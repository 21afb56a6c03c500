from __future__ import annotations

from typing import Callable, Sequence, Union

import numpy as np
import pytest

from palette_swap.core_types import PixelBuffer, RGBTuple

DARK: RGBTuple = (10, 10, 10)
LIGHT: RGBTuple = (200, 200, 200)


def build_buffer(
    colours: Sequence[RGBTuple], width: int, alpha: Union[int, Sequence[int]] = 255
) -> PixelBuffer:
    n = len(colours)
    if n % width:
        raise ValueError("pixel count must fill whole rows")
    arr = np.zeros((n, 4), dtype=np.uint8)
    arr[:, :3] = np.array(colours, dtype=np.uint8)
    arr[:, 3] = np.asarray(alpha, dtype=np.uint8)
    return PixelBuffer(arr.reshape(n // width, width, 4))


@pytest.fixture
def make_buffer() -> Callable[..., PixelBuffer]:
    return build_buffer


@pytest.fixture
def half_and_half() -> PixelBuffer:
    """10x10 opaque buffer: first 50 pixels DARK, last 50 LIGHT (row-major)."""
    return build_buffer([DARK] * 50 + [LIGHT] * 50, width=10)
