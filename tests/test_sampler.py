import numpy as np
import pytest

from palette_swap.sampler import sample_pixels


def test_stride_one_keeps_all_opaque_pixels(make_buffer):
    buf = make_buffer([(1, 1, 1), (2, 2, 2), (3, 3, 3), (4, 4, 4)], width=2)
    out = sample_pixels(buf, 1)
    assert out.dtype == np.uint8
    assert out.shape == (4, 3)
    assert out[:, 0].tolist() == [1, 2, 3, 4]


def test_stride_starts_at_first_pixel_in_scan_order(make_buffer):
    colours = [(i, 0, 0) for i in range(12)]
    buf = make_buffer(colours, width=4)
    out = sample_pixels(buf, 4)
    assert out[:, 0].tolist() == [0, 4, 8]


def test_alpha_cutoff_is_exclusive(make_buffer):
    colours = [(10, 0, 0), (20, 0, 0), (30, 0, 0), (40, 0, 0)]
    buf = make_buffer(colours, width=4, alpha=[0, 128, 129, 255])
    out = sample_pixels(buf, 1)
    assert out[:, 0].tolist() == [30, 40]
    assert sample_pixels(buf, 1, alpha_cutoff=0)[:, 0].tolist() == [20, 30, 40]


def test_stride_applies_before_alpha_filter(make_buffer):
    colours = [(i, 0, 0) for i in range(6)]
    buf = make_buffer(colours, width=6, alpha=[0, 255, 255, 255, 255, 255])
    # pixels 0, 2, 4 are visited; pixel 0 is transparent
    assert sample_pixels(buf, 2)[:, 0].tolist() == [2, 4]


def test_fully_transparent_returns_empty(make_buffer):
    buf = make_buffer([(5, 5, 5)] * 4, width=2, alpha=0)
    out = sample_pixels(buf, 1)
    assert out.shape == (0, 3)
    assert out.dtype == np.uint8


def test_invalid_stride(make_buffer):
    buf = make_buffer([(0, 0, 0)], width=1)
    with pytest.raises(ValueError):
        sample_pixels(buf, 0)
