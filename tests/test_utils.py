import pytest
from PIL import Image

from palette_swap.utils import (
    coverage_bar,
    format_elapsed,
    key_value_pairs_to_string,
    resample_filter,
    row_spans,
)


def test_row_spans_cover_height():
    assert row_spans(10, 4) == [(0, 4), (4, 8), (8, 10)]
    assert row_spans(0, 4) == []
    assert row_spans(3, 0) == [(0, 1), (1, 2), (2, 3)]


def test_resample_filter_lookup():
    assert resample_filter("Nearest") == Image.Resampling.NEAREST
    with pytest.raises(ValueError):
        resample_filter("box-ish")


@pytest.mark.parametrize(
    "pct, expected",
    [(0.0, "...."), (50.0, "##.."), (100.0, "####"), (140.0, "####"), (-3.0, "....")],
)
def test_coverage_bar(pct, expected):
    assert coverage_bar(pct, 4) == expected


def test_formatting():
    assert format_elapsed(0.25) == "250.0ms"
    assert format_elapsed(4.21) == "4.2s"
    assert format_elapsed(187.0) == "3m 7s"
    assert (
        key_value_pairs_to_string([("Workers", 1200), ("Debug", True), ("T", 30.0)])
        == "Workers: 1,200  Debug: on  T: 30"
    )
