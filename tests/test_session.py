import asyncio
import threading

import numpy as np
import pytest

from palette_swap.core_types import PixelBuffer
from palette_swap.errors import EmptyPixelSetError, PaletteSwapError
from palette_swap.session import Session, SessionSettings

DARK = (10, 10, 10)
LIGHT = (200, 200, 200)


def _rgb_rows(buf):
    return [tuple(int(v) for v in p[:3]) for p in buf.rgba.reshape(-1, 4)]


def test_half_and_half_palette_and_coverage(half_and_half):
    session = Session(SessionSettings(palette_size=2, quantize_sample_stride=1))
    palette = session.load(half_and_half)
    assert palette.colours == [DARK, LIGHT]
    assert palette.percentages == [50.0, 50.0]
    assert session.buffer is half_and_half
    assert not session.percentages_provisional


def test_half_and_half_swap_exchanges_pixels(half_and_half):
    session = Session(SessionSettings(palette_size=2, quantize_sample_stride=1))
    session.load(half_and_half)
    assert session.select(0) == "one"
    assert session.select(1) == "two"

    result = session.swap_and_reclassify(30)

    assert result is not None
    rows = _rgb_rows(half_and_half)
    assert rows[:50] == [LIGHT] * 50
    assert rows[50:] == [DARK] * 50
    assert session.palette.colours == [LIGHT, DARK]
    assert session.palette.percentages == [50.0, 50.0]
    assert session.palette.selection == ()
    assert session.palette.size == 2
    assert not session.percentages_provisional


def test_default_quantize_stride_blends_the_boundary_sample(half_and_half):
    # every 4th pixel gives 13 dark and 12 light samples; the lower-median
    # cut puts one dark sample in the light bucket
    session = Session(SessionSettings(palette_size=2))
    palette = session.load(half_and_half)
    assert palette.colours == [DARK, (185, 185, 185)]
    assert palette.percentages == [50.0, 50.0]


def test_swap_is_provisional_until_reclassified(make_buffer):
    mid = (100, 100, 100)
    buf = make_buffer([DARK] * 20 + [mid] * 10 + [LIGHT] * 10, width=10)
    session = Session(
        SessionSettings(palette_size=2, quantize_sample_stride=1, classify_sample_stride=1)
    )
    session.load(buf)
    grey = (150, 150, 150)
    assert session.palette.colours == [DARK, grey]
    assert session.palette.percentages == [50.0, 50.0]
    session.select(0)
    session.select(1)

    session.swap(30)
    assert session.percentages_provisional
    assert session.palette.colours == [grey, DARK]
    assert session.palette.percentages == [50.0, 50.0]

    assert session.reclassify()
    assert not session.percentages_provisional
    # DARK pixels became grey; mid and light were out of reach and are
    # all nearer to grey than to DARK
    assert session.palette.percentages == [100.0, 0.0]


def test_swap_without_two_selected_is_a_no_op(half_and_half):
    session = Session(SessionSettings(palette_size=2, quantize_sample_stride=1))
    session.load(half_and_half)
    before = half_and_half.rgba.copy()
    session.select(1)
    assert session.swap() is None
    assert np.array_equal(half_and_half.rgba, before)
    assert session.palette.selection == (1,)
    assert not session.percentages_provisional


def test_operations_without_image_are_logged_no_ops(capsys):
    session = Session()
    assert session.swap() is None
    assert session.reclassify() is False
    assert session.select(0) == "none"
    out = capsys.readouterr().out
    assert out.count("[warn]") == 3


def test_transparent_image_fails_to_extract(make_buffer):
    session = Session()
    buf = make_buffer([DARK] * 16, width=4, alpha=0)
    with pytest.raises(EmptyPixelSetError, match="extract"):
        session.load(buf)
    assert session.palette is None
    assert session.buffer is None


def test_failed_load_keeps_previous_image(half_and_half, make_buffer):
    session = Session(SessionSettings(palette_size=2, quantize_sample_stride=1))
    palette = session.load(half_and_half)
    with pytest.raises(PaletteSwapError):
        session.load(make_buffer([DARK] * 4, width=2, alpha=0))
    assert session.palette is palette
    assert session.buffer is half_and_half


def test_classification_failure_is_reported(make_buffer):
    # only the pixel at index 1 is opaque: the quantizer (stride 1) sees it,
    # the classifier (stride 10) does not
    alpha = [0] * 20
    alpha[1] = 255
    buf = make_buffer([DARK] * 20, width=10, alpha=alpha)
    session = Session(SessionSettings(palette_size=2, quantize_sample_stride=1))
    with pytest.raises(EmptyPixelSetError, match="classify"):
        session.load(buf)
    assert session.palette is None


def test_new_load_replaces_palette(half_and_half, make_buffer):
    session = Session(SessionSettings(palette_size=2, quantize_sample_stride=1))
    session.load(half_and_half)
    session.select(0)
    other = make_buffer([(255, 0, 0)] * 10 + [(0, 0, 255)] * 10, width=10)
    palette = session.load(other)
    assert palette.selection == ()
    # blue has R=0, so the stable R sort puts it in the lower half
    assert palette.colours == [(0, 0, 255), (255, 0, 0)]
    assert session.buffer is other


def test_seeded_sessions_agree_on_fallback():
    # 120 pixels fill at most 240 buckets, so k=300 needs the fallback
    rgba = np.random.default_rng(0).integers(0, 256, size=(10, 12, 4), dtype=np.uint8)
    rgba[..., 3] = 255
    settings = SessionSettings(palette_size=300, quantize_sample_stride=1, seed=123)
    first = Session(settings).load(PixelBuffer(rgba.copy())).colours
    second = Session(settings).load(PixelBuffer(rgba.copy())).colours
    assert first == second
    assert len(first) == 300


def test_load_from_awaits_buffer(half_and_half):
    session = Session(SessionSettings(palette_size=2, quantize_sample_stride=1))

    async def decode() -> PixelBuffer:
        await asyncio.sleep(0)
        return half_and_half

    palette = asyncio.run(session.load_from(decode()))
    assert palette.colours == [DARK, LIGHT]


def test_large_image_is_downsampled_for_extraction(capsys):
    rgba = np.zeros((100, 400, 4), dtype=np.uint8)
    rgba[:, :200, :3] = (255, 0, 0)
    rgba[:, 200:, :3] = (0, 0, 255)
    rgba[..., 3] = 255
    session = Session(
        SessionSettings(palette_size=2, quantize_resample="nearest", debug=True)
    )
    palette = session.load(PixelBuffer(rgba))
    assert palette.colours == [(0, 0, 255), (255, 0, 0)]
    assert palette.percentages == [50.0, 50.0]
    assert "Quant size: 200x50" in capsys.readouterr().out


@pytest.mark.parametrize(
    "kwargs",
    [
        {"palette_size": 0},
        {"quantize_sample_stride": 0},
        {"classify_sample_stride": 0},
        {"swap_threshold": -1.0},
        {"workers": 0},
        {"quantize_resample": "sharpest"},
    ],
)
def test_settings_validation(kwargs):
    with pytest.raises(ValueError):
        SessionSettings(**kwargs)


def _lock_free_elsewhere(session) -> bool:
    seen = []

    def attempt():
        got = session._lock.acquire(blocking=False)
        if got:
            session._lock.release()
        seen.append(got)

    t = threading.Thread(target=attempt)
    t.start()
    t.join()
    return seen[0]


def test_swap_and_reclassify_holds_lock_between_steps(half_and_half, monkeypatch):
    session = Session(SessionSettings(palette_size=2, quantize_sample_stride=1))
    session.load(half_and_half)
    session.select(0)
    session.select(1)
    original = session.reclassify
    observed = []

    def reclassify():
        observed.append(_lock_free_elsewhere(session))
        return original()

    monkeypatch.setattr(session, "reclassify", reclassify)
    assert session.swap_and_reclassify() is not None
    assert observed == [False]
    assert not session.percentages_provisional
    assert _lock_free_elsewhere(session)


def test_select_runs_under_session_lock(half_and_half, monkeypatch):
    session = Session(SessionSettings(palette_size=2, quantize_sample_stride=1))
    session.load(half_and_half)
    original = session.palette.toggle_selection
    observed = []

    def toggle(index):
        observed.append(_lock_free_elsewhere(session))
        return original(index)

    monkeypatch.setattr(session.palette, "toggle_selection", toggle)
    assert session.select(1) == "one"
    assert observed == [False]
