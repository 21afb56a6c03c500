# palette_swap/report.py
from __future__ import annotations

"""Plain-text palette listing for terminal output."""

from typing import List

from .palette_state import PaletteState
from .utils import coverage_bar, format_percentage

BAR_WIDTH = 40


def format_palette_report(state: PaletteState, bar_width: int = BAR_WIDTH) -> List[str]:
    """
    One line per entry, e.g.:
      [0] #0a0a0a   50.0%  ####################  text=#ffffff  <- Colour 1
    """
    marks = {idx: f"  <- Colour {slot}" for slot, idx in enumerate(state.selection, start=1)}
    return [
        f"[{idx}] {hex_code}  {format_percentage(pct):>6}  {coverage_bar(pct, bar_width)}"
        f"  text={text_hex}{marks.get(idx, '')}"
        for idx, hex_code, pct, text_hex in state.rows()
    ]


__all__ = ["BAR_WIDTH", "format_palette_report"]
