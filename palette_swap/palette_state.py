# palette_swap/palette_state.py
from __future__ import annotations

"""
Palette entries plus the two-slot colour selection.

Selection states:
  "none" : nothing picked
  "one"  : one entry picked ("Colour 1")
  "two"  : two entries picked ("Colour 1", "Colour 2"); swap enabled

Picking a selected entry drops it. Picking a new entry while two are held is ignored.
"""

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Sequence, Tuple

from .core_types import HexStr, RGBTuple, coerce_to_rgb_tuple, is_light_colour, rgb_to_hex

SelectionState = Literal["none", "one", "two"]

MAX_SELECTION = 2


@dataclass
class PaletteEntry:
    colour: RGBTuple
    percentage: float = 0.0

    @property
    def hex(self) -> HexStr:
        return rgb_to_hex(self.colour)


@dataclass
class PaletteState:
    entries: List[PaletteEntry]
    _selection: List[int] = field(default_factory=list)

    @classmethod
    def from_colours(cls, colours: Sequence[RGBTuple]) -> "PaletteState":
        return cls([PaletteEntry(coerce_to_rgb_tuple(c)) for c in colours])

    # Read views

    @property
    def size(self) -> int:
        return len(self.entries)

    @property
    def colours(self) -> List[RGBTuple]:
        return [e.colour for e in self.entries]

    @property
    def percentages(self) -> List[float]:
        return [e.percentage for e in self.entries]

    @property
    def selection(self) -> Tuple[int, ...]:
        return tuple(self._selection)

    @property
    def selection_state(self) -> SelectionState:
        n = len(self._selection)
        if n == 0:
            return "none"
        if n == 1:
            return "one"
        return "two"

    @property
    def colour_one(self) -> Optional[RGBTuple]:
        """Colour of the first selected entry."""
        if not self._selection:
            return None
        return self.entries[self._selection[0]].colour

    @property
    def colour_two(self) -> Optional[RGBTuple]:
        """Colour of the second selected entry."""
        if len(self._selection) < 2:
            return None
        return self.entries[self._selection[1]].colour

    # Selection

    def toggle_selection(self, index: int) -> SelectionState:
        if not 0 <= index < len(self.entries):
            raise IndexError(f"palette index {index} out of range 0..{len(self.entries) - 1}")
        if index in self._selection:
            self._selection.remove(index)
        elif len(self._selection) < MAX_SELECTION:
            self._selection.append(index)
        return self.selection_state

    def clear_selection(self) -> None:
        self._selection.clear()

    def can_swap(self) -> bool:
        return len(self._selection) == 2 and self._selection[0] != self._selection[1]

    # Mutation

    def set_percentages(self, values: Sequence[float]) -> None:
        if len(values) != len(self.entries):
            raise ValueError(
                f"expected {len(self.entries)} percentages, got {len(values)}"
            )
        for entry, value in zip(self.entries, values):
            entry.percentage = float(value)

    def swap_entries(self, index_a: int, index_b: int) -> None:
        """Exchange colour and percentage between two positions."""
        a = self.entries[index_a]
        b = self.entries[index_b]
        a.colour, b.colour = b.colour, a.colour
        a.percentage, b.percentage = b.percentage, a.percentage

    # Reporting

    def rows(self) -> List[Tuple[int, HexStr, float, HexStr]]:
        """(index, hex, percentage, label text hex) per entry; labels contrast with the swatch."""
        out: List[Tuple[int, HexStr, float, HexStr]] = []
        for i, e in enumerate(self.entries):
            text = "#000000" if is_light_colour(e.colour) else "#ffffff"
            out.append((i, e.hex, e.percentage, text))
        return out


__all__ = [
    "SelectionState",
    "MAX_SELECTION",
    "PaletteEntry",
    "PaletteState",
]
