# palette_swap/utils.py
from __future__ import annotations

"""
Shared utilities for palette_swap.

Elapsed-time and value formatting, row spans for chunked swaps,
resample filter lookup, the coverage bar, and tidy logging.
"""

import sys
from typing import Any, Iterable, List, Tuple

from PIL import Image

_RESAMPLE_FILTERS = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


def format_elapsed(seconds: float) -> str:
    """'12.3ms' below a second, '4.2s' below a minute, else '3m 7s'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {int(round(seconds - 60 * minutes))}s"


def row_spans(height: int, rows_per_chunk: int) -> List[Tuple[int, int]]:
    """[start, end) row spans of at most rows_per_chunk rows covering [0, height)."""
    step = max(1, int(rows_per_chunk))
    return [(start, min(start + step, height)) for start in range(0, height, step)]


def resample_filter(name: str) -> Image.Resampling:
    """Pillow filter for 'nearest', 'bilinear', 'bicubic' or 'lanczos'."""
    try:
        return _RESAMPLE_FILTERS[name.lower()]
    except KeyError:
        raise ValueError(
            f"unknown resample filter {name!r}, expected one of {sorted(_RESAMPLE_FILTERS)}"
        ) from None


def coverage_bar(percentage: float, width: int) -> str:
    """Fixed-width '#'/'.' bar for a 0..100 share."""
    share = max(0.0, min(float(percentage), 100.0))
    filled = int(round(width * share / 100.0))
    return "#" * filled + "." * (width - filled)


def enable_line_buffered_stdout() -> None:
    """Line-buffer stdout where the stream supports .reconfigure()."""
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# Pretty logging


def format_value(value: Any) -> str:
    """on/off for bools, 1,234 for ints, trimmed floats, str() otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    if value is None:
        return "-"
    return str(value)


def format_percentage(x: float, decimals: int = 1) -> str:
    """Format a 0..100 share."""
    return f"{x:.{decimals}f}%"


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """Format (name, value) pairs as 'Name: value' blocks separated by sep."""
    return sep.join(f"{name}{eq}{format_value(value)}" for name, value in pairs)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single config line, e.g.:
      [extract] Colours: 5  Max dim: 200  Stride: 4
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    print(message, flush=True)


def debug_log(message: str) -> None:
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_elapsed",
    "row_spans",
    "resample_filter",
    "coverage_bar",
    "enable_line_buffered_stdout",
    "format_value",
    "format_percentage",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
