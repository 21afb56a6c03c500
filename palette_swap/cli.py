#!/usr/bin/env python3
"""
palette_swap.cli
Extract a dominant-colour palette from an image and optionally swap two of its colours.

Usage:
  palette-swap INPUT [OUTPUT] --colours K --swap A B --threshold T --debug
  palette-swap INPUT --swap-colours "#102030" "#f0e0d0"

Input:
  Any Pillow-readable image. Pixels with alpha <= --alpha-cutoff are ignored
  for palette and coverage; they are still recoloured by a swap.

Output:
  Prints the palette with coverage percentages. With a swap, writes a PNG
  (default <stem>_swapped.png next to INPUT) and prints the updated palette.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np

from palette_swap.classify import nearest_palette_indices
from palette_swap.constants import (
    ALPHA_CUTOFF,
    CLASSIFY_SAMPLE_STRIDE,
    PALETTE_SIZE,
    QUANTIZE_MAX_DIMENSION,
    QUANTIZE_SAMPLE_STRIDE,
    SWAP_THRESHOLD,
)
from palette_swap.core_types import RGBTuple, hex_to_rgb
from palette_swap.errors import PaletteSwapError
from palette_swap.image_io import is_image_file, load_image_rgba, save_image_rgba
from palette_swap.palette_state import PaletteState
from palette_swap.report import format_palette_report
from palette_swap.session import Session, SessionSettings
from palette_swap.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_elapsed,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src, dst: input image and optional output path
        colours: palette size K
        swap: optional pair of palette indices
        swap_colours: optional pair of hex colours, matched to nearest entries
        threshold, alpha_cutoff, max_dim, quant_stride, classify_stride, resample
        seed: optional fallback RNG seed
        workers: threads for the swap pass
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="palette-swap",
        description="Show an image's dominant colours and swap two of them.",
    )
    parser.add_argument("src", type=Path, help="Input image")
    parser.add_argument("dst", type=Path, nargs="?", default=None, help="Output PNG")
    parser.add_argument(
        "--colours", type=int, default=PALETTE_SIZE, help="Palette size K"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--swap",
        type=int,
        nargs=2,
        metavar=("A", "B"),
        default=None,
        help="Swap palette entries A and B (0-based).",
    )
    group.add_argument(
        "--swap-colours",
        nargs=2,
        metavar=("HEX_A", "HEX_B"),
        default=None,
        help="Swap the palette entries nearest to these colours.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=SWAP_THRESHOLD,
        help="Max RGB distance for a pixel to follow a swapped colour.",
    )
    parser.add_argument(
        "--alpha-cutoff",
        type=int,
        default=ALPHA_CUTOFF,
        help="Pixels with alpha <= cutoff are ignored when sampling.",
    )
    parser.add_argument(
        "--max-dim",
        type=int,
        default=QUANTIZE_MAX_DIMENSION,
        help="Longest side of the palette extraction copy.",
    )
    parser.add_argument(
        "--quant-stride",
        type=int,
        default=QUANTIZE_SAMPLE_STRIDE,
        help="Pixel stride for palette extraction.",
    )
    parser.add_argument(
        "--classify-stride",
        type=int,
        default=CLASSIFY_SAMPLE_STRIDE,
        help="Pixel stride for coverage estimation.",
    )
    parser.add_argument(
        "--resample",
        choices=["nearest", "bilinear", "bicubic", "lanczos"],
        default="bilinear",
        help="Filter for the extraction copy.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Fallback RNG seed")
    parser.add_argument("--workers", type=int, default=1, help="Swap threads")
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> SessionSettings:
    return SessionSettings(
        palette_size=args.colours,
        alpha_cutoff=args.alpha_cutoff,
        quantize_max_dimension=args.max_dim,
        quantize_sample_stride=args.quant_stride,
        quantize_resample=args.resample,
        classify_sample_stride=args.classify_stride,
        swap_threshold=args.threshold,
        workers=args.workers,
        seed=args.seed,
        debug=args.debug,
    )


def parse_swap_colours(args: argparse.Namespace) -> Optional[List[RGBTuple]]:
    """RGB values for --swap-colours. Raises ValueError on a malformed hex code."""
    if args.swap_colours is None:
        return None
    return [hex_to_rgb(h) for h in args.swap_colours]


def resolve_swap_indices(
    args: argparse.Namespace,
    palette: PaletteState,
    swap_colours: Optional[List[RGBTuple]] = None,
) -> Optional[Tuple[int, int]]:
    """Palette indices named by --swap, or nearest to the --swap-colours values."""
    if args.swap is not None:
        return int(args.swap[0]), int(args.swap[1])
    if swap_colours is not None:
        wanted = np.array(swap_colours, dtype=np.uint8)
        idx = nearest_palette_indices(wanted, palette.colours)
        return int(idx[0]), int(idx[1])
    return None


def _print_palette(title: str, palette: PaletteState) -> None:
    log(f"{title}:")
    for line in format_palette_report(palette):
        log(f"  {line}")


def run(args: argparse.Namespace) -> int:
    """Process one image end-to-end: load -> extract -> report -> optional swap -> save."""
    t_start = time.perf_counter()
    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2
    if not is_image_file(src):
        error(f"not an image: {src}")
        return 2

    try:
        settings = settings_from_args(args)
        swap_colours = parse_swap_colours(args)
    except ValueError as e:
        error(str(e))
        return 2

    print_banner(src.name)
    print_config_line(
        "run",
        [
            ("Colours", settings.palette_size),
            ("Threshold", settings.swap_threshold),
            ("Workers", settings.workers),
        ],
        debug=False,
    )

    session = Session(settings)
    buffer = load_image_rgba(src)
    try:
        palette = session.load(buffer)
    except PaletteSwapError as e:
        error(f"{src.name}: {e}")
        return 1
    _print_palette("Palette", palette)

    pair = resolve_swap_indices(args, palette, swap_colours)
    if pair is None:
        log(f"Total time {format_elapsed(time.perf_counter() - t_start)}")
        return 0

    a, b = pair
    if a == b:
        error(f"swap needs two different entries, got {a} and {b}")
        return 1
    try:
        session.select(a)
        session.select(b)
    except IndexError as e:
        error(str(e))
        return 1
    _print_palette("Selected", palette)

    result = session.swap_and_reclassify()
    if result is None:
        error("swap did not run")
        return 1
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [("A->B", result.moved_a_to_b), ("B->A", result.moved_b_to_a)]
            )
        )
    _print_palette("Swapped", palette)

    dst: Path = args.dst or src.with_name(f"{src.stem}_swapped.png")
    written = save_image_rgba(dst, buffer)
    log(f"Wrote {written.name} | size={buffer.width}x{buffer.height}")
    log(f"Total time {format_elapsed(time.perf_counter() - t_start)}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point."""
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
