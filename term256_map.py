#!/usr/bin/env python3
"""
term256_map.py
Match true-colour RGB values to the xterm 256-colour palette.

Usage:
  python term256_map.py match R G B | '#rrggbb' [--strategy S] [--plain]
  python term256_map.py grid [--strategy S] [--truecolour]
  python term256_map.py image SRC [--out PATH] [--strategy S] [--workers N]

Strategies:
  analytic   : O(1) cube estimate with a grey-axis override.
  euclidean  : exhaustive search by squared RGB distance.
  perceptual : exhaustive search by CIEDE2000 (slow, most faithful).

Common flags:
  --exact-grey : analytic grey override averages all three cube components.
  --debug      : verbose details.

Exit status 2 on invalid input.
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from term256.core_types import (
    InvalidInputError,
    RGBTuple,
    hex_to_rgb,
    rgb_to_hex,
    validate_rgb,
)
from term256.image_io import load_image_rgba, save_image_rgba
from term256.matchers import STRATEGIES, matcher_for
from term256.palette_data import palette_entry_rgb
from term256.remap import remap_image
from term256.utils import (
    debug_log,
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    sgr_indexed_background,
    sgr_truecolour_background,
)

# CLI args & small helpers


def _default_workers() -> int:
    """Leave a core free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 2
    return max(1, n - 1)


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        command: "match" | "grid" | "image"
        strategy: one of STRATEGIES or None (all, for "match")
        exact_grey: bool, sum all cube terms in the analytic grey override
        debug: bool for verbose details
      plus per-command fields (colour / truecolour / src, out, workers).
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--exact-grey",
        action="store_true",
        help="Analytic grey override averages all three cube components.",
    )
    common.add_argument("--debug", action="store_true", help="Verbose details")

    parser = argparse.ArgumentParser(
        prog="term256_map",
        description="Map 24-bit colours onto the xterm 256-colour palette.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_match = sub.add_parser("match", parents=[common], help="Match one colour")
    p_match.add_argument(
        "colour", nargs="+", help="R G B (0..255 each) or a '#rrggbb' hex colour"
    )
    p_match.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=None,
        help="Strategy to use. Omit to compare all of them.",
    )
    p_match.add_argument(
        "--plain", action="store_true", help="No colour swatches in the output"
    )

    p_grid = sub.add_parser(
        "grid", parents=[common], help="Sweep the RGB cube and grey axis"
    )
    p_grid.add_argument(
        "--strategy", choices=STRATEGIES, default="analytic", help="Strategy to use."
    )
    p_grid.add_argument(
        "--truecolour",
        action="store_true",
        help="Show the source colours instead of their palette matches.",
    )

    p_image = sub.add_parser(
        "image", parents=[common], help="Remap an image to the palette"
    )
    p_image.add_argument("src", type=Path, help="Input image")
    p_image.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output PNG. Default: <stem>_256.png next to SRC.",
    )
    p_image.add_argument(
        "--strategy", choices=STRATEGIES, default="perceptual", help="Strategy to use."
    )
    p_image.add_argument(
        "--workers", type=int, default=_default_workers(), help="Matcher threads"
    )

    return parser.parse_args(argv)


def parse_colour(tokens: Sequence[str]) -> RGBTuple:
    """'#rrggbb' / 'rgb' as one token, or three decimal channel tokens."""
    if len(tokens) == 1:
        return hex_to_rgb(tokens[0])
    if len(tokens) != 3:
        raise InvalidInputError("expected R G B or a single hex colour")
    try:
        r, g, b = (int(t, 10) for t in tokens)
    except ValueError as exc:
        raise InvalidInputError(f"channels must be integers: {' '.join(tokens)}") from exc
    return validate_rgb(r, g, b)


# Commands


def run_match(args: argparse.Namespace) -> None:
    """Print the palette index picked by each requested strategy."""
    rgb = parse_colour(args.colour)
    strategies: List[str] = [args.strategy] if args.strategy else list(STRATEGIES)
    source = f"{rgb_to_hex(rgb)} ({rgb[0]},{rgb[1]},{rgb[2]})"
    if not args.plain:
        source += " " + sgr_truecolour_background(rgb, "   ")
    log(source)

    for name in strategies:
        t0 = time.perf_counter()
        index = matcher_for(name, sum_grey_terms=args.exact_grey)(*rgb)  # type: ignore[arg-type]
        elapsed = time.perf_counter() - t0
        entry = palette_entry_rgb(index)
        line = f"  {name:<10} {index:>3}  {rgb_to_hex(entry)}"
        if not args.plain:
            line += " " + sgr_indexed_background(index, "   ")
        log(line)
        if args.debug:
            debug_log(f"{name}: {format_seconds_compact(elapsed)}")


def run_grid(args: argparse.Namespace) -> None:
    """
    Swatch sweep: the RGB cube in steps of 16 (128 swatches per line), then
    the grey axis in steps of 2.
    """
    match = matcher_for(args.strategy, sum_grey_terms=args.exact_grey)

    def swatch(r: int, g: int, b: int) -> str:
        if args.truecolour:
            return sgr_truecolour_background((r, g, b))
        return sgr_indexed_background(match(r, g, b))

    print_config_line(
        "grid",
        [("Strategy", args.strategy), ("Truecolour", args.truecolour)],
        debug=args.debug,
    )
    cells: List[str] = []
    steps = range(0, 256, 16)
    for r in steps:
        for g in steps:
            for b in steps:
                cells.append(swatch(r, g, b))
                if len(cells) == 128:
                    log("".join(cells))
                    cells = []
    log("".join(swatch(v, v, v) for v in range(0, 256, 2)))


def run_image(args: argparse.Namespace) -> None:
    """Load -> remap -> save PNG, with a short report."""
    src: Path = args.src
    if not src.is_file():
        raise InvalidInputError(f"not found: {src}")
    out_path: Path = args.out or src.with_name(f"{src.stem}_256.png")

    print_banner(src.name)
    print_config_line(
        "image",
        [
            ("Strategy", args.strategy),
            ("Workers", args.workers),
            ("Exact grey", args.exact_grey),
        ],
        debug=False,
    )
    t0 = time.perf_counter()
    rgb, alpha = load_image_rgba(src)
    rgb_out, index_map = remap_image(
        rgb,
        alpha,
        args.strategy,
        workers=args.workers,
        sum_grey_terms=args.exact_grey,
        debug=args.debug,
    )
    written = save_image_rgba(out_path, rgb_out, alpha)
    log(
        key_value_pairs_to_string(
            [
                ("Size", f"{rgb.shape[1]}x{rgb.shape[0]}"),
                ("Palette entries", int(np.unique(index_map[alpha > 0]).size)),
                ("Saved", str(written)),
                ("Time", format_seconds_compact(time.perf_counter() - t0)),
            ]
        )
    )


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point. Invalid input prints an [error] line and exits with 2."""
    args = parse_cli_args(argv)
    commands = {"match": run_match, "grid": run_grid, "image": run_image}
    try:
        commands[args.command](args)
    except InvalidInputError as exc:
        error(str(exc))
        sys.exit(2)


if __name__ == "__main__":
    main()
