# term256/utils.py
from __future__ import annotations

"""
Shared utilities for term256.

Includes time formatting, SGR swatch helpers for previewing palette matches
in a terminal, unique-colour extraction, and tidy logging.
"""

import sys
from typing import Any, Iterable, List, Tuple

import numpy as np

from .core_types import RGBTuple, U8Image, U8Mask


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


# SGR swatches


def sgr_indexed_background(index: int, text: str = " ") -> str:
    """Text on a 256-colour background: ESC[48;5;<n>m ... ESC[m."""
    return f"\033[48;5;{index}m{text}\033[m"


def sgr_truecolour_background(rgb: RGBTuple, text: str = " ") -> str:
    """Text on a 24-bit background: ESC[48;2;r;g;bm ... ESC[m."""
    r, g, b = rgb
    return f"\033[48;2;{r};{g};{b}m{text}\033[m"


# Image helpers


def unique_visible_rgb(
    image_rgb: U8Image, alpha_mask: U8Mask
) -> Tuple[U8Image, np.ndarray]:
    """
    Return (unique RGB rows among alpha>0, inverse index into the visible
    pixels in row-major order).
    """
    visible_mask = alpha_mask > 0
    if not np.any(visible_mask):
        return np.zeros((0, 3), dtype=np.uint8), np.zeros((0,), dtype=np.int64)
    flat_rgb = image_rgb[visible_mask].reshape(-1, 3)
    uniques, inverse = np.unique(flat_rgb, axis=0, return_inverse=True)
    return (
        uniques.astype(np.uint8, copy=False),
        inverse.reshape(-1).astype(np.int64, copy=False),
    )


def split_rows_into_parts(height: int, parts: int) -> List[Tuple[int, int]]:
    """Partition range [0, height) into ~parts contiguous [start, end) row spans."""
    parts = max(1, int(parts))
    step = max(1, (height + parts - 1) // parts)
    return [(start, min(start + step, height)) for start in range(0, height, step)]


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [image] Strategy: perceptual  Workers: 4  Exact grey: off
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "sgr_indexed_background",
    "sgr_truecolour_background",
    "unique_visible_rgb",
    "split_rows_into_parts",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "error",
]
