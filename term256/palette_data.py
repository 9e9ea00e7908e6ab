# term256/palette_data.py
from __future__ import annotations

"""
Fixed xterm 256-colour palette layout: 6x6x6 cube (16..231) and a
24-step grey ramp (232..255). Indices 0..15 belong to the terminal's own
system colour table and are not modelled here.

Exports:
  palette_entry_rgb(index) -> RGBTuple
  cube_index / cube_coords / cube_component
  grey_index / grey_component
  is_cube_index / is_grey_index
  build_palette() -> (indices, rgb, lab)
  PALETTE_INDICES, PALETTE_RGB, PALETTE_LAB  # read-only tables, 240 rows
"""

from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from .constants import (
    CUBE_BASE,
    CUBE_FIRST,
    CUBE_LAST,
    CUBE_SIZE,
    CUBE_STEP,
    GREY_BASE,
    GREY_FIRST,
    GREY_LAST,
    GREY_STEP,
    GREY_STEPS,
    PALETTE_FIRST,
    PALETTE_LAST,
)
from .core_types import InvalidInputError, Lab, RGBTuple, U8Image, validate_index
from .colour_convert import rgb_to_lab_batch


# Cube


def cube_component(n: int) -> int:
    """Channel value of cube coordinate n: 0 stays 0, else 55 + 40*n."""
    if n < 0 or n >= CUBE_SIZE:
        raise InvalidInputError(f"cube coordinate out of range [0, 5]: {n}")
    return CUBE_BASE + CUBE_STEP * n if n else 0


def cube_index(nr: int, ng: int, nb: int) -> int:
    """Palette index of cube cell (nr, ng, nb)."""
    for n in (nr, ng, nb):
        if n < 0 or n >= CUBE_SIZE:
            raise InvalidInputError(f"cube coordinate out of range [0, 5]: {n}")
    return CUBE_FIRST + nb + ng * CUBE_SIZE + nr * CUBE_SIZE * CUBE_SIZE


def cube_coords(index: int) -> Tuple[int, int, int]:
    """(nr, ng, nb) of a cube index in 16..231."""
    i = validate_index(index, CUBE_FIRST, CUBE_LAST) - CUBE_FIRST
    return (i // (CUBE_SIZE * CUBE_SIZE), (i // CUBE_SIZE) % CUBE_SIZE, i % CUBE_SIZE)


def is_cube_index(index: int) -> bool:
    return CUBE_FIRST <= index <= CUBE_LAST


# Grey ramp


def grey_component(k: int) -> int:
    """Channel value of grey step k in 0..23."""
    if k < 0 or k >= GREY_STEPS:
        raise InvalidInputError(f"grey step out of range [0, 23]: {k}")
    return GREY_BASE + GREY_STEP * k


def grey_index(k: int) -> int:
    """Palette index of grey step k in 0..23."""
    grey_component(k)
    return GREY_FIRST + k


def is_grey_index(index: int) -> bool:
    return GREY_FIRST <= index <= GREY_LAST


# Index -> RGB


def palette_entry_rgb(index: int) -> RGBTuple:
    """
    RGB of palette entry index (16..255).

    Raises InvalidInputError for anything else, including the system
    colours 0..15.
    """
    i = validate_index(index, PALETTE_FIRST, PALETTE_LAST)
    if i <= CUBE_LAST:
        nr, ng, nb = cube_coords(i)
        return (cube_component(nr), cube_component(ng), cube_component(nb))
    level = grey_component(i - GREY_FIRST)
    return (level, level, level)


# Tables


def build_palette() -> Tuple[NDArray[np.int64], U8Image, Lab]:
    """
    Build the 240-row palette tables in index order:
      indices: int64 [240]   (16..255)
      rgb:     uint8 [240,3]
      lab:     float64 [240,3]
    """
    indices = np.arange(PALETTE_FIRST, PALETTE_LAST + 1, dtype=np.int64)
    rgb: U8Image = np.array(
        [palette_entry_rgb(int(i)) for i in indices], dtype=np.uint8
    )
    lab: Lab = rgb_to_lab_batch(rgb)
    return indices, rgb, lab


PALETTE_INDICES, PALETTE_RGB, PALETTE_LAB = build_palette()
for _table in (PALETTE_INDICES, PALETTE_RGB, PALETTE_LAB):
    _table.setflags(write=False)
del _table


__all__ = [
    "cube_component",
    "cube_index",
    "cube_coords",
    "is_cube_index",
    "grey_component",
    "grey_index",
    "is_grey_index",
    "palette_entry_rgb",
    "build_palette",
    "PALETTE_INDICES",
    "PALETTE_RGB",
    "PALETTE_LAB",
]
