# term256/core_types.py
from __future__ import annotations

"""
Core type aliases, the InvalidInputError exception, and input validators.
"""

from typing import Callable, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import PALETTE_FIRST, PALETTE_LAST

# Basic aliases

RGBTuple = Tuple[int, int, int]
XYZTuple = Tuple[float, float, float]
LabTuple = Tuple[float, float, float]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 3) or (N, 3)
U8Mask = NDArray[np.uint8]  # (H, W)
IndexMap = NDArray[np.uint8]  # (H, W) palette indices
Lab = NDArray[np.float64]  # (..., 3) CIE Lab

# Callable signatures

DistanceFn = Callable[[int], float]  # palette index -> distance to the query
Matcher = Callable[[int, int, int], int]  # (r, g, b) -> palette index


class InvalidInputError(ValueError):
    """A channel, palette index, or option outside its valid domain."""


# Validators


def validate_channel(value: object, name: str = "channel") -> int:
    """Return value as int if it is an integer in [0, 255]; raise otherwise."""
    # bool is an int subclass; True is not a colour channel.
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    v = int(value)
    if v < 0 or v > 255:
        raise InvalidInputError(f"{name} out of range [0, 255]: {v}")
    return v


def validate_rgb(r: object, g: object, b: object) -> RGBTuple:
    """Validate three channels and return them as a plain int tuple."""
    return (
        validate_channel(r, "red"),
        validate_channel(g, "green"),
        validate_channel(b, "blue"),
    )


def validate_index(
    index: object, lo: int = PALETTE_FIRST, hi: int = PALETTE_LAST
) -> int:
    """Return index as int if it is an integer in [lo, hi]; raise otherwise."""
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        raise InvalidInputError(f"palette index must be an integer, got {index!r}")
    i = int(index)
    if i < lo or i > hi:
        raise InvalidInputError(f"palette index out of range [{lo}, {hi}]: {i}")
    return i


def coerce_to_rgb_tuple(value: Union[Sequence[int], NDArray[np.generic]]) -> RGBTuple:
    """
    Coerce a 3-length sequence or array row to a validated RGB tuple.
    Helpful when extracting values from NumPy rows.
    """
    if isinstance(value, np.ndarray):
        if value.size != 3:
            raise InvalidInputError("expected an array row of 3 channels")
        flat = value.reshape(-1)
        return validate_rgb(int(flat[0]), int(flat[1]), int(flat[2]))
    if len(value) != 3:
        raise InvalidInputError("expected a sequence of 3 channels")
    return validate_rgb(value[0], value[1], value[2])


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb', '#rrggbb', 'rgb' or 'rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower().lstrip("#")
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        raise InvalidInputError(f"hex colour must be '#rrggbb' or '#rgb': {hex_str!r}")
    try:
        return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
    except ValueError as exc:
        raise InvalidInputError(f"not a hex colour: {hex_str!r}") from exc


def assert_u8_image_rgb(image: np.ndarray) -> U8Image:
    """Validate a uint8 (..., 3) array and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim < 1 or image.shape[-1] != 3:
        raise InvalidInputError("expected uint8 (..., 3) RGB array")
    return image  # type: ignore[return-value]


def assert_u8_mask_2d(mask_array: np.ndarray) -> U8Mask:
    """Validate a uint8 (H,W) mask and return it typed as U8Mask."""
    if mask_array.dtype != np.uint8 or mask_array.ndim != 2:
        raise InvalidInputError("expected uint8 (H,W) mask")
    return mask_array  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "XYZTuple",
    "LabTuple",
    "HexStr",
    "U8Image",
    "U8Mask",
    "IndexMap",
    "Lab",
    "DistanceFn",
    "Matcher",
    # errors
    "InvalidInputError",
    # helpers
    "validate_channel",
    "validate_rgb",
    "validate_index",
    "coerce_to_rgb_tuple",
    "rgb_to_hex",
    "hex_to_rgb",
    "assert_u8_image_rgb",
    "assert_u8_mask_2d",
]
