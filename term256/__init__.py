# term256/__init__.py
"""
term256 package.

Purpose:
  Map 24-bit RGB colours onto the fixed xterm 256-colour palette for
  terminals that cannot show true colour. See term256_map.py for the CLI.

Public API:
  rgb_to_xyz, xyz_to_lab, rgb_to_lab : sRGB -> XYZ -> Lab (D65)
  delta_e2000                        : CIEDE2000 colour difference
  palette_entry_rgb                  : palette index (16..255) -> RGB
  match_analytic                     : O(1) cube/grey estimate
  match_euclidean                    : exhaustive RGB-distance search
  match_perceptual                   : exhaustive CIEDE2000 search
  match_colour / cached_matcher      : strategy dispatch and memoisation
  remap_image                        : recolour an RGBA image to the palette
  InvalidInputError                  : raised for out-of-range input

Quick start:
  from term256 import match_perceptual, palette_entry_rgb
  idx = match_perceptual(200, 120, 40)
"""

__version__ = "0.1.0"

from . import colour_convert
from . import constants
from . import core_types
from . import palette_data
from . import matchers
from . import utils

from .core_types import InvalidInputError
from .colour_convert import delta_e2000, rgb_to_lab, rgb_to_xyz, xyz_to_lab
from .palette_data import palette_entry_rgb
from .matchers import (
    STRATEGIES,
    MatchStrategy,
    cached_matcher,
    match_analytic,
    match_colour,
    match_euclidean,
    match_perceptual,
)
from .remap import remap_image

__all__ = [
    "__version__",
    "colour_convert",
    "constants",
    "core_types",
    "palette_data",
    "matchers",
    "utils",
    "InvalidInputError",
    "rgb_to_xyz",
    "xyz_to_lab",
    "rgb_to_lab",
    "delta_e2000",
    "palette_entry_rgb",
    "STRATEGIES",
    "MatchStrategy",
    "match_analytic",
    "match_euclidean",
    "match_perceptual",
    "match_colour",
    "cached_matcher",
    "remap_image",
]
