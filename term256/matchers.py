# term256/matchers.py
from __future__ import annotations

"""
RGB -> palette index matchers.

Strategies (closed set, see MatchStrategy):
  analytic   : O(1) cube estimate with a grey-axis override.
  euclidean  : exhaustive search over 16..255, squared RGB distance.
  perceptual : exhaustive search over 16..255, CIEDE2000 in Lab.

Both exhaustive strategies share search(distance_fn). Ties keep the first
(lowest) index reaching the minimum. All matchers return an index in
16..255; the system colours 0..15 are never produced.
"""

from functools import lru_cache
from typing import Literal, Tuple, get_args

import numpy as np

from .constants import (
    ANALYTIC_GREY_OFFSET,
    ANALYTIC_GREY_SPREAD,
    ANALYTIC_LOW_DIV,
    ANALYTIC_LOW_OFFSET,
    ANALYTIC_RETRY_DIV,
    ANALYTIC_RETRY_OFFSET,
    GREY_BASE,
    GREY_FIRST,
    GREY_LAST,
    GREY_STEP,
    PALETTE_FIRST,
    PALETTE_LAST,
)
from .core_types import (
    DistanceFn,
    IndexMap,
    InvalidInputError,
    Matcher,
    RGBTuple,
    assert_u8_image_rgb,
    coerce_to_rgb_tuple,
    validate_rgb,
)
from .colour_convert import delta_e2000, rgb_to_lab
from .palette_data import (
    PALETTE_INDICES,
    PALETTE_LAB,
    PALETTE_RGB,
    cube_component,
    cube_index,
)


MatchStrategy = Literal["analytic", "euclidean", "perceptual"]
STRATEGIES: Tuple[str, ...] = get_args(MatchStrategy)


# Exhaustive search


def search(distance_fn: DistanceFn) -> int:
    """
    Return the palette index in 16..255 minimising distance_fn(index).
    Strict improvement only, so the first index reaching the minimum wins.
    """
    best_index = PALETTE_FIRST
    best_dist = distance_fn(PALETTE_FIRST)
    for index in range(PALETTE_FIRST + 1, PALETTE_LAST + 1):
        dist = distance_fn(index)
        if dist < best_dist:
            best_index = index
            best_dist = dist
    return best_index


def match_euclidean(r: int, g: int, b: int) -> int:
    """Nearest palette entry by squared RGB distance (no perceptual weighting)."""
    r, g, b = validate_rgb(r, g, b)

    def distance(index: int) -> float:
        # Row i of the tables is palette index 16 + i.
        cr, cg, cb = PALETTE_RGB[index - PALETTE_FIRST].tolist()
        return (cr - r) ** 2 + (cg - g) ** 2 + (cb - b) ** 2

    return search(distance)


def match_perceptual(r: int, g: int, b: int) -> int:
    """
    Nearest palette entry by CIEDE2000.

    Roughly 240 CIEDE2000 evaluations per call; use cached_matcher or a
    precomputed table for per-pixel work.
    """
    src_lab = rgb_to_lab(r, g, b)

    def distance(index: int) -> float:
        return delta_e2000(src_lab, PALETTE_LAB[index - PALETTE_FIRST])

    return search(distance)


# Analytic


def _trunc_div(num: int, den: int) -> int:
    """Integer division rounding toward zero (den > 0)."""
    q = abs(num) // den
    return -q if num < 0 else q


def _analytic_coord(v: int) -> int:
    n = _trunc_div(v - ANALYTIC_LOW_OFFSET, ANALYTIC_LOW_DIV)
    if n == 0:
        # (v-36)/40 lumps 0..75 together; split them at the 0/95 midpoint.
        n = _trunc_div(v + ANALYTIC_RETRY_OFFSET, ANALYTIC_RETRY_DIV)
    return n


def match_analytic(r: int, g: int, b: int, *, sum_grey_terms: bool = False) -> int:
    """
    O(1) palette estimate.

    Picks the cube cell directly, then for near-grey input (all channel
    spreads < 20, or a cube cell on the grey diagonal) compares the cube
    colour against the nearest grey ramp step by brightness and keeps the
    closer one. Ties keep the cube colour.

    The cube brightness proxy matches the classic PuTTY heuristic, which
    only keeps the blue component (divided by 3). Pass sum_grey_terms=True
    to average all three cube components instead.
    """
    r, g, b = validate_rgb(r, g, b)
    nr, ng, nb = _analytic_coord(r), _analytic_coord(g), _analytic_coord(b)
    nearest = cube_index(nr, ng, nb)

    near_grey = (
        abs(r - g) < ANALYTIC_GREY_SPREAD
        and abs(g - b) < ANALYTIC_GREY_SPREAD
        and abs(b - r) < ANALYTIC_GREY_SPREAD
    )
    if not (near_grey or (nr == ng and ng == nb)):
        return nearest

    tw = (r + g + b) // 3
    nw = min(GREY_LAST, GREY_FIRST + _trunc_div(tw - ANALYTIC_GREY_OFFSET, GREY_STEP))
    tg = (nw - GREY_FIRST) * GREY_STEP + GREY_BASE
    if sum_grey_terms:
        tc = (cube_component(nr) + cube_component(ng) + cube_component(nb)) // 3
    else:
        tc = cube_component(nb) // 3

    if (tg - tw) ** 2 < (tc - tw) ** 2:
        return nw
    return nearest


# Dispatch


def resolve_strategy(name: str) -> MatchStrategy:
    """Validate a strategy name."""
    if name not in STRATEGIES:
        raise InvalidInputError(
            f"unknown strategy {name!r}; expected one of {', '.join(STRATEGIES)}"
        )
    return name  # type: ignore[return-value]


def matcher_for(strategy: MatchStrategy, *, sum_grey_terms: bool = False) -> Matcher:
    """Return the (r, g, b) -> index function for a strategy."""
    strategy = resolve_strategy(strategy)
    if strategy == "analytic":
        if sum_grey_terms:
            return lambda r, g, b: match_analytic(r, g, b, sum_grey_terms=True)
        return match_analytic
    if strategy == "euclidean":
        return match_euclidean
    return match_perceptual


def match_colour(
    rgb: RGBTuple,
    strategy: MatchStrategy = "euclidean",
    *,
    sum_grey_terms: bool = False,
) -> int:
    """Match one RGB tuple (or 3-element array row) with the named strategy."""
    r, g, b = coerce_to_rgb_tuple(rgb)
    return matcher_for(strategy, sum_grey_terms=sum_grey_terms)(r, g, b)


@lru_cache(maxsize=None)
def cached_matcher(
    strategy: MatchStrategy, sum_grey_terms: bool = False, maxsize: int = 1 << 16
) -> Matcher:
    """
    Memoised matcher keyed by (r, g, b). One cache per argument set, shared
    process-wide.
    """
    return lru_cache(maxsize=maxsize)(
        matcher_for(strategy, sum_grey_terms=sum_grey_terms)
    )


# Vectorised euclidean


def nearest_indices_euclidean(rgb: np.ndarray, chunk_rows: int = 4096) -> IndexMap:
    """
    Euclidean nearest palette index for every row of a uint8 (..., 3) array.
    Same result and tie-break as match_euclidean. Returns uint8 of shape (...).
    """
    arr = assert_u8_image_rgb(np.asarray(rgb))
    flat = arr.reshape(-1, 3).astype(np.int32)
    pal = PALETTE_RGB.astype(np.int32)
    out = np.empty((flat.shape[0],), dtype=np.uint8)
    for start in range(0, flat.shape[0], chunk_rows):
        block = flat[start : start + chunk_rows]
        diff = block[:, None, :] - pal[None, :, :]
        dist2 = np.sum(diff * diff, axis=2)
        # argmin returns the first minimum, which is the lowest index.
        out[start : start + chunk_rows] = PALETTE_INDICES[np.argmin(dist2, axis=1)]
    return out.reshape(arr.shape[:-1])


__all__ = [
    "MatchStrategy",
    "STRATEGIES",
    "search",
    "match_analytic",
    "match_euclidean",
    "match_perceptual",
    "resolve_strategy",
    "matcher_for",
    "match_colour",
    "cached_matcher",
    "nearest_indices_euclidean",
]
