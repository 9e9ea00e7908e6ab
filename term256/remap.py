# term256/remap.py
from __future__ import annotations

"""
Whole-image remapping to the 256-colour palette.

Shows how an image would look on a palette-limited terminal. Each unique
visible colour is matched once (memoised per strategy), then broadcast back
to its pixels. Fully transparent pixels are left untouched.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import numpy as np

from .core_types import (
    IndexMap,
    InvalidInputError,
    U8Image,
    U8Mask,
    assert_u8_image_rgb,
    assert_u8_mask_2d,
)
from .matchers import (
    MatchStrategy,
    cached_matcher,
    nearest_indices_euclidean,
    resolve_strategy,
)
from .constants import PALETTE_FIRST
from .palette_data import PALETTE_RGB
from .utils import (
    debug_log,
    format_seconds_compact,
    key_value_pairs_to_string,
    split_rows_into_parts,
    unique_visible_rgb,
)

# Index-map value for transparent pixels; matchers never return a system colour.
TRANSPARENT_INDEX = 0


def _match_rows(
    unique_rgb: U8Image, strategy: MatchStrategy, sum_grey_terms: bool
) -> List[int]:
    match = cached_matcher(strategy, sum_grey_terms)
    return [match(int(r), int(g), int(b)) for r, g, b in unique_rgb.tolist()]


def match_unique_colours(
    unique_rgb: U8Image,
    strategy: MatchStrategy,
    *,
    workers: int = 1,
    sum_grey_terms: bool = False,
) -> IndexMap:
    """
    Palette index for each row of unique_rgb [U,3]. Returns uint8 [U].

    Euclidean uses the vectorised argmin. The other strategies go through
    the memoised scalar matcher, split across threads when workers > 1.
    """
    strategy = resolve_strategy(strategy)
    if unique_rgb.shape[0] == 0:
        return np.zeros((0,), dtype=np.uint8)
    if strategy == "euclidean":
        return nearest_indices_euclidean(unique_rgb)

    count = int(unique_rgb.shape[0])
    if workers <= 1 or count < 256:
        return np.asarray(_match_rows(unique_rgb, strategy, sum_grey_terms), dtype=np.uint8)

    spans = split_rows_into_parts(count, workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(_match_rows, unique_rgb[s:e], strategy, sum_grey_terms)
            for s, e in spans
        ]
        parts = [f.result() for f in futures]
    return np.asarray([i for part in parts for i in part], dtype=np.uint8)


def remap_image(
    rgb: U8Image,
    alpha: U8Mask,
    strategy: MatchStrategy = "perceptual",
    *,
    workers: int = 1,
    sum_grey_terms: bool = False,
    debug: bool = False,
) -> Tuple[U8Image, IndexMap]:
    """
    Recolour visible pixels to their nearest palette entries.

    Returns:
      rgb_out:   uint8 [H,W,3], palette colours where alpha > 0, input elsewhere
      index_map: uint8 [H,W], palette index where alpha > 0, TRANSPARENT_INDEX elsewhere
    """
    assert_u8_image_rgb(rgb)
    assert_u8_mask_2d(alpha)
    if rgb.shape[:2] != alpha.shape:
        raise InvalidInputError(
            f"rgb {rgb.shape[:2]} and alpha {alpha.shape} sizes differ"
        )

    t0 = time.perf_counter()
    visible = alpha > 0
    unique_rgb, inverse = unique_visible_rgb(rgb, alpha)
    unique_idx = match_unique_colours(
        unique_rgb, strategy, workers=workers, sum_grey_terms=sum_grey_terms
    )

    index_map = np.full(alpha.shape, TRANSPARENT_INDEX, dtype=np.uint8)
    rgb_out = rgb.copy()
    if unique_idx.size:
        pixel_idx = unique_idx[inverse]
        index_map[visible] = pixel_idx
        rgb_out[visible] = PALETTE_RGB[pixel_idx.astype(np.int64) - PALETTE_FIRST]

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Strategy", strategy),
                    ("Unique colours", int(unique_rgb.shape[0])),
                    ("Palette entries used", int(np.unique(unique_idx).size)),
                    ("Time", format_seconds_compact(time.perf_counter() - t0)),
                ]
            )
        )
    return rgb_out, index_map


__all__ = ["TRANSPARENT_INDEX", "match_unique_colours", "remap_image"]
