# term256/constants.py
"""
Fixed palette layout and colorimetric constants.

- Palette layout: CUBE_*, GREY_*, PALETTE_FIRST / PALETTE_LAST
- sRGB / D65: SRGB_*, D65_WHITE, RGB_TO_XYZ
- Lab: LAB_EPSILON, LAB_KAPPA_LINEAR
- Analytic matcher thresholds (ANALYTIC_*)
"""
from __future__ import annotations

from typing import Tuple

# ==============
# Palette layout
# ==============
PALETTE_FIRST: int = 16
PALETTE_LAST: int = 255

CUBE_FIRST: int = 16
CUBE_LAST: int = 231
CUBE_SIZE: int = 6
CUBE_BASE: int = 55
CUBE_STEP: int = 40

GREY_FIRST: int = 232
GREY_LAST: int = 255
GREY_STEPS: int = 24
GREY_BASE: int = 8
GREY_STEP: int = 10

# ===========
# sRGB -> XYZ
# ===========
SRGB_GAMMA_THRESHOLD: float = 0.04045
SRGB_GAMMA_OFFSET: float = 0.055
SRGB_GAMMA_SCALE: float = 1.055
SRGB_GAMMA_EXP: float = 2.4
SRGB_LINEAR_SLOPE: float = 12.92

# Observer 2°, illuminant D65
RGB_TO_XYZ: Tuple[Tuple[float, float, float], ...] = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)

# 4dp rounding of XYZ lands #ffffff exactly on this white point.
XYZ_DECIMALS: int = 4
D65_WHITE: Tuple[float, float, float] = (95.047, 100.000, 108.883)

# ==========
# XYZ -> Lab
# ==========
LAB_EPSILON: float = 0.008856
LAB_KAPPA_LINEAR: float = 7.787
LAB_OFFSET: float = 16.0 / 116.0

# ========
# CIEDE2000
# ========
DE_POW25_7: float = 25.0**7

# ================
# Analytic matcher
# ================
ANALYTIC_LOW_OFFSET: int = 36
ANALYTIC_LOW_DIV: int = 40
ANALYTIC_RETRY_OFFSET: int = 47
ANALYTIC_RETRY_DIV: int = 95
ANALYTIC_GREY_SPREAD: int = 20
ANALYTIC_GREY_OFFSET: int = 4

__all__ = [
    "PALETTE_FIRST",
    "PALETTE_LAST",
    "CUBE_FIRST",
    "CUBE_LAST",
    "CUBE_SIZE",
    "CUBE_BASE",
    "CUBE_STEP",
    "GREY_FIRST",
    "GREY_LAST",
    "GREY_STEPS",
    "GREY_BASE",
    "GREY_STEP",
    "SRGB_GAMMA_THRESHOLD",
    "SRGB_GAMMA_OFFSET",
    "SRGB_GAMMA_SCALE",
    "SRGB_GAMMA_EXP",
    "SRGB_LINEAR_SLOPE",
    "RGB_TO_XYZ",
    "XYZ_DECIMALS",
    "D65_WHITE",
    "LAB_EPSILON",
    "LAB_KAPPA_LINEAR",
    "LAB_OFFSET",
    "DE_POW25_7",
    "ANALYTIC_LOW_OFFSET",
    "ANALYTIC_LOW_DIV",
    "ANALYTIC_RETRY_OFFSET",
    "ANALYTIC_RETRY_DIV",
    "ANALYTIC_GREY_SPREAD",
    "ANALYTIC_GREY_OFFSET",
]
