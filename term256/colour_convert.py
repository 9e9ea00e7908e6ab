# term256/colour_convert.py
from __future__ import annotations

"""
Colour conversions and metrics (sRGB, D65).

Exports:
  rgb_to_xyz(r, g, b)
  xyz_to_lab(X, Y, Z)
  rgb_to_lab(r, g, b)
  rgb_to_lab_batch(rgb)
  delta_e2000(lab1, lab2)
"""

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .constants import (
    D65_WHITE,
    DE_POW25_7,
    LAB_EPSILON,
    LAB_KAPPA_LINEAR,
    LAB_OFFSET,
    RGB_TO_XYZ,
    SRGB_GAMMA_EXP,
    SRGB_GAMMA_OFFSET,
    SRGB_GAMMA_SCALE,
    SRGB_GAMMA_THRESHOLD,
    SRGB_LINEAR_SLOPE,
    XYZ_DECIMALS,
)
from .core_types import Lab, LabTuple, XYZTuple, assert_u8_image_rgb, validate_rgb

_XYZ_SCALE = 10.0**XYZ_DECIMALS


# sRGB to XYZ


def _srgb_to_linear(v: float) -> float:
    """Gamma-decode one normalised sRGB channel (0..1)."""
    if v > SRGB_GAMMA_THRESHOLD:
        return ((v + SRGB_GAMMA_OFFSET) / SRGB_GAMMA_SCALE) ** SRGB_GAMMA_EXP
    return v / SRGB_LINEAR_SLOPE


def _round_xyz(v: float) -> float:
    """Round half up to XYZ_DECIMALS places (inputs are never negative)."""
    return math.floor(v * _XYZ_SCALE + 0.5) / _XYZ_SCALE


def rgb_to_xyz(r: int, g: int, b: int) -> XYZTuple:
    """
    8-bit sRGB to CIE XYZ scaled to 0..100 (observer 2°, D65).

    Each component is rounded to 4 decimals so that (255, 255, 255) lands on
    exactly (95.047, 100.0, 108.883). Raises InvalidInputError for channels
    outside [0, 255].
    """
    r, g, b = validate_rgb(r, g, b)
    rl = _srgb_to_linear(r / 255.0) * 100.0
    gl = _srgb_to_linear(g / 255.0) * 100.0
    bl = _srgb_to_linear(b / 255.0) * 100.0

    (m00, m01, m02), (m10, m11, m12), (m20, m21, m22) = RGB_TO_XYZ
    X = rl * m00 + gl * m01 + bl * m02
    Y = rl * m10 + gl * m11 + bl * m12
    Z = rl * m20 + gl * m21 + bl * m22
    return (_round_xyz(X), _round_xyz(Y), _round_xyz(Z))


# XYZ to Lab


def _lab_f(t: float) -> float:
    if t > LAB_EPSILON:
        return t ** (1.0 / 3.0)
    return LAB_KAPPA_LINEAR * t + LAB_OFFSET


def xyz_to_lab(X: float, Y: float, Z: float) -> LabTuple:
    """CIE XYZ (0..100) to CIE Lab against the D65 reference white."""
    Xn, Yn, Zn = D65_WHITE
    fx = _lab_f(float(X) / Xn)
    fy = _lab_f(float(Y) / Yn)
    fz = _lab_f(float(Z) / Zn)
    L = 116.0 * fy - 16.0
    a = 500.0 * (fx - fy)
    b = 200.0 * (fy - fz)
    return (L, a, b)


def rgb_to_lab(r: int, g: int, b: int) -> LabTuple:
    """8-bit sRGB straight to Lab (rgb_to_xyz then xyz_to_lab)."""
    return xyz_to_lab(*rgb_to_xyz(r, g, b))


def rgb_to_lab_batch(rgb: np.ndarray) -> Lab:
    """
    Vectorised sRGB -> XYZ -> Lab for a uint8 array of shape (..., 3).
    Same constants and XYZ rounding as the scalar path. Returns float64.
    """
    rgb_u8 = assert_u8_image_rgb(np.asarray(rgb))
    u = rgb_u8.astype(np.float64) / 255.0
    lin = np.where(
        u > SRGB_GAMMA_THRESHOLD,
        ((u + SRGB_GAMMA_OFFSET) / SRGB_GAMMA_SCALE) ** SRGB_GAMMA_EXP,
        u / SRGB_LINEAR_SLOPE,
    )
    lin = lin * 100.0
    rl, gl, bl = lin[..., 0], lin[..., 1], lin[..., 2]

    # Same term order as rgb_to_xyz so both paths round identically.
    xyz = np.empty(lin.shape, dtype=np.float64)
    for axis, (m0, m1, m2) in enumerate(RGB_TO_XYZ):
        xyz[..., axis] = rl * m0 + gl * m1 + bl * m2
    xyz = np.floor(xyz * _XYZ_SCALE + 0.5) / _XYZ_SCALE

    t = xyz / np.asarray(D65_WHITE, dtype=np.float64)
    f = np.where(t > LAB_EPSILON, np.cbrt(t), LAB_KAPPA_LINEAR * t + LAB_OFFSET)

    out = np.empty(f.shape, dtype=np.float64)
    out[..., 0] = 116.0 * f[..., 1] - 16.0
    out[..., 1] = 500.0 * (f[..., 0] - f[..., 1])
    out[..., 2] = 200.0 * (f[..., 1] - f[..., 2])
    return out


# CIEDE2000


def _hue_angle(b_val: float, a_prime: float) -> float:
    """Hue in [0, 2π); 0 for achromatic colours where the angle is undefined."""
    if a_prime == 0.0 and b_val == 0.0:
        return 0.0
    h = math.atan2(b_val, a_prime)
    if h < 0.0:
        h += 2.0 * math.pi
    return h


def delta_e2000(
    lab1: Sequence[float] | NDArray[np.floating],
    lab2: Sequence[float] | NDArray[np.floating],
) -> float:
    """
    CIEDE2000 colour difference between two Lab colours (kL = kC = kH = 1).

    Follows Sharma, Wu & Dalal, "The CIEDE2000 Color-Difference Formula:
    Implementation Notes, Supplementary Test Data, and Mathematical
    Observations" (2005). Hues are kept in radians throughout.

    The published formula is not exactly symmetric when the mean-hue
    correction lands on the ±π boundary; that behaviour is kept.
    """
    L1, a1, b1 = float(lab1[0]), float(lab1[1]), float(lab1[2])
    L2, a2, b2 = float(lab2[0]), float(lab2[1]), float(lab2[2])

    # Chroma compensation: G shrinks a* near neutral.
    C1 = math.sqrt(a1 * a1 + b1 * b1)
    C2 = math.sqrt(a2 * a2 + b2 * b2)
    C_bar7 = (0.5 * (C1 + C2)) ** 7
    G = 0.5 * (1.0 - math.sqrt(C_bar7 / (C_bar7 + DE_POW25_7)))

    a1p = (1.0 + G) * a1
    a2p = (1.0 + G) * a2
    C1p = math.sqrt(a1p * a1p + b1 * b1)
    C2p = math.sqrt(a2p * a2p + b2 * b2)
    Cp_prod = C1p * C2p

    h1p = _hue_angle(b1, a1p)
    h2p = _hue_angle(b2, a2p)

    dLp = L2 - L1
    dCp = C2p - C1p

    if Cp_prod == 0.0:
        dhp = 0.0
    else:
        dhp = h2p - h1p
        if dhp > math.pi:
            dhp -= 2.0 * math.pi
        elif dhp < -math.pi:
            dhp += 2.0 * math.pi

    dHp = 2.0 * math.sqrt(Cp_prod) * math.sin(dhp / 2.0)

    L_bar_p = 0.5 * (L1 + L2)
    C_bar_p = 0.5 * (C1p + C2p)

    if Cp_prod == 0.0:
        h_bar_p = h1p + h2p
    else:
        h_bar_p = 0.5 * (h1p + h2p)
        if abs(h1p - h2p) > math.pi:
            h_bar_p -= math.pi
        if h_bar_p < 0.0:
            h_bar_p += 2.0 * math.pi

    L_dev2 = (L_bar_p - 50.0) ** 2
    S_l = 1.0 + 0.015 * L_dev2 / math.sqrt(20.0 + L_dev2)
    S_c = 1.0 + 0.045 * C_bar_p
    T = (
        1.0
        - 0.17 * math.cos(h_bar_p - math.pi / 6.0)
        + 0.24 * math.cos(2.0 * h_bar_p)
        + 0.32 * math.cos(3.0 * h_bar_p + math.pi / 30.0)
        - 0.20 * math.cos(4.0 * h_bar_p - 63.0 * math.pi / 180.0)
    )
    S_h = 1.0 + 0.015 * C_bar_p * T

    d_theta = (30.0 * math.pi / 180.0) * math.exp(
        -(((math.degrees(h_bar_p) - 275.0) / 25.0) ** 2)
    )
    C_bar_p7 = C_bar_p**7
    R_c = 2.0 * math.sqrt(C_bar_p7 / (C_bar_p7 + DE_POW25_7))
    R_t = -math.sin(2.0 * d_theta) * R_c

    tL = dLp / S_l
    tC = dCp / S_c
    tH = dHp / S_h
    dE2 = tL * tL + tC * tC + tH * tH + R_t * tC * tH
    # R_t term can push an exact zero a hair negative.
    return math.sqrt(dE2) if dE2 > 0.0 else 0.0


__all__ = [
    "rgb_to_xyz",
    "xyz_to_lab",
    "rgb_to_lab",
    "rgb_to_lab_batch",
    "delta_e2000",
]
