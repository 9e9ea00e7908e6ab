# term256/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image, ImageCms, ImageOps, UnidentifiedImageError

from .core_types import InvalidInputError, U8Image, U8Mask

"""
Image I/O helpers (RGBA in sRGB) and alpha binarisation.
"""


def binarise_alpha(alpha: np.ndarray, threshold: int = 127) -> U8Mask:
    """Map alpha >= threshold to 255 and everything else to 0."""
    a = np.asarray(alpha, dtype=np.uint8)
    out = np.zeros_like(a, dtype=np.uint8)
    out[a >= np.uint8(threshold)] = 255
    return out


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")
    if not icc_bytes:
        return im.convert("RGBA")

    try:
        src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
        dst_prof = ImageCms.createProfile("sRGB")
        converted = ImageCms.profileToProfile(
            im.convert("RGBA"),
            src_prof,
            dst_prof,
            renderingIntent=ImageCms.Intent.PERCEPTUAL,
            outputMode="RGBA",
        )
    except (OSError, ImageCms.PyCMSError):
        # Unreadable or unsupported profile: treat pixels as sRGB already.
        return im.convert("RGBA")
    return converted if converted is not None else im.convert("RGBA")


def load_image_rgba(path: Path) -> Tuple[U8Image, U8Mask]:
    """Load any Pillow-readable image as (rgb uint8 [H,W,3], alpha uint8 [H,W])."""
    try:
        with Image.open(path) as im0:
            im = _convert_to_srgb_rgba(im0)
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidInputError(f"not a readable image: {path}") from exc
    arr = np.array(im, dtype=np.uint8)
    return arr[..., :3].copy(), binarise_alpha(arr[..., 3])


def save_image_rgba(path: Path, rgb: U8Image, alpha: U8Mask) -> Path:
    """Save rgb + alpha as PNG; a non-.png suffix is replaced. Returns the path written."""
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    height, width, _ = rgb.shape
    out = np.zeros((height, width, 4), dtype=np.uint8)
    out[..., :3] = rgb
    out[..., 3] = alpha
    Image.fromarray(out).save(path)
    return path


__all__ = [
    "binarise_alpha",
    "load_image_rgba",
    "save_image_rgba",
]
