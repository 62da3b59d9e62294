"""
Image Processor - Visual effects for the background photo.

Uses Pillow for resampling and blending and numpy for the vignette mask.
"""

from typing import Tuple

import numpy as np
from PIL import Image, ImageOps

from .layout import cover_fit_size


def desaturate(img: Image.Image, amount: float) -> Image.Image:
    """
    Blend towards grayscale.

    0.0 leaves the colors untouched, 1.0 gives R == G == B everywhere.
    Alpha (if any) is kept as is.
    """
    rgb = img.convert("RGB")
    if amount <= 0:
        result = rgb
    else:
        gray = ImageOps.grayscale(rgb).convert("RGB")
        result = gray if amount >= 1 else Image.blend(rgb, gray, alpha=amount)

    if img.mode == "RGBA":
        result = result.convert("RGBA")
        result.putalpha(img.getchannel("A"))
    return result


def vignette(
    img: Image.Image,
    radius_x: float,
    radius_y: float,
    strength: float = 1.0,
    color: Tuple[int, int, int] = (0, 0, 0),
) -> Image.Image:
    """
    Darken edges with an elliptical falloff centered on the image.

    Pixels at the center are untouched, pixels on or beyond the
    (radius_x, radius_y) ellipse are fully covered by `color` * strength.
    """
    w, h = img.size
    cx, cy = w / 2, h / 2

    Y, X = np.ogrid[:h, :w]
    dist = np.sqrt(((X - cx) / radius_x) ** 2 + ((Y - cy) / radius_y) ** 2)
    normalized = np.clip(dist, 0, 1)
    alpha = (normalized ** 1.5 * strength * 255).astype(np.uint8)

    arr = np.zeros((h, w, 4), dtype=np.uint8)
    arr[:, :, 0] = color[0]
    arr[:, :, 1] = color[1]
    arr[:, :, 2] = color[2]
    arr[:, :, 3] = alpha
    overlay = Image.fromarray(arr, "RGBA")
    return Image.alpha_composite(img.convert("RGBA"), overlay)


def with_opacity(img: Image.Image, opacity: float) -> Image.Image:
    """Copy of the image with its alpha channel scaled by `opacity`."""
    rgba = img.convert("RGBA")
    if opacity >= 1.0:
        return rgba
    alpha = rgba.getchannel("A")
    alpha = alpha.point(lambda a: int(a * opacity))
    rgba.putalpha(alpha)
    return rgba


def resize_cover(img: Image.Image, canvas_size: Tuple[int, int]) -> Image.Image:
    """Scale so the image covers the whole canvas (excess cropped later)."""
    size = cover_fit_size(img.size, canvas_size)
    if size == img.size:
        return img.copy()
    return img.resize(size, Image.Resampling.LANCZOS)


def prepare_background(
    img: Image.Image,
    canvas_size: Tuple[int, int],
    grayscale: float,
    radii: Tuple[float, float],
) -> Image.Image:
    """Cover-fit, desaturate and vignette the background photo."""
    bg = resize_cover(img.convert("RGBA"), canvas_size)
    bg = desaturate(bg, grayscale)
    return vignette(bg, *radii)
