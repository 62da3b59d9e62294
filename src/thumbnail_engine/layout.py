"""
Layout - Placement arithmetic for the thumbnail canvas.

Pure functions only: sizes in, sizes and coordinates out. Nothing here
touches pixels, so every rule can be checked without rendering.
"""

from typing import List, Tuple

# Thumbnail dimensions (Twitter/Open Graph card, 16:9)
THUMB_WIDTH = 1200
THUMB_HEIGHT = 675

# Title starts at 55% of the canvas height
TITLE_POSITION_Y = 0.55

# Vignette radii, relative to the canvas
VIGNETTE_RADIUS_X = 0.8
VIGNETTE_RADIUS_Y = 0.7

# Author badge sits at a fixed spot, not tied to border padding
AUTHOR_BADGE_POSITION = (60, 60)


def cover_fit_scale(src_size: Tuple[int, int], canvas_size: Tuple[int, int]) -> float:
    """
    Scale factor that makes the source cover the whole canvas.

    Fill the width unless that leaves the height short, in which case fill
    the height. The overflowing dimension gets cropped when drawn at (0, 0).
    """
    src_w, src_h = src_size
    width, height = canvas_size
    width_scale = width / src_w
    height_scale = height / src_h
    if src_h * width_scale > height:
        return width_scale
    return height_scale


def cover_fit_size(src_size: Tuple[int, int], canvas_size: Tuple[int, int]) -> Tuple[int, int]:
    """Size of the source after cover-fit scaling."""
    scale = cover_fit_scale(src_size, canvas_size)
    return round(src_size[0] * scale), round(src_size[1] * scale)


def fit_to_height(src_size: Tuple[int, int], height: int) -> Tuple[int, int]:
    """Aspect-preserving size whose height is exactly `height`."""
    src_w, src_h = src_size
    scale = height / src_h
    return max(1, round(src_w * scale)), height


def tag_badge_positions(
    badge_widths: List[int],
    canvas_width: int = THUMB_WIDTH,
    border_padding: int = 60,
    margin: int = 40,
) -> List[Tuple[int, int]]:
    """
    Top-left corners for tag badges laid out right to left.

    The first badge is flush against the right border, each following badge
    goes `margin` pixels to the left of the previous one.
    """
    positions = []
    right = canvas_width - border_padding
    for badge_w in badge_widths:
        right -= badge_w
        positions.append((right, border_padding))
        right -= margin
    return positions


def title_anchor(
    canvas_size: Tuple[int, int] = (THUMB_WIDTH, THUMB_HEIGHT),
    border_padding: int = 60,
    position_y: float = TITLE_POSITION_Y,
) -> Tuple[int, int]:
    """Top-left point of the first title line."""
    return border_padding, int(canvas_size[1] * position_y)


def title_wrap_width(canvas_width: int = THUMB_WIDTH, border_padding: int = 60) -> int:
    return canvas_width - 2 * border_padding


def vignette_radii(canvas_size: Tuple[int, int] = (THUMB_WIDTH, THUMB_HEIGHT)) -> Tuple[float, float]:
    return canvas_size[0] * VIGNETTE_RADIUS_X, canvas_size[1] * VIGNETTE_RADIUS_Y
