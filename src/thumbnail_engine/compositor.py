"""
Compositor - Builds the thumbnail on one canvas, layer by layer.

The canvas is passed explicitly through each step:
  background -> title -> tag badges -> author badge
and only leaves this module when it is encoded to JPEG.
"""

import os
import tempfile
from pathlib import Path
from typing import List, Tuple

from PIL import Image, ImageDraw, ImageFont

from .config import ThumbnailConfig
from .errors import EncodingFailure
from .layout import (
    AUTHOR_BADGE_POSITION, THUMB_HEIGHT, THUMB_WIDTH,
    fit_to_height, tag_badge_positions, title_anchor, title_wrap_width, vignette_radii,
)
from .processor import prepare_background, with_opacity

TITLE_COLOR = (245, 245, 245)   # WhiteSmoke
STROKE_COLOR = (0, 0, 0)
STROKE_WIDTH = 1.2
LINE_SPACING = 0.15             # fraction of line height


def create_canvas(width: int = THUMB_WIDTH, height: int = THUMB_HEIGHT) -> Image.Image:
    """Opaque black canvas."""
    return Image.new("RGBA", (width, height), (0, 0, 0, 255))


def draw_background(
    canvas: Image.Image,
    background: Image.Image,
    grayscale: float,
    opacity: float,
) -> Image.Image:
    """Processed background at (0, 0) blended over the canvas with `opacity`."""
    bg = prepare_background(background, canvas.size, grayscale, vignette_radii(canvas.size))

    # Clip to the canvas; anything the background does not cover stays transparent
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    layer.paste(bg.crop((0, 0, *canvas.size)), (0, 0))
    layer = with_opacity(layer, opacity)
    return Image.alpha_composite(canvas, layer)


def _text_width(draw: ImageDraw.ImageDraw, text: str, font) -> float:
    """Right edge of the rendered text when drawn at x = 0."""
    bbox = draw.textbbox((0, 0), text, font=font, stroke_width=STROKE_WIDTH)
    return bbox[2]


def _break_word(word: str, font, max_width: int, draw) -> List[str]:
    """Split a single word that is wider than max_width by characters."""
    parts = []
    current = ""
    for ch in word:
        if current and _text_width(draw, current + ch, font) > max_width:
            parts.append(current)
            current = ch
        else:
            current += ch
    if current:
        parts.append(current)
    return parts


def wrap_title_lines(text: str, font, max_width: int, draw: ImageDraw.ImageDraw) -> List[str]:
    """
    Wrap title text into lines fitting within max_width.
    Explicit newlines are forced breaks; blank segments keep their line.
    """
    lines = []
    for segment in text.split("\n"):
        words = segment.split()
        if not words:
            lines.append("")
            continue
        current = []
        for word in words:
            if _text_width(draw, word, font) > max_width:
                if current:
                    lines.append(" ".join(current))
                *full, rest = _break_word(word, font, max_width, draw)
                lines.extend(full)
                current = [rest]
                continue
            test = " ".join(current + [word])
            if _text_width(draw, test, font) <= max_width:
                current.append(word)
            else:
                lines.append(" ".join(current))
                current = [word]
        if current:
            lines.append(" ".join(current))
    return lines


def draw_title(
    canvas: Image.Image,
    title: str,
    font: ImageFont.FreeTypeFont,
    border_padding: int,
) -> Tuple[Image.Image, List[str]]:
    """
    Draw the outlined title, left aligned below the middle of the canvas.

    Returns the canvas and the wrapped lines that were drawn.
    """
    draw = ImageDraw.Draw(canvas)
    max_width = title_wrap_width(canvas.width, border_padding)
    lines = wrap_title_lines(title, font, max_width, draw)

    ref_bbox = draw.textbbox((0, 0), "Mg", font=font)
    line_h = ref_bbox[3] - ref_bbox[1]
    line_spacing = int(line_h * LINE_SPACING)

    x, y = title_anchor(canvas.size, border_padding)
    for line in lines:
        if line:
            draw.text(
                (x, y), line, font=font,
                fill=TITLE_COLOR,
                stroke_width=STROKE_WIDTH,
                stroke_fill=STROKE_COLOR,
            )
        y += line_h + line_spacing

    return canvas, lines


def resize_badge(icon: Image.Image, height: int) -> Image.Image:
    """Scale an icon to `height`, keeping its aspect ratio."""
    icon = icon.convert("RGBA")
    size = fit_to_height(icon.size, height)
    if size == icon.size:
        return icon
    return icon.resize(size, Image.Resampling.LANCZOS)


def draw_tag_badges(
    canvas: Image.Image,
    tag_icons: List[Image.Image],
    badge_height: int,
    margin: int,
    border_padding: int,
) -> Tuple[Image.Image, List[Tuple[int, int]]]:
    """Tag badges along the top edge, right aligned, first tag rightmost."""
    badges = [resize_badge(icon, badge_height) for icon in tag_icons]
    positions = tag_badge_positions(
        [b.width for b in badges], canvas.width, border_padding, margin
    )
    for badge, pos in zip(badges, positions):
        canvas.paste(badge, pos, badge)
    return canvas, positions


def draw_author_badge(canvas: Image.Image, author_icon: Image.Image, badge_height: int) -> Image.Image:
    badge = resize_badge(author_icon, badge_height)
    canvas.paste(badge, AUTHOR_BADGE_POSITION, badge)
    return canvas


def compose(
    background: Image.Image,
    title_lines: List[str],
    tag_icons: List[Image.Image],
    author_icon: Image.Image,
    config: ThumbnailConfig,
    font: ImageFont.FreeTypeFont,
) -> Image.Image:
    """
    Composite the full thumbnail. Returns an RGB image of exactly
    THUMB_WIDTH x THUMB_HEIGHT, ready for JPEG encoding.
    """
    canvas = create_canvas()
    print(f"  Canvas: {canvas.width}x{canvas.height}")

    canvas = draw_background(canvas, background, config.grayscale, config.opacity)
    print(f"  Background: {background.width}x{background.height} "
          f"grayscale={config.grayscale} opacity={config.opacity}")

    canvas, lines = draw_title(canvas, "\n".join(title_lines), font, config.border_padding)
    print(f"  Title: {len(lines)} line(s)")

    canvas, positions = draw_tag_badges(
        canvas, tag_icons,
        config.tag_badge_height, config.tag_badge_margin, config.border_padding,
    )
    for x, y in positions:
        print(f"    Tag badge at ({x},{y})")

    canvas = draw_author_badge(canvas, author_icon, config.author_badge_height)
    print(f"  Author badge at {AUTHOR_BADGE_POSITION}")

    return canvas.convert("RGB")


def save_jpeg(image: Image.Image, path: Path, quality: int = 75) -> Path:
    """
    Encode to JPEG, overwriting `path`.

    The image is written to a temporary file next to `path` and moved into
    place only once encoding succeeded; on failure the old file is kept.
    """
    path = Path(path)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.stem}_", suffix=".tmp", delete=False
        ) as f:
            tmp_name = f.name
            image.convert("RGB").save(f, "JPEG", quality=quality)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise EncodingFailure(f"Could not write thumbnail {path}: {e}") from e
    return path
