"""
Thumbnail Generator - Social media thumbnails for blog posts.

Composites a 1200x675 card: the post's background photo (desaturated,
vignetted, dimmed), the title in a bold display font, tag badges along the
top right and the author badge at the top left.

Pipeline:
  1. Download font archives (once) and install the .ttf files
  2. Resolve background, tag icons and author icon
  3. Compose the canvas
  4. Save thumbnail.jpeg next to the background image

Fonts are downloaded into .tmp/fonts (override with THUMBNAIL_FONTS_DIR).
"""

from pathlib import Path
from typing import Optional

from .thumbnail_engine.compositor import compose, save_jpeg
from .thumbnail_engine.config import ThumbnailConfig, build_config
from .thumbnail_engine.fonts import FontCollection, download_fonts, install_fonts
from .thumbnail_engine.layout import THUMB_HEIGHT, THUMB_WIDTH
from .thumbnail_engine.workspace import (
    FONTS_DIR, author_icon_path, load_image, tag_icon_paths, thumbnail_output_path,
)


def prepare_fonts(config: ThumbnailConfig, skip_download: bool = False) -> FontCollection:
    """Make sure the font archives are on disk and installed."""
    font_dir = config.fonts_dir or FONTS_DIR
    if not skip_download:
        download_fonts(config.font_urls, font_dir)
    return install_fonts(font_dir)


def generate_thumbnail(
    config: ThumbnailConfig,
    fonts: Optional[FontCollection] = None,
    skip_font_download: bool = False,
) -> Path:
    """
    Generate the thumbnail for one blog post.

    Fonts must be installed before the title can be drawn, so they are
    prepared first unless a ready collection is passed in.

    Returns:
        Path to the written thumbnail.jpeg
    """
    print("=" * 50)
    print("THUMBNAIL GENERATOR")
    print("=" * 50)

    background_path = config.background_path
    print(f"Background: {background_path}")
    print(f"Title: {config.title_text!r}")
    print(f"Tags: {', '.join(config.tags) or '-'}")
    print(f"Author: {config.author}")

    # 1. Fonts
    if fonts is None:
        fonts = prepare_fonts(config, skip_download=skip_font_download)
    font = fonts.create_font(config.font_family, config.font_size)

    # 2. Assets (all resolved up front so nothing is drawn for a broken run)
    background = load_image(background_path)
    tag_icons = [load_image(p) for p in tag_icon_paths(background_path, list(config.tags))]
    author_icon = load_image(author_icon_path(background_path, config.author))

    # 3. Compose
    thumb = compose(background, list(config.title), tag_icons, author_icon, config, font)

    # 4. Save
    output_path = save_jpeg(thumb, thumbnail_output_path(background_path), config.jpeg_quality)

    print(f"\nThumbnail saved: {output_path}")
    print(f"Size: {THUMB_WIDTH}x{THUMB_HEIGHT}")
    print("=" * 50)

    return output_path


def main():
    """Entry point using only data/thumbnail_config.json."""
    generate_thumbnail(build_config())


if __name__ == "__main__":
    main()
