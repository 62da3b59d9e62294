#!/usr/bin/env python3
"""
Generate a social media thumbnail for a blog post.

Usage:
    python generate_thumbnail.py --image posts/my-post/background.jpg
    python generate_thumbnail.py -i background.jpg -t "Reusable Build Components with" -t "Default Interface Implementations"
    python generate_thumbnail.py -i background.jpg --tags csharp nuke --layout classic

Configuration: data/thumbnail_config.json
Icons: <tag>.png and <author>.png next to the background image
Output: thumbnail.jpeg next to the background image
"""

import argparse
import sys
from pathlib import Path

from src.thumbnail_engine.config import LAYOUT_PRESETS, THUMBNAIL_CONFIG_PATH, build_config
from src.thumbnail_engine.errors import ThumbnailError
from src.thumbnail_generator import generate_thumbnail


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate a blog post thumbnail (1200x675 JPEG)"
    )
    parser.add_argument(
        "--image", "-i",
        type=str,
        default=None,
        help="Path to the background image (default: from config)"
    )
    parser.add_argument(
        "--title", "-t",
        type=str,
        action="append",
        default=None,
        help="Title line; repeat for several lines (default: from config)"
    )
    parser.add_argument(
        "--tags",
        type=str,
        nargs="*",
        default=None,
        help="Tag ids, each with a <tag>.png next to the background"
    )
    parser.add_argument(
        "--author",
        type=str,
        default=None,
        help="Author id, with an <author>.png next to the background (default: me)"
    )
    parser.add_argument(
        "--layout",
        choices=sorted(LAYOUT_PRESETS),
        default=None,
        help="Badge size preset (default: from config, else 'default')"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=str(THUMBNAIL_CONFIG_PATH),
        help="JSON config file"
    )
    parser.add_argument("--font-size", type=int, default=None, help="Title font size (default: 70)")
    parser.add_argument("--grayscale", type=float, default=None, help="Background grayscale 0-1 (default: 0.8)")
    parser.add_argument("--opacity", type=float, default=None, help="Background opacity 0-1 (default: 0.7)")
    parser.add_argument(
        "--skip-font-download",
        action="store_true",
        help="Use already downloaded fonts only"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    # A single --title may carry its own line breaks ("first\nsecond")
    title = None
    if args.title:
        title = [line for t in args.title for line in t.replace("\\n", "\n").split("\n")]

    try:
        config = build_config(
            layout=args.layout,
            config_path=Path(args.config),
            background_path=Path(args.image) if args.image else None,
            title=title,
            tags=args.tags,
            author=args.author,
            font_size=args.font_size,
            grayscale=args.grayscale,
            opacity=args.opacity,
        )
        generate_thumbnail(config, skip_font_download=args.skip_font_download)
    except ThumbnailError as e:
        print(f"\nError: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
