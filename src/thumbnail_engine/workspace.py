"""
Workspace - Where thumbnail inputs and outputs live on disk.

A blog post folder holds the background photo together with one PNG per
tag (csharp.png, nuke.png, ...) and the author icon (me.png). The
thumbnail is written back into that same folder.
"""

from pathlib import Path
from typing import List

from PIL import Image, UnidentifiedImageError

from .errors import MissingAsset

BASE_DIR = Path(__file__).parent.parent.parent
TEMP_DIR = BASE_DIR / ".tmp"
FONTS_DIR = TEMP_DIR / "fonts"

OUTPUT_NAME = "thumbnail.jpeg"
ICON_EXT = ".png"


def resolve_asset_path(asset_id: str, asset_dir: Path) -> Path:
    """Resolve a tag or author id to its icon next to the background."""
    path = asset_dir / f"{asset_id}{ICON_EXT}"
    if not path.is_file():
        raise MissingAsset(f"Asset not found: {asset_id} (expected {path})")
    return path


def tag_icon_paths(background: Path, tags: List[str]) -> List[Path]:
    return [resolve_asset_path(tag, background.parent) for tag in tags]


def author_icon_path(background: Path, author: str) -> Path:
    return resolve_asset_path(author, background.parent)


def thumbnail_output_path(background: Path) -> Path:
    """thumbnail.jpeg next to the background image."""
    return background.parent / OUTPUT_NAME


def load_image(path: Path) -> Image.Image:
    """
    Open an image and read all of its pixels.

    The file handle is released before returning, so the caller never holds
    an open input while drawing.
    """
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except (FileNotFoundError, IsADirectoryError) as e:
        raise MissingAsset(f"Image not found: {path}") from e
    except (UnidentifiedImageError, OSError) as e:
        raise MissingAsset(f"Could not read image {path}: {e}") from e
