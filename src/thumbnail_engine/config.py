"""
Config - Layout parameters for one thumbnail run.

Settings are merged from (lowest to highest priority):
  defaults -> layout preset -> data/thumbnail_config.json -> .env -> CLI

The result is a frozen ThumbnailConfig, validated once on construction.
"""

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from .errors import InvalidConfiguration

load_dotenv()

BASE_DIR = Path(__file__).parent.parent.parent
DATA_DIR = BASE_DIR / "data"
THUMBNAIL_CONFIG_PATH = DATA_DIR / "thumbnail_config.json"

FONT_DOWNLOAD_URLS = (
    "https://github.com/googlefonts/roboto/releases/latest/download/roboto-unhinted.zip",
    "https://github.com/JetBrains/JetBrainsMono/releases/download/v1.0.6/JetBrainsMono-1.0.6.zip",
)

# Badge sizes differ between the current and the earlier ("classic") layout
LAYOUT_PRESETS = {
    "default": {
        "tag_badge_height": 80,
        "tag_badge_margin": 40,
        "author_badge_height": 120,
    },
    "classic": {
        "tag_badge_height": 100,
        "tag_badge_margin": 40,
        "author_badge_height": 100,
    },
}


def _str_tuple(name: str, value, sep: Optional[str]) -> Tuple[str, ...]:
    """
    A list of strings as a tuple. A bare string is split on `sep`
    (whitespace when None), so "csharp nuke" means two tags.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(sep)
    if not isinstance(value, (list, tuple)):
        raise InvalidConfiguration(f"{name} must be a list of strings, got {value!r}")
    for item in value:
        if not isinstance(item, str):
            raise InvalidConfiguration(f"{name} entries must be strings, got {item!r}")
    return tuple(value)


def _optional_path(name: str, value) -> Optional[Path]:
    if value is None:
        return None
    if not isinstance(value, (str, os.PathLike)):
        raise InvalidConfiguration(f"{name} must be a path, got {value!r}")
    return Path(value)


def _number(name: str, value, types: tuple):
    # bool is an int subclass, but "opacity": true is a typo, not a number
    if isinstance(value, bool) or not isinstance(value, types):
        kind = "an integer" if types == (int,) else "a number"
        raise InvalidConfiguration(f"{name} must be {kind}, got {value!r}")
    return value


@dataclass(frozen=True)
class ThumbnailConfig:
    background_path: Optional[Path] = None
    title: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    author: str = "me"
    font_family: str = "Roboto Black"
    font_size: int = 70
    grayscale: float = 0.8
    opacity: float = 0.7
    tag_badge_height: int = 80
    tag_badge_margin: int = 40
    author_badge_height: int = 120
    border_padding: int = 60
    jpeg_quality: int = 75
    font_urls: Tuple[str, ...] = field(default=FONT_DOWNLOAD_URLS)
    fonts_dir: Optional[Path] = None

    def __post_init__(self):
        # Normalise loose input (JSON lists, CLI strings) before validating
        object.__setattr__(self, "title", _str_tuple("title", self.title, "\n"))
        object.__setattr__(self, "tags", _str_tuple("tags", self.tags, None))
        object.__setattr__(self, "font_urls", _str_tuple("font_urls", self.font_urls, None))
        object.__setattr__(self, "background_path", _optional_path("background_path", self.background_path))
        object.__setattr__(self, "fonts_dir", _optional_path("fonts_dir", self.fonts_dir))
        self.validate()

    @property
    def title_text(self) -> str:
        """Title with explicit line breaks preserved."""
        return "\n".join(self.title)

    def validate(self) -> None:
        """Raise InvalidConfiguration for absent, mistyped or out-of-range settings."""
        if self.background_path is None or not str(self.background_path):
            raise InvalidConfiguration("Background image path is required")
        if not any(line.strip() for line in self.title):
            raise InvalidConfiguration("Title is required")
        for name in ("author", "font_family"):
            if not isinstance(getattr(self, name), str):
                raise InvalidConfiguration(f"{name} must be a string, got {getattr(self, name)!r}")

        for name in ("grayscale", "opacity"):
            value = _number(name, getattr(self, name), (int, float))
            if not 0.0 <= value <= 1.0:
                raise InvalidConfiguration(f"{name} must be within [0, 1], got {value}")

        for name in ("font_size", "tag_badge_height", "author_badge_height"):
            value = _number(name, getattr(self, name), (int,))
            if value <= 0:
                raise InvalidConfiguration(f"{name} must be positive, got {value}")

        for name in ("tag_badge_margin", "border_padding"):
            value = _number(name, getattr(self, name), (int,))
            if value < 0:
                raise InvalidConfiguration(f"{name} must not be negative, got {value}")

        quality = _number("jpeg_quality", self.jpeg_quality, (int,))
        if not 1 <= quality <= 95:
            raise InvalidConfiguration(f"jpeg_quality must be within [1, 95], got {quality}")

    def with_overrides(self, **overrides) -> "ThumbnailConfig":
        """Copy with non-None overrides applied (and re-validated)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def load_thumbnail_config(path: Path = THUMBNAIL_CONFIG_PATH) -> dict:
    """Load the "thumbnail" section of the JSON config. Missing file -> {}."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"Invalid JSON in {path}: {e}") from e
    section = data.get("thumbnail", data) if isinstance(data, dict) else data
    if not isinstance(section, dict):
        raise InvalidConfiguration(f"{path} must hold a JSON object of thumbnail settings")
    return section


def build_config(
    layout: Optional[str] = None,
    config_path: Path = THUMBNAIL_CONFIG_PATH,
    **overrides,
) -> ThumbnailConfig:
    """
    Merge every configuration source into one validated ThumbnailConfig.

    `layout` picks a preset (falls back to the config file's "layout" key,
    then "default"). Keyword overrides win over everything else; None
    values are ignored so unset CLI flags do not clobber the file.
    """
    file_cfg = load_thumbnail_config(config_path)
    layout = layout or file_cfg.get("layout", "default")
    if not isinstance(layout, str) or layout not in LAYOUT_PRESETS:
        raise InvalidConfiguration(
            f"Unknown layout '{layout}'. Available: {', '.join(LAYOUT_PRESETS)}"
        )

    known = {f.name for f in fields(ThumbnailConfig)}
    unknown = set(file_cfg) - known - {"layout"}
    if unknown:
        print(f"  WARNING: Ignoring unknown config keys: {', '.join(sorted(unknown))}")

    values = dict(LAYOUT_PRESETS[layout])
    values.update({k: v for k, v in file_cfg.items() if k in known})

    fonts_dir = os.getenv("THUMBNAIL_FONTS_DIR")
    if fonts_dir:
        values["fonts_dir"] = fonts_dir

    values.update({k: v for k, v in overrides.items() if v is not None})
    return ThumbnailConfig(**values)
