from pathlib import Path

import pytest
from PIL import Image, ImageDraw, ImageFont

from src.thumbnail_engine.config import ThumbnailConfig

RED = (220, 30, 30)
GREEN = (30, 200, 60)
BLUE = (30, 60, 220)


class StubFonts:
    """Stands in for an installed FontCollection using Pillow's bundled font."""

    def __init__(self):
        self.requested = []

    def create_font(self, family, size):
        self.requested.append((family, size))
        return ImageFont.load_default(size=size)


def make_background(size=(2400, 1000)) -> Image.Image:
    """Colorful test photo: horizontal gradient with a bright block."""
    img = Image.new("RGB", size, (0, 0, 0))
    draw = ImageDraw.Draw(img)
    w, h = size
    for x in range(0, w, 8):
        draw.rectangle([x, 0, x + 7, h], fill=(x * 255 // w, 120, 255 - x * 255 // w))
    draw.rectangle([w // 3, h // 3, w // 2, h // 2], fill=(250, 200, 40))
    return img


@pytest.fixture
def font():
    return ImageFont.load_default(size=70)


@pytest.fixture
def stub_fonts():
    return StubFonts()


@pytest.fixture
def background():
    return make_background()


@pytest.fixture
def post_dir(tmp_path) -> Path:
    """Blog post folder with background, tag icons and author icon."""
    make_background().save(tmp_path / "background.jpg", "JPEG")
    Image.new("RGBA", (200, 100), (*RED, 255)).save(tmp_path / "csharp.png")
    Image.new("RGBA", (100, 100), (*GREEN, 255)).save(tmp_path / "nuke.png")
    Image.new("RGBA", (300, 150), (*BLUE, 255)).save(tmp_path / "python.png")
    Image.new("RGBA", (100, 100), (*RED, 255)).save(tmp_path / "me.png")
    return tmp_path


@pytest.fixture
def config(post_dir) -> ThumbnailConfig:
    return ThumbnailConfig(
        background_path=post_dir / "background.jpg",
        title=["Hello", "World"],
        tags=[],
    )
