import pytest
from PIL import Image

from src.thumbnail_engine.processor import (
    desaturate, prepare_background, resize_cover, vignette, with_opacity,
)

PIXEL = (200, 80, 30)


def spread(px):
    """Distance from gray: 0 means fully desaturated."""
    return max(px[:3]) - min(px[:3])


def test_desaturate_zero_keeps_colors(background):
    result = desaturate(background, 0.0)
    assert result.tobytes() == background.convert("RGB").tobytes()


def test_desaturate_one_is_gray(background):
    result = desaturate(background, 1.0)
    for r, g, b in result.getdata():
        assert r == g == b


def test_desaturate_is_monotonic():
    img = Image.new("RGB", (4, 4), PIXEL)
    spreads = [spread(desaturate(img, a).getpixel((0, 0))) for a in (0, 0.25, 0.5, 0.75, 1.0)]
    assert spreads == sorted(spreads, reverse=True)
    assert spreads[0] == spread(PIXEL)
    assert spreads[-1] == 0


def test_desaturate_keeps_alpha():
    img = Image.new("RGBA", (4, 4), (*PIXEL, 128))
    result = desaturate(img, 0.8)
    assert result.mode == "RGBA"
    assert result.getpixel((0, 0))[3] == 128


def test_vignette_darkens_edges_not_center():
    img = Image.new("RGB", (200, 100), (255, 255, 255))
    result = vignette(img, 80, 40)
    assert result.getpixel((100, 50))[:3] == (255, 255, 255)
    corner = result.getpixel((0, 0))
    assert corner[:3] == (0, 0, 0)
    # Halfway to the edge is in between
    mid = result.getpixel((140, 50))
    assert 0 < mid[0] < 255


def test_vignette_strength_scales_darkening():
    img = Image.new("RGB", (200, 100), (255, 255, 255))
    light = vignette(img, 80, 40, strength=0.5).getpixel((0, 0))[0]
    full = vignette(img, 80, 40, strength=1.0).getpixel((0, 0))[0]
    assert full < light < 255


def test_with_opacity_scales_alpha():
    img = Image.new("RGB", (4, 4), PIXEL)
    assert with_opacity(img, 1.0).getpixel((0, 0))[3] == 255
    assert with_opacity(img, 0.5).getpixel((0, 0))[3] == 127
    assert with_opacity(img, 0.0).getpixel((0, 0))[3] == 0


def test_resize_cover_uses_cover_fit():
    img = Image.new("RGB", (2400, 1000))
    assert resize_cover(img, (1200, 675)).size == (1620, 675)


@pytest.mark.parametrize("size", [(2400, 1000), (800, 1600), (1200, 675)])
def test_prepare_background_covers_canvas(size):
    img = Image.new("RGB", size, PIXEL)
    bg = prepare_background(img, (1200, 675), grayscale=0.8, radii=(960, 472.5))
    assert bg.mode == "RGBA"
    assert bg.width >= 1200 and bg.height >= 675
