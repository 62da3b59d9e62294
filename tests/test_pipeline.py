import json

import pytest
from PIL import Image

import generate_thumbnail as cli
from src import thumbnail_generator
from src.thumbnail_engine.config import ThumbnailConfig
from src.thumbnail_engine.errors import MissingAsset
from src.thumbnail_generator import generate_thumbnail, prepare_fonts


def test_end_to_end(config, stub_fonts, post_dir):
    output = generate_thumbnail(config, fonts=stub_fonts)

    assert output == post_dir / "thumbnail.jpeg"
    assert stub_fonts.requested == [("Roboto Black", 70)]
    with Image.open(output) as img:
        assert img.format == "JPEG"
        assert img.size == (1200, 675)
        # me.png is solid red, 120px badge at (60, 60)
        r, g, b = img.convert("RGB").getpixel((120, 120))
        assert r > 180 and g < 80 and b < 80


def test_end_to_end_with_tags(post_dir, stub_fonts):
    config = ThumbnailConfig(
        background_path=post_dir / "background.jpg",
        title="Reusable Build Components with\nDefault Interface Implementations",
        tags=["csharp", "nuke"],
    )
    output = generate_thumbnail(config, fonts=stub_fonts)
    with Image.open(output) as img:
        rgb = img.convert("RGB")
        # csharp (red, 160x80) flush right, nuke (green, 80x80) left of it
        r, g, b = rgb.getpixel((1060, 100))
        assert r > 180 and g < 80
        r, g, b = rgb.getpixel((900, 100))
        assert g > 150 and r < 80


def test_rerun_overwrites(config, stub_fonts, post_dir):
    (post_dir / "thumbnail.jpeg").write_bytes(b"stale")
    output = generate_thumbnail(config, fonts=stub_fonts)
    with Image.open(output) as img:
        assert img.size == (1200, 675)


def test_missing_tag_writes_nothing(post_dir, stub_fonts):
    config = ThumbnailConfig(
        background_path=post_dir / "background.jpg", title=["Hello"], tags=["csharp", "rust"],
    )
    with pytest.raises(MissingAsset, match="rust"):
        generate_thumbnail(config, fonts=stub_fonts)
    assert not (post_dir / "thumbnail.jpeg").exists()


def test_missing_background(tmp_path, stub_fonts):
    config = ThumbnailConfig(background_path=tmp_path / "nope.jpg", title=["Hello"])
    with pytest.raises(MissingAsset):
        generate_thumbnail(config, fonts=stub_fonts)


def test_prepare_fonts_order(tmp_path, monkeypatch, config):
    calls = []
    monkeypatch.setattr(thumbnail_generator, "download_fonts", lambda urls, d: calls.append(("download", d)))
    monkeypatch.setattr(thumbnail_generator, "install_fonts", lambda d: calls.append(("install", d)) or "fonts")

    config = config.with_overrides(fonts_dir=tmp_path / "fonts")
    assert prepare_fonts(config) == "fonts"
    assert calls == [("download", tmp_path / "fonts"), ("install", tmp_path / "fonts")]

    calls.clear()
    prepare_fonts(config, skip_download=True)
    assert calls == [("install", tmp_path / "fonts")]


def test_cli_builds_config(post_dir, tmp_path, monkeypatch):
    captured = {}

    def fake_generate(config, skip_font_download=False):
        captured["config"] = config
        captured["skip"] = skip_font_download
        return post_dir / "thumbnail.jpeg"

    monkeypatch.setattr(cli, "generate_thumbnail", fake_generate)
    status = cli.main([
        "--config", str(tmp_path / "none.json"),
        "-i", str(post_dir / "background.jpg"),
        "-t", "Hello\\nWorld",
        "--tags", "csharp", "nuke",
        "--layout", "classic",
        "--opacity", "0.5",
        "--skip-font-download",
    ])

    assert status == 0
    config = captured["config"]
    assert config.title == ("Hello", "World")
    assert config.tags == ("csharp", "nuke")
    assert config.tag_badge_height == 100
    assert config.opacity == 0.5
    assert captured["skip"] is True


def test_cli_repeated_title(post_dir, tmp_path, monkeypatch):
    captured = {}
    monkeypatch.setattr(cli, "generate_thumbnail", lambda config, **kw: captured.setdefault("config", config))
    cli.main(["--config", str(tmp_path / "none.json"), "-i", str(post_dir / "background.jpg"),
              "-t", "First line", "-t", "Second line"])
    assert captured["config"].title == ("First line", "Second line")


def test_cli_uses_config_file(post_dir, tmp_path, monkeypatch):
    path = tmp_path / "thumbnail_config.json"
    path.write_text(json.dumps({"thumbnail": {
        "background_path": str(post_dir / "background.jpg"),
        "title": ["From", "File"],
        "grayscale": 0.3,
    }}), encoding="utf-8")
    captured = {}
    monkeypatch.setattr(cli, "generate_thumbnail", lambda config, **kw: captured.setdefault("config", config))

    assert cli.main(["--config", str(path)]) == 0
    assert captured["config"].title == ("From", "File")
    assert captured["config"].grayscale == 0.3


def test_cli_reports_invalid_configuration(tmp_path, capsys):
    status = cli.main(["--config", str(tmp_path / "none.json"), "-i", "bg.jpg"])
    assert status == 1
    assert "Error: Title is required" in capsys.readouterr().out


def test_cli_reports_bad_opacity(tmp_path, capsys):
    status = cli.main(["--config", str(tmp_path / "none.json"), "-i", "bg.jpg", "-t", "Hi", "--opacity", "1.5"])
    assert status == 1
    assert "opacity must be within [0, 1]" in capsys.readouterr().out


@pytest.mark.parametrize("settings,message", [
    ({"opacity": "0.7"}, "opacity must be a number"),
    ({"title": ["Hello", 42]}, "title entries must be strings"),
    ({"tags": 3}, "tags must be a list of strings"),
    ({"font_size": "big"}, "font_size must be an integer"),
])
def test_cli_reports_mistyped_config(post_dir, tmp_path, capsys, settings, message):
    path = tmp_path / "thumbnail_config.json"
    values = {"background_path": str(post_dir / "background.jpg"), "title": ["Hello"]}
    values.update(settings)
    path.write_text(json.dumps({"thumbnail": values}), encoding="utf-8")

    assert cli.main(["--config", str(path)]) == 1
    assert message in capsys.readouterr().out
