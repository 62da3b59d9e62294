"""
Fonts - Download font archives and install them into a queryable collection.

Archives are fetched once into the font directory (.tmp/fonts by default),
unzipped next to themselves, and every .ttf inside is registered under its
family name as reported by FreeType.
"""

from pathlib import Path
from typing import Dict, Iterable, List
from urllib.parse import urlparse
from zipfile import BadZipFile, ZipFile

import requests
from PIL import ImageFont

from .errors import MissingAsset

DOWNLOAD_TIMEOUT = 60


class FontCollection:
    """Installed font files, looked up by exact family name."""

    def __init__(self):
        self._families: Dict[str, Path] = {}

    @property
    def families(self) -> List[str]:
        return sorted(self._families)

    def install(self, path: Path) -> List[str]:
        """
        Register a font file. Returns the family names it was added under.

        A file is reachable by its plain family ("Roboto") and by family plus
        style ("Roboto Black"); the first file installed for a name wins.
        """
        try:
            family, style = ImageFont.truetype(str(path), 12).getname()
        except OSError as e:
            raise MissingAsset(f"Could not load font {path}: {e}") from e

        names = [family]
        if style and style != "Regular":
            names.append(f"{family} {style}")

        added = []
        for name in names:
            if name not in self._families:
                self._families[name] = Path(path)
                added.append(name)
        return added

    def find(self, family: str) -> Path:
        if family not in self._families:
            raise MissingAsset(
                f"Font family '{family}' not installed. "
                f"Available: {', '.join(self.families) or 'none'}"
            )
        return self._families[family]

    def create_font(self, family: str, size: int) -> ImageFont.FreeTypeFont:
        return ImageFont.truetype(str(self.find(family)), size)


def archive_name(url: str) -> str:
    """Last path segment of the download URL."""
    return Path(urlparse(url).path).name


def font_archives(font_dir: Path) -> List[Path]:
    if not font_dir.exists():
        return []
    return sorted(p for p in font_dir.glob("*.*") if p.is_file() and p.suffix != ".part")


def download_file(url: str, dest: Path) -> Path:
    """
    Stream `url` into `dest`. The data goes to `<dest>.part` first, so an
    interrupted download never leaves a half archive under the real name.
    """
    part = dest.with_name(dest.name + ".part")
    try:
        response = requests.get(url, timeout=DOWNLOAD_TIMEOUT, stream=True)
        response.raise_for_status()
        with open(part, "wb") as f:
            for chunk in response.iter_content(chunk_size=65536):
                f.write(chunk)
        part.replace(dest)
    except (requests.RequestException, OSError) as e:
        part.unlink(missing_ok=True)
        raise MissingAsset(f"Failed to download {url}: {e}") from e
    return dest


def uncompress(archive: Path, dest_dir: Path) -> None:
    try:
        with ZipFile(archive) as zf:
            zf.extractall(dest_dir)
    except BadZipFile as e:
        raise MissingAsset(f"Font archive is not a zip file: {archive}") from e


def download_fonts(urls: Iterable[str], font_dir: Path) -> bool:
    """
    Fetch and unpack font archives unless they are already there.

    Skipped when the directory already holds one archive per URL.
    Returns True when a download happened.
    """
    urls = list(urls)
    if len(urls) == len(font_archives(font_dir)):
        print(f"  Fonts already downloaded ({len(urls)} archive(s))")
        return False

    font_dir.mkdir(parents=True, exist_ok=True)
    for url in urls:
        dest = font_dir / archive_name(url)
        print(f"  Downloading {url}")
        download_file(url, dest)

    for archive in font_archives(font_dir):
        uncompress(archive, font_dir / archive.stem)
    return True


def font_files(font_dir: Path) -> List[Path]:
    """Every non-hidden .ttf below the font directory."""
    return sorted(font_dir.glob("**/[!.]*.ttf"))


def install_fonts(font_dir: Path, collection: FontCollection = None) -> FontCollection:
    """Install every .ttf found under font_dir into a collection."""
    collection = collection or FontCollection()
    for path in font_files(font_dir):
        collection.install(path)

    for family in collection.families:
        print(f"  Installed font '{family}'")
    return collection
