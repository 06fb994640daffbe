"""Shared test fixtures."""

import shutil
from pathlib import Path

import pytest

from tumblr_archive.media import DirectoryIndex, MediaResolver

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Files TumblThree would have written next to each fixture's metadata.
# tumblr_set2 was never downloaded.
LEGACY_MEDIA = [
    "tumblr_abc123_540.jpg",
    "tumblr_set1_1280.jpg",
    "tumblr_vid001.mp4",
    "tumblr_inline_q1_500.jpg",
]
JSON_MEDIA = [
    "tumblr_abc123_1280.jpg",
    "tumblr_set1_1280.jpg",
    "tumblr_vid001.mp4",
    "tumblr_inline_q1_1280.jpg",
]


def _make_blog(root: Path, fixture: str, name: str, media: list[str]) -> Path:
    blog = root / name
    shutil.copytree(FIXTURES_DIR / fixture, blog)
    for filename in media:
        (blog / filename).write_bytes(b"")
    return blog


@pytest.fixture
def archive_root(tmp_path) -> Path:
    """An archive with a legacy blog, a JSON blog and TumblThree's Index folder."""
    root = tmp_path / "archive"
    root.mkdir()
    _make_blog(root, "legacy_blog", "legacyblog", LEGACY_MEDIA)
    _make_blog(root, "json_blog", "jsonblog", JSON_MEDIA)
    (root / "Index").mkdir()
    (root / "Index" / "images.txt").write_text("", encoding="utf-8")
    (root / "notablog").mkdir()
    (root / "notablog" / "readme.md").write_text("hi", encoding="utf-8")
    return root


@pytest.fixture
def legacy_blog(archive_root) -> Path:
    return archive_root / "legacyblog"


@pytest.fixture
def json_blog(archive_root) -> Path:
    return archive_root / "jsonblog"


@pytest.fixture
def blog_path(tmp_path) -> Path:
    """A directory path for resolvers built on a hand-written index."""
    return tmp_path / "blog"


@pytest.fixture
def resolver_for(blog_path):
    """Build a MediaResolver over the given filenames, in listing order."""

    def factory(*filenames: str, **kwargs) -> MediaResolver:
        index = DirectoryIndex(path=blog_path, filenames=tuple(filenames))
        return MediaResolver(index, **kwargs)

    return factory
