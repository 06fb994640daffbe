"""Load every post in a TumblThree blog folder.

An archive root holds one folder per downloaded blog (plus TumblThree's own
"Index" folder). Each blog folder holds up to four metadata files, one per
MetadataKind, next to the downloaded media.
"""

import json
import logging
from pathlib import Path

from .json_parser import build_json_post
from .media import DirectoryIndex, MediaResolver, TrimRule
from .models import MetadataKind, Post, PostParseError
from .text_parser import iter_records, parse_text_post

logger = logging.getLogger(__name__)

INDEX_DIR_NAME = "Index"


def is_json(content: str) -> bool:
    return content.startswith("[")


def parse_posts(
    content: str,
    kind: MetadataKind,
    resolver: MediaResolver,
    strict: bool = False,
) -> list[Post]:
    """Parse the contents of one metadata file.

    Records that fail to parse are logged and skipped, or re-raised when
    strict is set. A file that is not a valid JSON array fails as a whole.
    """
    if is_json(content):
        try:
            records = json.loads(content)
        except json.JSONDecodeError as e:
            raise PostParseError(f"invalid JSON: {e}", label=kind.file_name) from e

        def build(record):
            return build_json_post(record, kind, resolver)

    else:
        records = iter_records(content)

        def build(record):
            return parse_text_post(record, kind, resolver)

    posts = []
    for record in records:
        try:
            posts.append(build(record))
        except PostParseError as e:
            if strict:
                raise
            logger.warning("Skipping malformed record in %s: %s", kind.file_name, e)
    return posts


def load_posts(
    blog_dir: Path,
    kind: MetadataKind,
    resolver: MediaResolver,
    strict: bool = False,
) -> list[Post]:
    """Load the posts of one metadata kind, or nothing if its file is absent."""
    path = Path(blog_dir) / kind.file_name
    if not path.is_file():
        return []
    content = path.read_text(encoding="utf-8-sig")
    posts = parse_posts(content, kind, resolver, strict=strict)
    logger.info("Loaded %d posts from %s", len(posts), path)
    return posts


def load_blog(
    blog_dir: Path,
    image_trim: TrimRule = TrimRule.SIZE_SUFFIX,
    media_trim: TrimRule = TrimRule.EXTENSION,
    strict: bool = False,
) -> list[Post]:
    """Load all posts of a blog folder, sorted by post id."""
    blog_dir = Path(blog_dir)
    if not blog_dir.is_dir():
        raise FileNotFoundError(f"Blog directory not found: {blog_dir}")

    resolver = MediaResolver(
        DirectoryIndex.from_path(blog_dir),
        image_trim=image_trim,
        media_trim=media_trim,
    )
    posts: list[Post] = []
    for kind in MetadataKind:
        posts.extend(load_posts(blog_dir, kind, resolver, strict=strict))
    posts.sort(key=lambda p: p.id)
    return posts


def is_blog_dir(path: Path) -> bool:
    return path.is_dir() and any((path / k.file_name).exists() for k in MetadataKind)


def list_blogs(root: Path) -> list[str]:
    """Names of the folders under root that contain any metadata file."""
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Archive directory not found: {root}")
    return sorted(
        p.name for p in root.iterdir() if p.name != INDEX_DIR_NAME and is_blog_dir(p)
    )
