"""Resolve media references from metadata to files on disk.

TumblThree records the remote URL (or its own filename) of every photo and
video it downloads, but the file it actually writes does not always match:
size suffixes differ (_540.jpg vs _1280.jpg), extensions get truncated and
duplicates are renamed. Resolution therefore searches the blog directory for
the first file starting with a trimmed form of the reference.

Lookups are a linear scan over the directory snapshot, O(n) per reference.
When several files share a prefix the first one in filesystem enumeration
order wins.
"""

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .models import UNRESOLVED, MediaRef

logger = logging.getLogger(__name__)


class TrimRule(enum.Enum):
    """How a reference's filename is shortened into a search prefix."""

    NONE = "none"
    EXTENSION = "extension"  # keep up to and including the last "."
    SIZE_SUFFIX = "size_suffix"  # keep up to and including the last "_"


@dataclass(frozen=True)
class DirectoryIndex:
    """Snapshot of the filenames in one blog directory."""

    path: Path
    filenames: tuple[str, ...] = ()

    @classmethod
    def from_path(cls, path: Path) -> "DirectoryIndex":
        path = Path(path).resolve()
        with os.scandir(path) as entries:
            names = tuple(e.name for e in entries if e.is_file())
        logger.debug("Indexed %d files in %s", len(names), path)
        return cls(path=path, filenames=names)

    def find_prefix(self, prefix: str) -> str | None:
        """Return the first filename starting with prefix, in listing order."""
        for name in self.filenames:
            if name.startswith(prefix):
                return name
        return None


def file_url(directory: Path, filename: str) -> str:
    """Format a file in directory as a file:/// URL with forward slashes."""
    path = str(Path(directory) / filename)
    path = path.replace("\\\\?\\UNC\\", "//")
    path = path.replace("\\\\?\\", "")
    path = path.replace("\\", "/")
    # POSIX paths are already rooted at "/"
    if path.startswith("/") and not path.startswith("//"):
        path = path[1:]
    return f"file:///{path}"


def search_key(reference: str, rule: TrimRule) -> str:
    """Filename component of reference, trimmed according to rule."""
    key = reference[reference.rfind("/") + 1 :]
    if rule is TrimRule.EXTENSION:
        idx = key.rfind(".")
    elif rule is TrimRule.SIZE_SUFFIX:
        idx = key.rfind("_")
    else:
        idx = -1
    if idx >= 0:
        key = key[: idx + 1]
    return key


class MediaResolver:
    """Match nominal media references against a DirectoryIndex.

    image_trim applies to photo URLs from the legacy text format, media_trim
    to everything else (downloaded media file lists, video files).
    """

    def __init__(
        self,
        index: DirectoryIndex,
        image_trim: TrimRule = TrimRule.SIZE_SUFFIX,
        media_trim: TrimRule = TrimRule.EXTENSION,
    ):
        self.index = index
        self.image_trim = image_trim
        self.media_trim = media_trim

    def resolve(self, reference: str, rule: TrimRule | None = None) -> MediaRef:
        """Resolve reference to a local file URL, or UNRESOLVED.

        Never raises; mismatches are reported through the logger.
        """
        if rule is None:
            rule = self.media_trim
        nominal = reference[reference.rfind("/") + 1 :]
        prefix = search_key(reference, rule)
        if not prefix:
            logger.warning("Unable to resolve empty media reference %r", reference)
            return UNRESOLVED

        matched = self.index.find_prefix(prefix)
        if matched is None:
            logger.warning(
                "Unable to find file matching %s (searched for %s*)", reference, prefix
            )
            return UNRESOLVED

        if matched != nominal:
            logger.info("Rewriting file %s to %s", nominal, matched)
        return MediaRef(url=file_url(self.index.path, matched))

    def resolve_image(self, reference: str) -> MediaRef:
        return self.resolve(reference, self.image_trim)

    def resolve_all(self, references: list[str]) -> list[MediaRef]:
        return [self.resolve(ref) for ref in references]
