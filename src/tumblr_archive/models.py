"""Data models for posts parsed from TumblThree metadata files."""

import enum
from dataclasses import dataclass, field

# Serialized form of a media reference that matched no file on disk
UNKNOWN_FILE = "unknown"


class MetadataKind(enum.Enum):
    """The four per-kind metadata files TumblThree writes into a blog folder."""

    VIDEOS = "videos.txt"
    IMAGES = "images.txt"
    TEXTS = "texts.txt"
    ANSWERS = "answers.txt"

    @property
    def file_name(self) -> str:
        return self.value


class PostParseError(ValueError):
    """Raised when a record cannot be turned into a Post (e.g. bad id)."""

    def __init__(self, message: str, label: str | None = None):
        self.label = label
        super().__init__(f"{label}: {message}" if label else message)


@dataclass(frozen=True)
class MediaRef:
    url: str | None = None  # file:/// URL, None when unresolved

    @property
    def resolved(self) -> bool:
        return self.url is not None

    def __str__(self) -> str:
        return self.url if self.url is not None else UNKNOWN_FILE


UNRESOLVED = MediaRef()


@dataclass
class Image:
    photo_urls: list[MediaRef] = field(default_factory=list)
    caption: str | None = None


@dataclass
class Video:
    url: MediaRef | None = None
    caption: str | None = None


@dataclass
class Text:
    title: str | None = None
    body: str | None = None  # HTML
    media_urls: list[MediaRef] = field(default_factory=list)


@dataclass
class Answer:
    body: str | None = None  # HTML

    @classmethod
    def from_question(cls, question: str, answer: str) -> "Answer":
        return cls(body=f"<em>{question}</em><br>{answer}")


PostKind = Image | Video | Text | Answer


@dataclass
class Post:
    id: int
    kind: PostKind
    date: str | None = None  # verbatim from the export
    tags: list[str] = field(default_factory=list)

    @property
    def type(self) -> str:
        return type(self.kind).__name__

    def to_dict(self) -> dict:
        """Flatten into a JSON-ready dict with a "type" discriminant."""
        data: dict = {
            "id": self.id,
            "date": self.date,
            "tags": list(self.tags),
            "type": self.type,
        }
        kind = self.kind
        if isinstance(kind, Image):
            data["photo_urls"] = [str(ref) for ref in kind.photo_urls]
            data["caption"] = kind.caption
        elif isinstance(kind, Video):
            data["url"] = str(kind.url) if kind.url is not None else None
            data["caption"] = kind.caption
        elif isinstance(kind, Text):
            data["title"] = kind.title
            data["body"] = kind.body
            data["media_urls"] = [str(ref) for ref in kind.media_urls]
        else:
            data["body"] = kind.body
        return data


def split_tags(raw: str | None) -> list[str]:
    """Split a ", "-joined tag string, dropping empty tags."""
    if not raw:
        return []
    return [t for t in raw.split(", ") if t]


def parse_post_id(value: object) -> int:
    """Parse an export post id, raising PostParseError if it isn't numeric."""
    if value is None:
        raise PostParseError("missing post id")
    # bool is an int subclass; True is not a post id
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise PostParseError(f"negative post id {value}")
        return value
    if isinstance(value, str) and _is_ascii_digits(value):
        return int(value)
    raise PostParseError(f"invalid post id {value!r}")


def _is_ascii_digits(value: str) -> bool:
    return bool(value) and value.isascii() and value.isdigit()
