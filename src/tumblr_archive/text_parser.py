"""Parse the legacy line-oriented TumblThree metadata format.

A text metadata file is a sequence of records, each opened by a
"Post id: <digits>" line:

    Post id: 123456789
    Date: 2019-03-02 17:12:45 GMT
    Photo url: https://64.media.tumblr.com/.../tumblr_abc_1280.jpg
    Photo caption: <p>first line</p>

    <p>still the caption</p>
    Tags: cats, dogs

Fields are "<Label>: <value>" lines. Some values run over several lines; each
field declares how its value continues (see Continuation).
"""

import enum
import logging
import re
from dataclasses import dataclass
from typing import Iterator

from .fragments import first_source_src, rewrite_img_sources, video_token
from .media import MediaResolver
from .models import (
    Answer,
    Image,
    MetadataKind,
    Post,
    PostParseError,
    Text,
    Video,
    parse_post_id,
    split_tags,
)

logger = logging.getLogger(__name__)

RECORD_BOUNDARY_RE = re.compile(r"Post id: [0-9]+")


class Continuation(enum.Enum):
    """Whether the line after a field's current value still belongs to it."""

    NEVER = "never"
    URLS = "urls"  # while the next line is a remote URL
    UNTIL_TAGS = "until_tags"  # until the Tags field starts

    def accepts(self, next_line: str) -> bool:
        if self is Continuation.NEVER:
            return False
        if self is Continuation.URLS:
            return next_line.startswith("https://")
        return not next_line.startswith("Tags: ")


@dataclass(frozen=True)
class FieldSpec:
    label: str  # "" matches any line: the rest of the record
    continuation: Continuation = Continuation.NEVER

    @property
    def prefix(self) -> str:
        return f"{self.label}: " if self.label else ""


POST_ID = FieldSpec("Post id")
DATE = FieldSpec("Date")
TAGS = FieldSpec("Tags")
REBLOG_NAME = FieldSpec("Reblog name")
BODY = FieldSpec("", Continuation.UNTIL_TAGS)

PHOTO_URL = FieldSpec("Photo url")
PHOTO_SET_URLS = FieldSpec("Photo set urls", Continuation.URLS)
PHOTO_CAPTION = FieldSpec("Photo caption", Continuation.UNTIL_TAGS)

VIDEO_CAPTION = FieldSpec("Video caption")
VIDEO_PLAYER = FieldSpec("Video player", Continuation.UNTIL_TAGS)

TITLE = FieldSpec("Title")

# Order matters: lines consumed by one field are not seen by later ones
IMAGE_FIELDS = (POST_ID, DATE, PHOTO_URL, PHOTO_SET_URLS, PHOTO_CAPTION, TAGS)
VIDEO_FIELDS = (POST_ID, DATE, VIDEO_CAPTION, VIDEO_PLAYER, TAGS)
TEXT_FIELDS = (POST_ID, DATE, TITLE, BODY, TAGS)
ANSWER_FIELDS = (POST_ID, DATE, REBLOG_NAME, BODY, TAGS)

FIELDS_BY_KIND = {
    MetadataKind.IMAGES: IMAGE_FIELDS,
    MetadataKind.VIDEOS: VIDEO_FIELDS,
    MetadataKind.TEXTS: TEXT_FIELDS,
    MetadataKind.ANSWERS: ANSWER_FIELDS,
}


def split_lines(text: str) -> list[str]:
    """Split text on line feeds only, dropping a trailing carriage return.

    Other line separators (form feeds, U+2028 and the like) stay inside the
    line. A final line break does not produce an empty last line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def iter_records(text: str) -> Iterator[str]:
    """Yield the text of each post record in a metadata file.

    A line that is exactly "Post id: <digits>" starts a new record. Input
    without any such line comes back as a single record.
    """
    current: list[str] = []
    for line in split_lines(text):
        if current and RECORD_BOUNDARY_RE.fullmatch(line):
            yield "\n".join(current)
            current = []
        current.append(line)
    if current:
        yield "\n".join(current)


def read_fields(text: str, fields: tuple[FieldSpec, ...]) -> dict[str, str]:
    """Extract field values from one record, in field order.

    Labels that never appear are left out of the result.
    """
    lines = split_lines(text)
    pos = 0
    values: dict[str, str] = {}
    for field_spec in fields:
        prefix = field_spec.prefix
        for start in range(pos, len(lines)):
            line = lines[start]
            if not line.startswith(prefix):
                continue
            parts = [line[len(prefix) :]]
            end = start + 1
            while end < len(lines) and field_spec.continuation.accepts(lines[end]):
                parts.append(lines[end])
                end += 1
            values[field_spec.label] = "\n".join(parts)
            pos = end
            break
    return values


def parse_text_post(text: str, kind: MetadataKind, resolver: MediaResolver) -> Post:
    """Parse one record of a legacy text metadata file."""
    return build_text_post(read_fields(text, FIELDS_BY_KIND[kind]), kind, resolver)


def build_text_post(
    values: dict[str, str], kind: MetadataKind, resolver: MediaResolver
) -> Post:
    """Build a Post from the field values of one record."""
    try:
        post_id = parse_post_id(values.get(POST_ID.label))
    except PostParseError as e:
        raise PostParseError(str(e), label=f"{kind.file_name} record") from e

    if kind is MetadataKind.IMAGES:
        post_kind = _build_image(values, resolver, post_id)
    elif kind is MetadataKind.VIDEOS:
        post_kind = _build_video(values, resolver, post_id)
    elif kind is MetadataKind.TEXTS:
        post_kind = _build_text(values, resolver)
    else:
        post_kind = Answer(body=values.get(BODY.label))

    return Post(
        id=post_id,
        kind=post_kind,
        date=values.get(DATE.label),
        tags=split_tags(values.get(TAGS.label)),
    )


def _build_image(values: dict[str, str], resolver: MediaResolver, post_id: int) -> Image:
    urls = values.get(PHOTO_SET_URLS.label, "").split()
    if not urls and PHOTO_URL.label in values:
        urls = [values[PHOTO_URL.label]]
    if not urls:
        logger.warning("Unable to find any photo URLs for post %d", post_id)
    return Image(
        photo_urls=[resolver.resolve_image(u) for u in urls],
        caption=values.get(PHOTO_CAPTION.label),
    )


def _build_video(values: dict[str, str], resolver: MediaResolver, post_id: int) -> Video:
    url = None
    try:
        player = values.get(VIDEO_PLAYER.label)
        if player is None:
            raise ValueError("Missing 'Video player' field")
        token = video_token(first_source_src(player))
        url = resolver.resolve(f"{token}.mp4")
    except ValueError as e:
        logger.warning("Unable to find a video URL for post %d: %s", post_id, e)
    return Video(url=url, caption=values.get(VIDEO_CAPTION.label))


def _build_text(values: dict[str, str], resolver: MediaResolver) -> Text:
    body = values.get(BODY.label)
    if body is not None:
        # Inline images point at the remote origin; swap in the local files
        body = rewrite_img_sources(body, lambda src: str(resolver.resolve_image(src)))
    return Text(title=values.get(TITLE.label), body=body)
