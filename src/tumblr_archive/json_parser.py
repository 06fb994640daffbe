"""Build Post objects from the JSON variant of TumblThree metadata.

Newer TumblThree releases write each metadata file as a JSON array of post
objects. Field names drifted between releases (hyphenated legacy keys vs
underscored current ones), so several keys are accepted per field. The
export's own list of downloaded media files is the authoritative media
inventory for a post; markup inside bodies is never used to find media.
"""

import logging
from typing import Any, Mapping

from .fragments import strip_media
from .media import MediaResolver
from .models import (
    Answer,
    Image,
    MediaRef,
    MetadataKind,
    Post,
    PostParseError,
    Text,
    Video,
    parse_post_id,
    split_tags,
)

logger = logging.getLogger(__name__)

# Current key first; exact, case-sensitive matches only
MEDIA_FILES_KEYS = ("downloaded_media_files", "downloaded-media-files")
CAPTION_KEYS = ("caption", "photo-caption")
BODY_KEYS = ("body", "regular-body")
TITLE_KEYS = ("title", "regular-title")


def _first_present(item: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in item:
            return item[key]
    return None


def _coerce_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _coerce_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str) and item]
    return []


def _coerce_tags(value: Any) -> list[str]:
    if isinstance(value, str):
        return split_tags(value)
    return _coerce_str_list(value)


def _unique(values: list[str]) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()
    for item in values:
        if item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


def build_json_post(
    item: Any, kind: MetadataKind, resolver: MediaResolver
) -> Post:
    """Build a Post of the given kind from one decoded JSON object."""
    if not isinstance(item, Mapping):
        raise PostParseError(
            f"expected a JSON object, got {type(item).__name__}",
            label=f"{kind.file_name} record",
        )
    try:
        post_id = parse_post_id(item.get("id"))
    except PostParseError as e:
        raise PostParseError(str(e), label=f"{kind.file_name} record") from e

    media_files = _coerce_str_list(_first_present(item, MEDIA_FILES_KEYS))

    if kind is MetadataKind.VIDEOS:
        post_kind = _build_video(item, media_files, resolver, post_id)
    elif kind is MetadataKind.IMAGES:
        post_kind = _build_image(item, media_files, resolver, post_id)
    elif kind is MetadataKind.TEXTS:
        post_kind = _build_text(item, media_files, resolver)
    else:
        post_kind = Answer.from_question(
            _coerce_str(item.get("question")) or "",
            _coerce_str(item.get("answer")) or "",
        )

    return Post(
        id=post_id,
        kind=post_kind,
        date=_coerce_str(item.get("date")),
        tags=_coerce_tags(item.get("tags")),
    )


def _build_video(
    item: Mapping[str, Any], media_files: list[str], resolver: MediaResolver, post_id: int
) -> Video:
    if len(media_files) != 1:
        logger.warning(
            "Unexpected downloaded_media_files for video %d: %d files",
            post_id,
            len(media_files),
        )
    url: MediaRef | None = resolver.resolve(media_files[0]) if media_files else None
    return Video(url=url, caption=_coerce_str(_first_present(item, CAPTION_KEYS)))


def _build_image(
    item: Mapping[str, Any], media_files: list[str], resolver: MediaResolver, post_id: int
) -> Image:
    if not media_files:
        logger.warning("Missing downloaded_media_files for image %d", post_id)
    return Image(
        photo_urls=resolver.resolve_all(media_files),
        caption=_coerce_str(_first_present(item, CAPTION_KEYS)),
    )


def _build_text(
    item: Mapping[str, Any], media_files: list[str], resolver: MediaResolver
) -> Text:
    body = _coerce_str(_first_present(item, BODY_KEYS))
    if body is not None:
        # Embedded media points at the remote origin; media_urls replaces it
        body = strip_media(body)
    return Text(
        title=_coerce_str(_first_present(item, TITLE_KEYS)),
        body=body,
        media_urls=resolver.resolve_all(_unique(media_files)),
    )
