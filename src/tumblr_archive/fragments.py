"""HTML fragment handling for post bodies and embedded video players."""

import html
import re
import warnings
from typing import Callable

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

# Media elements in JSON text bodies point at the remote origin
STRIPPED_MEDIA_TAGS = ["img", "figure", "video"]

# Downloaded video files are named after this token of the source URL
VIDEO_TOKEN_RE = re.compile(r"tumblr_[A-Za-z0-9]+")

# One attribute of a start tag, tokenized the way html.parser reads it
ATTRIBUTE_RE = re.compile(
    r"""(?:\s|/(?!>))*"""
    r"""([^\s/>][^\s/=>]*)"""
    r"""(?:\s*=+\s*('[^']*'|"[^"]*"|(?!['"])[^>\s]*))?"""
)


def _parse(markup: str) -> BeautifulSoup:
    # Bodies and captions are sometimes just a bare URL
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        return BeautifulSoup(markup, "html.parser")


def first_source_src(player_html: str) -> str:
    """Return the src of the first <source> element in a video player."""
    soup = _parse(player_html)
    source = soup.find("source")
    if source is None:
        raise ValueError("Missing 'source' tag")
    src = source.get("src")
    if not src:
        raise ValueError("Source element missing 'src' attribute")
    return src


def video_token(src: str) -> str:
    """Extract the tumblr_<id> token following the last "/" of a video URL."""
    filename = src[src.rfind("/") + 1 :]
    match = VIDEO_TOKEN_RE.match(filename)
    if not match:
        raise ValueError(f"Couldn't find a supported video URL in {src}")
    return match.group(0)


def _src_edit(markup: str, tag_start: int, value: str) -> tuple[int, int, str] | None:
    """Span of the src value in the start tag at tag_start, and its replacement.

    With a repeated attribute the last one wins, as it does in the parsed tree.
    """
    quoted = f'"{html.escape(value)}"'
    edit = None
    pos = tag_start + len("<img")
    while match := ATTRIBUTE_RE.match(markup, pos):
        if match.group(1).lower() == "src":
            if match.group(2) is None:
                edit = (match.end(1), match.end(1), "=" + quoted)
            else:
                edit = (match.start(2), match.end(2), quoted)
        pos = match.end()
    return edit


def rewrite_img_sources(body: str, rewrite: Callable[[str], str]) -> str:
    """Replace the src of every <img src=...> in body with rewrite(src).

    Only the src values change. Everything else in body is returned exactly
    as written, including markup html.parser would normalize.
    """
    images = _parse(body).find_all("img", src=True)
    if not images:
        return body

    # html.parser reports positions as (line, column) over "\n" line breaks
    line_starts = [0] + [m.end() for m in re.finditer("\n", body)]
    parts = []
    pos = 0
    for img in images:
        tag_start = line_starts[img.sourceline - 1] + img.sourcepos
        edit = _src_edit(body, tag_start, rewrite(img["src"]))
        if edit is None:
            continue
        start, end, replacement = edit
        parts.append(body[pos:start])
        parts.append(replacement)
        pos = end
    parts.append(body[pos:])
    return "".join(parts)


def strip_media(body: str) -> str:
    """Remove every <img>, <figure> and <video> element, at any depth."""
    soup = _parse(body)
    while (element := soup.find(STRIPPED_MEDIA_TAGS)) is not None:
        element.decompose()
    return str(soup)
