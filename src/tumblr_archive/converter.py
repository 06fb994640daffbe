"""Convert Post objects to JSON for the viewer."""

import json
from typing import TextIO

from .models import Post


def posts_to_json(posts: list[Post], output: TextIO | None = None, indent: int | None = 2) -> str:
    """Convert posts to a JSON array of flat objects tagged with "type".

    Args:
        posts: List of Post objects to convert, in the order to emit them.
        output: Optional file-like object to write to. If None, returns JSON as string.
        indent: Indentation passed to json.dumps; None for compact output.

    Returns:
        JSON content as a string (also written to output if provided).
    """
    result = json.dumps(
        [p.to_dict() for p in posts],
        indent=indent,
        ensure_ascii=False,
    )
    if output is not None:
        output.write(result)
    return result
