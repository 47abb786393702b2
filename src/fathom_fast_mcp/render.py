"""Rendering of tool output and enforcement of the response size ceiling."""

import json
import math
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from .types import Cursor, ResponseFormat

T = TypeVar("T")

CHARACTER_LIMIT = 25000

# Room left for the notice appended after a raw slice.
_SLICE_MARGIN = 100
_SLICE_NOTICE = "\n\n*Response truncated. Use filters or pagination to narrow the results.*"


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def clip(text: str) -> str:
    """Hard-cut *text* to the ceiling, appending a truncation notice."""
    if len(text) <= CHARACTER_LIMIT:
        return text
    return text[: CHARACTER_LIMIT - _SLICE_MARGIN] + _SLICE_NOTICE


def cursor_hint(cursor: Cursor | None) -> str:
    return f"*Use cursor `{cursor}` to load more results*" if cursor else ""


def plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def fit_to_limit(
    items: Sequence[T],
    build: Callable[[Sequence[T]], dict[str, Any]],
    markdown: Callable[[Sequence[T]], str],
    response_format: ResponseFormat,
    noun: str = "items",
) -> tuple[str, dict[str, Any]]:
    """Render *items* and keep the text under :data:`CHARACTER_LIMIT`.

    *build* turns a list of items into the structured output and
    *markdown* turns it into the human-readable document. When the first
    rendering is too long the item list is halved once (rounding up) and
    re-rendered with a notice giving the original and kept counts. If that
    is still too long, the text is sliced.

    Returns the text and the structured output it was rendered from.
    """
    output = build(items)
    text = _render(items, output, markdown, response_format)
    if len(text) <= CHARACTER_LIMIT:
        return text, output

    kept = items[: math.ceil(len(items) / 2)]
    message = (
        f"Response truncated from {len(items)} to {len(kept)} {noun} due to size limits. "
        "Use pagination or add filters to see more results."
    )
    output = {**build(kept), "truncated": True, "truncation_message": message}

    if response_format == ResponseFormat.JSON:
        text = to_json(output)
    else:
        text = f"*{message}*\n\n" + markdown(kept)
    return clip(text), output


def _render(
    items: Sequence[T],
    output: dict[str, Any],
    markdown: Callable[[Sequence[T]], str],
    response_format: ResponseFormat,
) -> str:
    if response_format == ResponseFormat.JSON:
        return to_json(output)
    return markdown(items)
