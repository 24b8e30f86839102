"""
Path expressions and their resolution against raw JSON text.

A path is a dot-separated list of segments; each segment is an object key,
optionally followed by bracketed array indexes (``choices[0]``,
``grid[1][2]``), or bare indexes into a top-level array (``[0].id``). The
empty path addresses the whole document.

Resolution walks the text one segment at a time, narrowing the current
span. Keys are only matched among the members of the current object, at
that object's own depth, so text inside sibling values can never be
mistaken for a key.
"""

import functools
import re
from dataclasses import dataclass

from ._errors import InvalidPathError
from ._errors import MalformedInputError
from ._errors import MissingFieldError
from ._profiling import ProfileContext
from ._scalars import unescape
from ._scanner import Span
from ._scanner import find_balanced_end
from ._scanner import iter_element_spans
from ._scanner import iter_member_spans
from ._scanner import trim_span

_SEGMENT_PATTERN = re.compile(r"([^\[\]]*)((?:\[\d+\])*)")
_INDEX_PATTERN = re.compile(r"\[(\d+)\]")
_PATH_CACHE_SIZE = 1024


@dataclass(frozen=True)
class PathSegment:
    """One step of a path: an optional key, then zero or more indexes."""

    key: str | None
    indexes: tuple[int, ...] = ()

    def __str__(self) -> str:
        suffix = "".join(f"[{index}]" for index in self.indexes)
        return f"{self.key or ''}{suffix}"


@functools.lru_cache(maxsize=_PATH_CACHE_SIZE)
def parse_path(path: str) -> tuple[PathSegment, ...]:
    """
    Parses a path expression into segments.

    Raises InvalidPathError for empty segments, unclosed brackets and
    non-integer indexes.
    """
    if not isinstance(path, str):
        raise TypeError(f"path must be str, not {type(path).__name__}")
    if not path:
        return ()

    segments = []
    for raw in path.split("."):
        match = _SEGMENT_PATTERN.fullmatch(raw)
        if not raw or match is None:
            raise InvalidPathError(f"Invalid path segment {raw!r}", path)
        key, index_text = match.groups()
        indexes = tuple(int(i) for i in _INDEX_PATTERN.findall(index_text))
        segments.append(PathSegment(key or None, indexes))
    return tuple(segments)


def require_text(text: object) -> str:
    if not isinstance(text, str):
        raise TypeError(
            f"the JSON object must be str, not {type(text).__name__}"
        )
    return text


def _interior(
    text: str, scope: Span, opener: str, closer: str, path: str
) -> tuple[int, int]:
    """Returns the interior offsets of the container at ``scope``."""
    if not scope or text[scope.start] != opener:
        kind = "object" if opener == "{" else "array"
        raise MissingFieldError(f"Expected {kind} value", path)
    close = find_balanced_end(text, scope.start + 1, opener, closer, scope.end)
    if close is None:
        raise MalformedInputError(
            f"Expecting '{closer}' delimiter", path, text, scope.end
        )
    return scope.start + 1, close


def _key_matches(raw_key: str, key: str) -> bool:
    if raw_key == key:
        return True
    if "\\" not in raw_key:
        return False
    try:
        return unescape(raw_key) == key
    except MalformedInputError:
        # A sibling's bad escape only rules out that member
        return False


def _member_value(text: str, scope: Span, key: str, path: str) -> Span:
    start, end = _interior(text, scope, "{", "}", path)
    for key_span, value_span in iter_member_spans(text, start, end):
        raw_key = text[key_span.start + 1 : key_span.end - 1]
        if _key_matches(raw_key, key):
            return value_span
    raise MissingFieldError("Required field missing", path)


def _element_at(text: str, scope: Span, index: int, path: str) -> Span:
    start, end = _interior(text, scope, "[", "]", path)
    for position, element in enumerate(iter_element_spans(text, start, end)):
        if position == index:
            if not element:
                raise MalformedInputError(
                    "Expecting value", path, text, element.start
                )
            return element
    raise MissingFieldError(f"Array index {index} out of range", path)


def locate(text: str, path: str) -> Span:
    """
    Returns the span of the value at ``path``.

    Raises MissingFieldError when a key or index is absent or a segment
    meets the wrong container type, MalformedInputError when the text is
    truncated or unbalanced along the way, and InvalidPathError for a bad
    path expression.
    """
    require_text(text)
    segments = parse_path(path)

    with ProfileContext("locate", len(text)):
        scope = trim_span(text, 0, len(text))
        if not scope:
            raise MissingFieldError("Empty document", path)

        try:
            for segment in segments:
                if segment.key is not None:
                    scope = _member_value(text, scope, segment.key, path)
                for index in segment.indexes:
                    scope = _element_at(text, scope, index, path)
        except MalformedInputError as e:
            if e.path:
                raise
            raise MalformedInputError(e.msg, path, e.doc, e.pos) from e

        return scope


def resolve_span(text: str | None, path: str) -> Span | None:
    """
    Like ``locate`` but returns ``None`` for absent or malformed values.

    A missing body (``None`` instead of text) is absent too.
    """
    if not isinstance(text, str):
        return None
    try:
        return locate(text, path)
    except MissingFieldError:
        return None


def resolve(text: str, path: str) -> str | None:
    """Returns the raw text of the value at ``path``, or ``None``."""
    span = resolve_span(text, path)
    return None if span is None else span.slice(text)


__all__ = [
    "PathSegment",
    "locate",
    "parse_path",
    "require_text",
    "resolve",
    "resolve_span",
]
