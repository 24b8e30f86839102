"""
Cursor-level scans over raw JSON text.

Every function works on offsets into the caller's string and never builds
a tree. The three primitive scans return ``None`` for "not found" so
callers can tell malformed text from an absent field; the span iterators
raise MalformedInputError with the offending position instead, since a
generator has no other way to report a truncated document.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from ._errors import MalformedInputError
from ._errors import Position
from ._profiling import ProfileContext

WHITESPACE = " \t\n\r"

_OPENERS = {"{": "}", "[": "]"}
_CLOSERS = frozenset("}]")
_LITERAL_TERMINATORS = frozenset(",:}]" + WHITESPACE)


@dataclass(frozen=True)
class Span:
    """Half-open ``[start, end)`` offsets of one JSON value in its source."""

    start: Position
    end: Position

    def __len__(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


def skip_whitespace(
    text: str, pos: Position, end: Position | None = None
) -> Position:
    """Returns the first non-whitespace offset at or after ``pos``."""
    limit = len(text) if end is None else end
    while pos < limit and text[pos] in WHITESPACE:
        pos += 1
    return pos


def trim_span(text: str, start: Position, end: Position) -> Span:
    """Shrinks ``[start, end)`` past leading and trailing whitespace."""
    start = skip_whitespace(text, start, end)
    while end > start and text[end - 1] in WHITESPACE:
        end -= 1
    return Span(start, end)


def find_string_end(
    text: str, start_after_quote: Position, end: Position | None = None
) -> Position | None:
    """
    Finds the closing quote of a string literal.

    ``start_after_quote`` is the offset just past the opening ``"``. A
    quote preceded by an odd run of backslashes is escaped and skipped.
    """
    limit = len(text) if end is None else end
    pos = text.find('"', start_after_quote, limit)
    while pos != -1:
        backslashes = 0
        back = pos - 1
        while back >= start_after_quote and text[back] == "\\":
            backslashes += 1
            back -= 1
        if backslashes % 2 == 0:
            return pos
        pos = text.find('"', pos + 1, limit)
    return None


def find_balanced_end(
    text: str,
    start_after_opener: Position,
    opener: str,
    closer: str,
    end: Position | None = None,
) -> Position | None:
    """
    Finds the closer that matches an already consumed opener.

    Delimiters inside string literals are ignored. Returns ``None`` when
    the text ends first or a string literal is left unterminated.
    """
    limit = len(text) if end is None else end
    with ProfileContext("find_balanced_end", limit - start_after_opener):
        depth = 1
        pos = start_after_opener
        while pos < limit:
            char = text[pos]
            if char == '"':
                close = find_string_end(text, pos + 1, limit)
                if close is None:
                    return None
                pos = close + 1
                continue
            if char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    return pos
            pos += 1
        return None


def find_value_end(
    text: str, start: Position, end: Position | None = None
) -> Position | None:
    """
    Returns the exclusive end offset of the value starting at ``start``.

    Strings end at their closing quote, objects and arrays at their
    balanced closer, and bare literals (numbers, booleans, null) at the
    next comma, colon, closer or whitespace.
    """
    limit = len(text) if end is None else end
    if start >= limit:
        return None

    char = text[start]
    if char == '"':
        close = find_string_end(text, start + 1, limit)
    elif char in _OPENERS:
        close = find_balanced_end(
            text, start + 1, char, _OPENERS[char], limit
        )
    elif char in _LITERAL_TERMINATORS:
        return None
    else:
        pos = start
        while pos < limit and text[pos] not in _LITERAL_TERMINATORS:
            pos += 1
        return pos

    return None if close is None else close + 1


def iter_element_spans(
    text: str, start: Position, end: Position
) -> Iterator[Span]:
    """
    Yields the trimmed span of each top-level element of an array interior.

    Splits on commas that sit outside string literals and outside nested
    objects or arrays. An empty interior yields nothing; an empty piece
    between two commas yields an empty span. Raises MalformedInputError
    for unterminated strings and mismatched or unclosed delimiters.
    """
    if skip_whitespace(text, start, end) >= end:
        return

    expected_closers: list[str] = []
    piece_start = start
    pos = start
    while pos < end:
        char = text[pos]
        if char == '"':
            close = find_string_end(text, pos + 1, end)
            if close is None:
                raise MalformedInputError(
                    "Unterminated string starting at", doc=text, pos=pos
                )
            pos = close + 1
            continue
        if char in _OPENERS:
            expected_closers.append(_OPENERS[char])
        elif char in _CLOSERS:
            if not expected_closers or expected_closers.pop() != char:
                raise MalformedInputError(
                    f"Unbalanced '{char}'", doc=text, pos=pos
                )
        elif char == "," and not expected_closers:
            yield trim_span(text, piece_start, pos)
            piece_start = pos + 1
        pos += 1

    if expected_closers:
        raise MalformedInputError(
            f"Expecting '{expected_closers[-1]}' delimiter", doc=text, pos=end
        )
    yield trim_span(text, piece_start, end)


def iter_member_spans(
    text: str, start: Position, end: Position
) -> Iterator[tuple[Span, Span]]:
    """
    Yields ``(key_span, value_span)`` for each member of an object interior.

    Only members at the interior's own depth are visited, so a nested value
    or a string that happens to contain ``"key":`` is never mistaken for a
    member. The key span includes its quotes. A trailing comma is tolerated.
    """
    pos = skip_whitespace(text, start, end)
    while pos < end:
        if text[pos] != '"':
            raise MalformedInputError(
                "Expecting property name enclosed in double quotes",
                doc=text,
                pos=pos,
            )
        key_close = find_string_end(text, pos + 1, end)
        if key_close is None:
            raise MalformedInputError(
                "Unterminated string starting at", doc=text, pos=pos
            )
        key_span = Span(pos, key_close + 1)

        pos = skip_whitespace(text, key_close + 1, end)
        if pos >= end or text[pos] != ":":
            raise MalformedInputError(
                "Expecting ':' delimiter", doc=text, pos=pos
            )

        pos = skip_whitespace(text, pos + 1, end)
        value_end = find_value_end(text, pos, end)
        if value_end is None:
            raise MalformedInputError("Expecting value", doc=text, pos=pos)
        yield key_span, Span(pos, value_end)

        pos = skip_whitespace(text, value_end, end)
        if pos >= end:
            return
        if text[pos] != ",":
            raise MalformedInputError(
                "Expecting ',' delimiter", doc=text, pos=pos
            )
        pos = skip_whitespace(text, pos + 1, end)


def split_top_level_elements(interior: str) -> list[str] | None:
    """
    Splits an array or object interior into its top-level elements.

    ``'1,{"a":2,"b":3},[4,5]'`` gives three elements. Returns ``None``
    rather than raising when the text is malformed.
    """
    with ProfileContext("split_top_level_elements", len(interior)):
        try:
            return [
                span.slice(interior)
                for span in iter_element_spans(interior, 0, len(interior))
            ]
        except MalformedInputError:
            return None


__all__ = [
    "Span",
    "WHITESPACE",
    "find_balanced_end",
    "find_string_end",
    "find_value_end",
    "iter_element_spans",
    "iter_member_spans",
    "skip_whitespace",
    "split_top_level_elements",
    "trim_span",
]
