"""
Array and object exposure for record-building callers.

Service code uses these to pull a list out of a response and decode each
element into a domain record, or to hand a nested object to another
record's parser. One bad element never sinks the whole list: it is
skipped and logged, and the skip is recorded in the batch result.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ._errors import MalformedInputError
from ._path import resolve_span
from ._scalars import decode_string
from ._scalars import is_null
from ._scanner import Span
from ._scanner import find_balanced_end
from ._scanner import iter_element_spans
from ._scanner import iter_member_spans
from ._scanner import trim_span

logger = logging.getLogger(__name__)

# SerializationError subclasses ValueError; the rest are slips in
# hand-written record decoders
DECODE_FAILURES: tuple[type[Exception], ...] = (
    ValueError,
    TypeError,
    LookupError,
    AttributeError,
    ArithmeticError,
)


@dataclass(frozen=True)
class Skipped:
    """Returned by an element decoder to skip its element with a reason."""

    reason: str


@dataclass(frozen=True)
class ElementSkip:
    """
    Log entry for one element left out of a batch.

    ``index`` is ``None`` when the array text itself was malformed and the
    walk stopped early.
    """

    index: int | None
    reason: str


@dataclass(frozen=True)
class BatchResult[T]:
    """Decoded elements plus the log of those that were skipped."""

    values: tuple[T, ...]
    skipped: tuple[ElementSkip, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.skipped


type ElementDecoder[T] = Callable[[str], T | Skipped]


def _array_interior_span(text: str) -> Span | None:
    """
    Accepts array text with or without its brackets.

    ``[1],[2]`` is an interior whose first element happens to be an array,
    so brackets are only stripped when the opener's match is the last
    character.
    """
    span = trim_span(text, 0, len(text))
    if not span or text[span.start] != "[":
        return span
    close = find_balanced_end(text, span.start + 1, "[", "]", span.end)
    if close is None:
        return None
    if close == span.end - 1:
        return Span(span.start + 1, close)
    return span


def decode_each[T](
    raw_array: str | None, decoder: ElementDecoder[T]
) -> BatchResult[T]:
    """
    Decodes every element of ``raw_array`` with ``decoder``.

    The decoder receives each element's trimmed text. Raising a decoding
    error or returning ``Skipped`` drops that element; everything else is
    kept in order. Empty elements are ignored, and ``None`` (an array the
    extract functions did not find) decodes to an empty result.
    """
    if raw_array is None:
        return BatchResult(())

    interior = _array_interior_span(raw_array)
    if interior is None:
        logger.warning(
            "Skipping unbalanced array text of %d chars", len(raw_array)
        )
        return BatchResult((), (ElementSkip(None, "Unbalanced array"),))

    values: list[T] = []
    skipped: list[ElementSkip] = []
    elements = iter_element_spans(raw_array, interior.start, interior.end)
    index = 0
    try:
        for index, element in enumerate(elements):
            if not element:
                continue
            try:
                outcome = decoder(element.slice(raw_array))
            except DECODE_FAILURES as e:
                reason = str(e) or type(e).__name__
            else:
                if not isinstance(outcome, Skipped):
                    values.append(outcome)
                    continue
                reason = outcome.reason
            logger.warning("Skipping array element %d: %s", index, reason)
            skipped.append(ElementSkip(index, reason))
    except MalformedInputError as e:
        logger.warning(
            "Stopped decoding malformed array after element %d: %s", index, e
        )
        skipped.append(ElementSkip(None, str(e)))

    return BatchResult(tuple(values), tuple(skipped))


def parse_each[T](
    raw_array: str | None, decoder: ElementDecoder[T]
) -> list[T]:
    """Decodes each element, returning only the successes."""
    return list(decode_each(raw_array, decoder).values)


def _container_at(
    text: str, path: str, opener: str, closer: str
) -> Span | None:
    """Resolves ``path`` to an exact object or array span, or ``None``."""
    span = resolve_span(text, path)
    if span is None or not span or text[span.start] != opener:
        return None
    close = find_balanced_end(text, span.start + 1, opener, closer, span.end)
    return None if close is None else Span(span.start, close + 1)


def extract_array(text: str, path: str) -> str | None:
    """Returns the array at ``path`` including its brackets."""
    span = _container_at(text, path, "[", "]")
    return None if span is None else span.slice(text)


def extract_array_interior(text: str, path: str) -> str | None:
    """Returns the text between the brackets of the array at ``path``."""
    span = _container_at(text, path, "[", "]")
    return None if span is None else text[span.start + 1 : span.end - 1]


def extract_object(text: str, path: str) -> str | None:
    """
    Returns the object at ``path`` as standalone text.

    The result can be queried again with relative paths, which is how a
    record that nests another record hands over its field.
    """
    span = _container_at(text, path, "{", "}")
    return None if span is None else span.slice(text)


def extract_array_length(text: str, path: str) -> int:
    """
    Counts the non-empty elements of the array at ``path``.

    Absent, non-array and malformed values count as zero.
    """
    span = _container_at(text, path, "[", "]")
    if span is None:
        return 0
    try:
        return sum(
            1
            for element in iter_element_spans(
                text, span.start + 1, span.end - 1
            )
            if element
        )
    except MalformedInputError as e:
        logger.debug("Ignoring malformed array at %s: %s", path, e)
        return 0


def extract_string_list(text: str, path: str) -> list[str]:
    """Returns the strings of the array at ``path``; empty when absent."""
    return parse_each(extract_array_interior(text, path), decode_string)


def extract_string_map(text: str, path: str) -> dict[str, str] | None:
    """
    Returns a flat ``str -> str`` view of the object at ``path``.

    String members are unescaped; numbers, booleans and nested values keep
    their raw text; ``null`` members are left out. Returns ``None`` when the
    object is absent, malformed or has no members.
    """
    span = _container_at(text, path, "{", "}")
    if span is None:
        return None

    result: dict[str, str] = {}
    try:
        for key_span, value_span in iter_member_spans(
            text, span.start + 1, span.end - 1
        ):
            raw_value = value_span.slice(text)
            if is_null(raw_value):
                continue
            key = decode_string(key_span.slice(text))
            if raw_value.startswith('"'):
                result.setdefault(key, decode_string(raw_value))
            else:
                result.setdefault(key, raw_value)
    except MalformedInputError as e:
        logger.debug("Ignoring malformed object at %s: %s", path, e)
        return None
    return result or None


__all__ = [
    "BatchResult",
    "DECODE_FAILURES",
    "ElementDecoder",
    "ElementSkip",
    "Skipped",
    "decode_each",
    "extract_array",
    "extract_array_length",
    "extract_array_interior",
    "extract_object",
    "extract_string_list",
    "extract_string_map",
    "parse_each",
]
