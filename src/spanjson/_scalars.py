"""
Typed decoding of resolved value spans.

Turns the raw text of one located value into a Python scalar of the
requested kind, or materialises a whole value (objects and arrays
included) for callers that want plain Python data.
"""

import decimal
from enum import Enum
from typing import Any

from ._errors import MalformedInputError
from ._errors import TypeMismatchError
from ._profiling import ProfileContext
from ._scanner import Span
from ._scanner import find_balanced_end
from ._scanner import find_string_end
from ._scanner import iter_element_spans
from ._scanner import iter_member_spans
from ._scanner import trim_span

# Recursive definition of decoded values
JsonValue = (
    str
    | int
    | float
    | bool
    | None
    | dict[str, "JsonValue"]
    | list["JsonValue"]
)


class ValueKind(Enum):
    """Scalar kinds a path can be decoded as."""

    STRING = "string"
    INT = "int"
    LONG = "long"
    DOUBLE = "double"
    BOOLEAN = "boolean"


INT_RANGE = (-(2**31), 2**31 - 1)
LONG_RANGE = (-(2**63), 2**63 - 1)

_NUMBER_CHARS = frozenset("0123456789.-+eE")
_UNICODE_ESCAPE_LEN = 6
_SURROGATE_HIGH = range(0xD800, 0xDC00)
_SURROGATE_LOW = range(0xDC00, 0xE000)

_ESCAPE_MAP = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


def _decode_unicode_escape(s: str, i: int) -> tuple[str, int]:
    """Decodes ``\\uXXXX`` at ``s[i]``, joining a following low surrogate."""
    hex_digits = s[i + 2 : i + _UNICODE_ESCAPE_LEN]
    if len(hex_digits) < 4:  # noqa: PLR2004
        raise MalformedInputError(
            "Incomplete unicode escape sequence", doc=s, pos=i
        )
    try:
        code_point = int(hex_digits, 16)
    except ValueError as e:
        raise MalformedInputError(
            f"Invalid unicode escape sequence: \\u{hex_digits}", doc=s, pos=i
        ) from e

    next_i = i + _UNICODE_ESCAPE_LEN
    if code_point in _SURROGATE_HIGH and s.startswith("\\u", next_i):
        low_digits = s[next_i + 2 : next_i + _UNICODE_ESCAPE_LEN]
        try:
            low = int(low_digits, 16)
        except ValueError:
            low = -1
        if len(low_digits) == 4 and low in _SURROGATE_LOW:  # noqa: PLR2004
            high_bits = (code_point - _SURROGATE_HIGH.start) << 10
            code_point = 0x10000 + high_bits + (low - _SURROGATE_LOW.start)
            next_i += _UNICODE_ESCAPE_LEN

    return chr(code_point), next_i


def unescape(s: str) -> str:
    """
    Decodes the escape sequences of a string literal's interior.

    Handles ``\\\\ \\" \\/ \\b \\f \\n \\r \\t`` and ``\\uXXXX`` (surrogate
    pairs included). Any other escape is malformed input.
    """
    if "\\" not in s:
        return s

    with ProfileContext("unescape", len(s)):
        parts = []
        i = 0
        length = len(s)
        while i < length:
            backslash = s.find("\\", i)
            if backslash == -1:
                parts.append(s[i:])
                break
            parts.append(s[i:backslash])

            if backslash + 1 >= length:
                raise MalformedInputError(
                    "Dangling escape character", doc=s, pos=backslash
                )
            next_char = s[backslash + 1]
            if next_char in _ESCAPE_MAP:
                parts.append(_ESCAPE_MAP[next_char])
                i = backslash + 2
            elif next_char == "u":
                char, i = _decode_unicode_escape(s, backslash)
                parts.append(char)
            else:
                raise MalformedInputError(
                    f"Invalid escape sequence: \\{next_char}",
                    doc=s,
                    pos=backslash,
                )

        return "".join(parts)


def is_null(raw: str) -> bool:
    return raw.strip() == "null"


def decode_string(raw: str, path: str = "") -> str:
    """Decodes a quoted string literal, raising on anything else."""
    literal = raw.strip()
    quoted = len(literal) > 1 and literal[0] == literal[-1] == '"'
    if not quoted:
        raise TypeMismatchError("Expected string value", path)
    try:
        return unescape(literal[1:-1])
    except MalformedInputError as e:
        raise MalformedInputError(e.msg, path, e.doc, e.pos) from e


def _number_literal(raw: str, path: str) -> str:
    """Validates ASCII-only numeric characters before handing off to Python."""
    literal = raw.strip()
    if (
        not literal
        or not all(c in _NUMBER_CHARS for c in literal)
        or not any(c.isdigit() for c in literal)
    ):
        raise TypeMismatchError(
            f"Expected numeric value, got {literal!r}", path
        )
    return literal


def decode_integer(
    raw: str, path: str = "", bounds: tuple[int, int] = LONG_RANGE
) -> int:
    """
    Decodes an integer literal within ``bounds``.

    Integer-valued float forms such as ``42.0`` or ``1e3`` are accepted;
    genuinely fractional values are a type mismatch.
    """
    literal = _number_literal(raw, path)
    low, high = bounds

    if "." in literal or "e" in literal.lower():
        try:
            number = decimal.Decimal(literal)
        except decimal.InvalidOperation as e:
            raise TypeMismatchError(f"Invalid number {literal!r}", path) from e
        if not low <= number <= high:
            raise TypeMismatchError(f"Integer out of range: {literal}", path)
        if number != number.to_integral_value():
            raise TypeMismatchError(
                f"Fractional value {literal} is not an integer", path
            )
        return int(number)

    try:
        value = int(literal)
    except ValueError as e:
        raise TypeMismatchError(f"Invalid integer {literal!r}", path) from e
    if not low <= value <= high:
        raise TypeMismatchError(f"Integer out of range: {literal}", path)
    return value


def decode_double(raw: str, path: str = "") -> float:
    literal = _number_literal(raw, path)
    try:
        return float(literal)
    except ValueError as e:
        raise TypeMismatchError(f"Invalid number {literal!r}", path) from e


def decode_boolean(raw: str, path: str = "") -> bool:
    literal = raw.strip()
    if literal == "true":
        return True
    if literal == "false":
        return False
    raise TypeMismatchError(f"Expected boolean value, got {literal!r}", path)


def decode_scalar(raw: str, kind: ValueKind, path: str = "") -> Any:
    """Decodes ``raw`` as ``kind``; callers handle ``null`` beforehand."""
    if kind is ValueKind.STRING:
        return decode_string(raw, path)
    elif kind is ValueKind.INT:
        return decode_integer(raw, path, INT_RANGE)
    elif kind is ValueKind.LONG:
        return decode_integer(raw, path, LONG_RANGE)
    elif kind is ValueKind.DOUBLE:
        return decode_double(raw, path)
    elif kind is ValueKind.BOOLEAN:
        return decode_boolean(raw, path)
    raise TypeError(f"Unsupported value kind: {kind!r}")


def _decode_literal(text: str, span: Span) -> JsonValue:
    literal = span.slice(text)
    if literal == "null":
        return None
    elif literal == "true":
        return True
    elif literal == "false":
        return False

    if literal and all(c in _NUMBER_CHARS for c in literal):
        try:
            if "." in literal or "e" in literal.lower():
                return float(literal)
            return int(literal)
        except ValueError:
            pass
    raise MalformedInputError("Invalid literal", doc=text, pos=span.start)


def _container_end(text: str, span: Span, opener: str, closer: str) -> int:
    close = find_balanced_end(text, span.start + 1, opener, closer, span.end)
    if close is None:
        raise MalformedInputError(
            f"Expecting '{closer}' delimiter", doc=text, pos=span.end
        )
    if close != span.end - 1:
        raise MalformedInputError("Extra data", doc=text, pos=close + 1)
    return close


def decode_span(text: str, span: Span) -> JsonValue:
    """
    Materialises the value at ``span`` into plain Python data.

    Objects become dicts in document order (first occurrence of a
    duplicate key wins), arrays become lists.
    """
    if not span:
        raise MalformedInputError("Expecting value", doc=text, pos=span.start)

    first = text[span.start]
    if first == '"':
        close = find_string_end(text, span.start + 1, span.end)
        if close is None:
            raise MalformedInputError(
                "Unterminated string starting at", doc=text, pos=span.start
            )
        if close != span.end - 1:
            raise MalformedInputError("Extra data", doc=text, pos=close + 1)
        return unescape(text[span.start + 1 : close])

    if first == "{":
        close = _container_end(text, span, "{", "}")
        result: dict[str, JsonValue] = {}
        for key_span, value_span in iter_member_spans(
            text, span.start + 1, close
        ):
            key = unescape(text[key_span.start + 1 : key_span.end - 1])
            value = decode_span(text, value_span)
            result.setdefault(key, value)
        return result

    if first == "[":
        close = _container_end(text, span, "[", "]")
        return [
            decode_span(text, element)
            for element in iter_element_spans(text, span.start + 1, close)
        ]

    return _decode_literal(text, span)


def decode_value(raw: str) -> JsonValue:
    """Materialises a standalone JSON value."""
    return decode_span(raw, trim_span(raw, 0, len(raw)))


__all__ = [
    "INT_RANGE",
    "JsonValue",
    "LONG_RANGE",
    "ValueKind",
    "decode_boolean",
    "decode_double",
    "decode_integer",
    "decode_scalar",
    "decode_span",
    "decode_string",
    "decode_value",
    "is_null",
    "unescape",
]
