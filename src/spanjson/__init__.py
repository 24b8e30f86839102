"""
Path-addressable JSON value extraction and compact JSON serialization.

Reads values out of raw JSON response text by dotted path
(``"usage.total_tokens"``, ``"choices[0].message.content"``) by scanning the
text directly, without building a document tree, and renders request
bodies built from dicts and lists back to compact JSON text.

Every function is a pure function of its arguments; there is no parser
object to construct and no state shared between calls.
"""

import logging
from enum import Enum
from typing import Any

from ._encoder import EncodeConfig
from ._encoder import ValueGraph
from ._encoder import dump
from ._encoder import dumps
from ._encoder import escape
from ._encoder import put_if_present
from ._encoder import serialize
from ._errors import InvalidPathError
from ._errors import MalformedInputError
from ._errors import MissingFieldError
from ._errors import SerializationError
from ._errors import TypeMismatchError
from ._errors import UnserializableValueError
from ._materialize import BatchResult
from ._materialize import ElementDecoder
from ._materialize import ElementSkip
from ._materialize import Skipped
from ._materialize import decode_each
from ._materialize import extract_array
from ._materialize import extract_array_length
from ._materialize import extract_array_interior
from ._materialize import extract_object
from ._materialize import extract_string_list
from ._materialize import extract_string_map
from ._materialize import parse_each
from ._path import PathSegment
from ._path import locate
from ._path import parse_path
from ._path import resolve
from ._path import resolve_span
from ._profiling import HotPathStats
from ._profiling import clear_hot_path_stats
from ._profiling import get_hot_path_stats
from ._scalars import JsonValue
from ._scalars import ValueKind
from ._scalars import decode_scalar
from ._scalars import decode_span
from ._scalars import decode_value
from ._scalars import is_null
from ._scalars import unescape
from ._scanner import Span
from ._scanner import split_top_level_elements

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
logger = logging.getLogger(__name__)


def extract_required(
    text: str, path: str, kind: ValueKind | str = ValueKind.STRING
) -> Any:
    """
    Returns the value at ``path`` decoded as ``kind``.

    Raises MissingFieldError when the path is absent or holds ``null``
    (MalformedInputError, a subclass, when the text is truncated along the
    way), TypeMismatchError when the value cannot be decoded as ``kind``,
    and InvalidPathError for a bad path expression.
    """
    kind = ValueKind(kind)
    span = locate(text, path)
    raw = span.slice(text)
    if is_null(raw):
        raise MissingFieldError("Required field is null", path)
    return decode_scalar(raw, kind, path)


def extract_optional(
    text: str | None, path: str, kind: ValueKind | str = ValueKind.STRING
) -> Any | None:
    """
    Returns the value at ``path`` decoded as ``kind``, or ``None``.

    Absent fields, ``null``, undecodable values, malformed text, invalid
    paths and a missing body (``None`` text) all come back as ``None``; this
    never raises for bad data.
    """
    kind = ValueKind(kind)
    if not isinstance(text, str):
        logger.debug(
            "Optional %s field %s unavailable: no text body", kind.value, path
        )
        return None
    try:
        return extract_required(text, path, kind)
    except SerializationError as e:
        logger.debug(
            "Optional %s field %s unavailable: %s", kind.value, path, e
        )
        return None


def extract_or_default(
    text: str, path: str, kind: ValueKind | str, default: Any
) -> Any:
    """
    Returns the value at ``path``, or ``default`` when it is absent or null.

    Unlike ``extract_optional`` a value of the wrong type still raises
    TypeMismatchError.
    """
    try:
        return extract_required(text, path, kind)
    except MissingFieldError:
        return default


def extract_value(text: str, path: str = "") -> JsonValue:
    """
    Returns the value at ``path`` as plain Python data.

    Objects become dicts in document order and arrays become lists; ``null``
    becomes ``None``. Raises MissingFieldError when the path is absent and
    MalformedInputError when the value itself is malformed.
    """
    span = locate(text, path)
    try:
        return decode_span(text, span)
    except MalformedInputError as e:
        raise MalformedInputError(e.msg, path, e.doc, e.pos) from e


def _to_enum[E: Enum](value: str, enum_cls: type[E], path: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        pass
    try:
        return enum_cls[value.upper().replace("-", "_")]
    except KeyError:
        raise TypeMismatchError(
            f"Invalid {enum_cls.__name__} value {value!r}", path
        ) from None


def extract_enum[E: Enum](text: str, path: str, enum_cls: type[E]) -> E:
    """
    Returns the string at ``path`` as a member of ``enum_cls``.

    Matches by member value first, then by member name after upper-casing
    and turning dashes into underscores (``"in-progress"`` ->
    ``IN_PROGRESS``).
    """
    value = extract_required(text, path, ValueKind.STRING)
    return _to_enum(value, enum_cls, path)


def extract_optional_enum[E: Enum](
    text: str | None, path: str, enum_cls: type[E]
) -> E | None:
    """Like ``extract_enum`` but returns ``None`` instead of raising."""
    value = extract_optional(text, path, ValueKind.STRING)
    if value is None:
        return None
    try:
        return _to_enum(value, enum_cls, path)
    except TypeMismatchError as e:
        logger.debug("Optional enum field %s unavailable: %s", path, e)
        return None


def extract_raw(text: str, path: str) -> str | None:
    """Returns the undecoded text of the value at ``path``, or ``None``."""
    return resolve(text, path)


__all__ = [
    "BatchResult",
    "ElementDecoder",
    "ElementSkip",
    "EncodeConfig",
    "HotPathStats",
    "InvalidPathError",
    "JsonValue",
    "MalformedInputError",
    "MissingFieldError",
    "PathSegment",
    "SerializationError",
    "Skipped",
    "Span",
    "TypeMismatchError",
    "UnserializableValueError",
    "ValueGraph",
    "ValueKind",
    "clear_hot_path_stats",
    "decode_each",
    "decode_value",
    "dump",
    "dumps",
    "escape",
    "extract_array",
    "extract_array_length",
    "extract_array_interior",
    "extract_enum",
    "extract_object",
    "extract_optional",
    "extract_optional_enum",
    "extract_or_default",
    "extract_raw",
    "extract_required",
    "extract_string_list",
    "extract_string_map",
    "extract_value",
    "get_hot_path_stats",
    "locate",
    "parse_each",
    "parse_path",
    "put_if_present",
    "resolve_span",
    "serialize",
    "split_top_level_elements",
    "unescape",
]
