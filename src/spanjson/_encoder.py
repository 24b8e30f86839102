"""
Compact JSON rendering of request value graphs.

Mappings render in their iteration order (no key sorting), sequences in
sequence order, with no whitespace between tokens.
"""

import decimal
import math
from collections.abc import Callable
from collections.abc import Mapping
from collections.abc import MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import IO
from typing import Any

from ._errors import UnserializableValueError
from ._profiling import ProfileContext

# More permissive type for caller-built graphs
ValueGraph = Any

_BASIC_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}
_CONTROL_LIMIT = 0x20
_BMP_LIMIT = 0xFFFF

_BASIC_TABLE = str.maketrans(_BASIC_ESCAPES)
_CONTROL_TABLE = str.maketrans(
    {
        **{chr(i): f"\\u{i:04x}" for i in range(_CONTROL_LIMIT)},
        **_BASIC_ESCAPES,
    }
)


@dataclass(frozen=True)
class EncodeConfig:
    """
    Configures JSON encoding behavior with immutable settings.

    ``escape_controls`` additionally writes control characters outside the
    basic escape set as ``\\u00XX``; ``ensure_ascii`` writes every non-ASCII
    character as a ``\\u`` escape; ``default`` converts otherwise
    unsupported objects into a serializable value.
    """

    escape_controls: bool = False
    ensure_ascii: bool = False
    default: Callable[[Any], Any] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.escape_controls, bool):
            raise TypeError("escape_controls must be a boolean")
        if not isinstance(self.ensure_ascii, bool):
            raise TypeError("ensure_ascii must be a boolean")
        if self.default is not None and not callable(self.default):
            raise TypeError("default must be callable")


def _ascii_escape(char: str) -> str:
    code_point = ord(char)
    if code_point > _BMP_LIMIT:
        code_point -= 0x10000
        high = 0xD800 | (code_point >> 10)
        low = 0xDC00 | (code_point & 0x3FF)
        return f"\\u{high:04x}\\u{low:04x}"
    return f"\\u{code_point:04x}"


def escape(
    s: str, escape_controls: bool = False, ensure_ascii: bool = False
) -> str:
    """
    Escapes a string for use between JSON quotes.

    By default only backslash, quote, newline, carriage return, tab,
    backspace and form feed are escaped; other characters pass through.
    """
    escaped = s.translate(_CONTROL_TABLE if escape_controls else _BASIC_TABLE)
    if ensure_ascii and not escaped.isascii():
        escaped = "".join(
            c if c.isascii() else _ascii_escape(c) for c in escaped
        )
    return escaped


def _encode_string(s: str, config: EncodeConfig) -> str:
    return '"' + escape(s, config.escape_controls, config.ensure_ascii) + '"'


def _encode_number(n: int | float | decimal.Decimal) -> str:
    """Encode numeric values with JSON compliance."""
    if isinstance(n, decimal.Decimal):
        if not n.is_finite():
            raise UnserializableValueError(
                "Out of range decimal values are not JSON compliant"
            )
        return str(n)
    if isinstance(n, float) and not math.isfinite(n):
        raise UnserializableValueError(
            "Out of range float values are not JSON compliant"
        )
    return repr(n) if isinstance(n, float) else str(int(n))


def _encode_key(key: Any) -> str:
    if isinstance(key, Enum):
        key = key.value
    if not isinstance(key, str):
        raise UnserializableValueError(
            f"keys must be str, not {type(key).__name__}"
        )
    return key


def _encode_mapping(m: Mapping[Any, Any], config: EncodeConfig) -> str:
    if not m:
        return "{}"

    items = []
    for key, value in m.items():
        encoded_key = _encode_string(_encode_key(key), config)
        try:
            encoded_value = _encode_value(value, config)
        except UnserializableValueError as e:
            e.add_note(f"when serializing {type(m).__name__} item {key!r}")
            raise
        items.append(f"{encoded_key}:{encoded_value}")
    return "{" + ",".join(items) + "}"


def _encode_array(
    arr: list[Any] | tuple[Any, ...], config: EncodeConfig
) -> str:
    if not arr:
        return "[]"

    items = []
    for index, item in enumerate(arr):
        try:
            items.append(_encode_value(item, config))
        except UnserializableValueError as e:
            e.add_note(f"when serializing {type(arr).__name__} item {index}")
            raise
    return "[" + ",".join(items) + "]"


def _encode_value(obj: ValueGraph, config: EncodeConfig) -> str:  # noqa: PLR0911
    """Encode any supported value graph node."""
    if obj is None:
        return "null"
    elif obj is True:
        return "true"
    elif obj is False:
        return "false"
    elif isinstance(obj, Enum):
        return _encode_value(obj.value, config)
    elif isinstance(obj, str):
        return _encode_string(obj, config)
    elif isinstance(obj, int | float | decimal.Decimal):
        return _encode_number(obj)
    elif isinstance(obj, Mapping):
        return _encode_mapping(obj, config)
    elif isinstance(obj, list | tuple):
        return _encode_array(obj, config)
    elif config.default is not None:
        return _encode_value(config.default(obj), config)
    else:
        msg = f"Object of type {type(obj).__name__} is not JSON serializable"
        raise UnserializableValueError(msg)


def dumps(obj: ValueGraph, **kwargs: Any) -> str:
    """
    Serializes a value graph to compact JSON text.

    Keyword arguments populate an EncodeConfig.
    """
    config = EncodeConfig(**kwargs)
    with ProfileContext("dumps"):
        return _encode_value(obj, config)


serialize = dumps


def dump(obj: ValueGraph, fp: IO[str], **kwargs: Any) -> None:
    """Serializes a value graph to a text file-like object."""
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(dumps(obj, **kwargs))


def put_if_present(
    mapping: MutableMapping[str, Any], key: str, value: Any
) -> None:
    """
    Adds ``key`` only when ``value`` is not ``None``.

    Request bodies leave optional fields out entirely rather than sending
    ``null``; an explicit ``None`` stored directly still renders as ``null``.
    """
    if value is not None:
        mapping[key] = value


__all__ = [
    "EncodeConfig",
    "ValueGraph",
    "dump",
    "dumps",
    "escape",
    "put_if_present",
    "serialize",
]
