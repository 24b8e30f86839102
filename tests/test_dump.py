"""
JSON encoding functionality tests.

Validates compact rendering of request bodies: insertion order, the
escape set and its stricter variants, enums, the default hook, and the
errors raised for values JSON cannot represent.
"""

import decimal
from enum import Enum
from io import StringIO

import pytest

import spanjson


class Role(Enum):
    SYSTEM = "system"
    USER = "user"


def test_dump() -> None:
    """
    Validates dump to file-like object.
    """
    sio = StringIO()
    spanjson.dump({}, sio)
    assert sio.getvalue() == "{}"


def test_dump_requires_writer() -> None:
    """
    Validates dump rejects targets without a write method.
    """
    with pytest.raises(TypeError, match="write"):
        spanjson.dump({}, "out.json")  # type: ignore[arg-type]


def test_dumps() -> None:
    """
    Validates dumps to string.
    """
    assert spanjson.dumps({}) == "{}"
    assert spanjson.dumps([]) == "[]"
    assert spanjson.serialize is spanjson.dumps


def test_request_body_is_compact_and_ordered() -> None:
    """
    Validates insertion order and no whitespace between tokens.
    """
    body = {"model": "x", "temperature": 0.7, "stop": None}
    assert (
        spanjson.dumps(body) == '{"model":"x","temperature":0.7,"stop":null}'
    )

    nested = {"z": 1, "a": [True, False, None], "m": {"k": (1, 2.5)}}
    assert (
        spanjson.dumps(nested)
        == '{"z":1,"a":[true,false,null],"m":{"k":[1,2.5]}}'
    )


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, "0"),
        (-42, "-42"),
        (2**63, "9223372036854775808"),
        (1.0, "1.0"),
        (0.1, "0.1"),
        (1e-7, "1e-07"),
        (decimal.Decimal("1.10"), "1.10"),
        (True, "true"),
        ("", '""'),
    ],
)
def test_encode_scalars(value: object, expected: str) -> None:
    """
    Validates number, boolean and string rendering.
    """
    assert spanjson.dumps(value) == expected


def test_encode_enums() -> None:
    """
    Validates enums render by value as values and keys.
    """
    message = {"role": Role.USER, "content": "hi"}
    assert spanjson.dumps(message) == '{"role":"user","content":"hi"}'
    assert spanjson.dumps({Role.SYSTEM: 1}) == '{"system":1}'


@pytest.mark.parametrize(
    "s,expected",
    [
        ('say "hi"', r'say \"hi\"'),
        ("back\\slash", r"back\\slash"),
        ("a\nb\rc\td", r"a\nb\rc\td"),
        ("\b\f", r"\b\f"),
        ("a/b", "a/b"),
        ("café", "café"),
        ("\x01\x1f", "\x01\x1f"),
    ],
)
def test_escape_basic_set(s: str, expected: str) -> None:
    """
    Validates only the basic escape set is rewritten by default.
    """
    assert spanjson.escape(s) == expected
    assert spanjson.dumps(s) == f'"{expected}"'


def test_escape_controls() -> None:
    """
    Validates the stricter mode escapes every control character.
    """
    assert spanjson.escape("\x01a\n", escape_controls=True) == r"\u0001a\n"
    assert spanjson.dumps("\x1f", escape_controls=True) == r'"\u001f"'


def test_ensure_ascii() -> None:
    """
    Validates non-ASCII characters become \\u escapes, astral ones as pairs.
    """
    assert spanjson.dumps("café", ensure_ascii=True) == r'"caf\u00e9"'
    assert (
        spanjson.dumps("\U0001f600", ensure_ascii=True)
        == r'"\ud83d\ude00"'
    )
    assert spanjson.dumps({"é": 1}, ensure_ascii=True) == r'{"\u00e9":1}'


@pytest.mark.parametrize(
    "value",
    [float("nan"), float("inf"), -float("inf"), decimal.Decimal("NaN")],
)
def test_non_finite_numbers(value: object) -> None:
    """
    Validates non-finite numbers are rejected.
    """
    with pytest.raises(
        spanjson.UnserializableValueError, match="Out of range"
    ):
        spanjson.dumps({"temperature": value})


def test_non_string_keys() -> None:
    """
    Validates keys that are not strings are rejected as a TypeError.
    """
    with pytest.raises(TypeError, match="keys must be str, not int"):
        spanjson.dumps({1: "one"})

    with pytest.raises(spanjson.SerializationError):
        spanjson.dumps({b"key": "value"})


def test_unsupported_value_reports_location() -> None:
    """
    Validates the error names the type and carries the nesting context.
    """
    body = {"messages": [{"role": "user"}, {"content": object()}]}
    with pytest.raises(spanjson.UnserializableValueError) as exc_info:
        spanjson.dumps(body)

    err = exc_info.value
    assert str(err) == "Object of type object is not JSON serializable"
    assert err.__notes__ == [
        "when serializing dict item 'content'",
        "when serializing list item 1",
        "when serializing dict item 'messages'",
    ]


def test_default_hook() -> None:
    """
    Validates the default hook converts unsupported values.
    """
    body = {"ids": {3, 1, 2}}
    assert spanjson.dumps(body, default=sorted) == '{"ids":[1,2,3]}'


def test_encode_config_validation() -> None:
    """
    Validates configuration values are type checked.
    """
    with pytest.raises(TypeError, match="escape_controls"):
        spanjson.EncodeConfig(escape_controls="yes")  # type: ignore[arg-type]
    with pytest.raises(TypeError, match="default"):
        spanjson.EncodeConfig(default=42)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        spanjson.dumps({}, indent=2)


def test_put_if_present() -> None:
    """
    Validates optional request fields are omitted rather than null.
    """
    body: dict[str, object] = {"model": "x"}
    spanjson.put_if_present(body, "temperature", 0.7)
    spanjson.put_if_present(body, "stop", None)
    spanjson.put_if_present(body, "stream", False)
    assert (
        spanjson.dumps(body)
        == '{"model":"x","temperature":0.7,"stream":false}'
    )


def test_long_list() -> None:
    """
    Validates a long flat list encodes without separators going astray.
    """
    n_items = 100_000
    encoded = spanjson.dumps([1] * n_items)
    assert len(encoded) == n_items * 2 + 1
    assert encoded[:1] == "["
    assert encoded[-2:] == "1]"
    assert encoded[1:-2] == "1," * (n_items - 1)
