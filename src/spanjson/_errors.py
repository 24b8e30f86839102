"""Exception hierarchy for path extraction and serialization failures."""

type Position = int


class SerializationError(ValueError):
    """
    Base class for every failure raised by the extraction and encoding API.

    Carries the offending path (empty for serializer errors) so service
    code can report which response field could not be read.
    """

    def __init__(self, msg: str, path: str = "") -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")

        self.msg = msg
        self.path = path

        super().__init__(f"{msg}: {path}" if path else msg)


class MissingFieldError(SerializationError):
    """Raised when a required path is absent or holds ``null``."""


class MalformedInputError(MissingFieldError):
    """
    Raised when scanning hits an unterminated string or unbalanced delimiter.

    Subclasses MissingFieldError so callers that only distinguish "have a
    value" from "have none" keep treating truncated documents as absent
    fields. Position information mirrors a decode error.
    """

    def __init__(
        self, msg: str, path: str = "", doc: str = "", pos: Position = 0
    ) -> None:
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.doc = doc
        self.pos = pos
        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1

        super().__init__(
            f"{msg} at line {self.lineno}, column {self.colno}", path
        )
        self.msg = msg


class TypeMismatchError(SerializationError):
    """Raised when a value is present but cannot be decoded as requested."""


class InvalidPathError(SerializationError):
    """Raised for a syntactically invalid path expression."""


class UnserializableValueError(SerializationError, TypeError):
    """Raised when a value graph contains a node the encoder cannot render."""


__all__ = [
    "InvalidPathError",
    "MalformedInputError",
    "MissingFieldError",
    "Position",
    "SerializationError",
    "TypeMismatchError",
    "UnserializableValueError",
]
