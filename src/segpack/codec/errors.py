"""Errors raised while decoding wire data."""


class DecodeError(ValueError):
    """Base class for wire decoding failures.

    Attributes:
        offset: Byte offset (within the enclosing message) where decoding stopped
    """

    def __init__(self, message: str, offset: int = 0):
        super().__init__(f"{message} (at byte {offset})")
        self.offset = offset


class TruncatedError(DecodeError):
    """The buffer ended before a field was fully read."""


class MalformedError(DecodeError):
    """A length, key or value is inconsistent with the schema."""


class EmptyUnionError(DecodeError):
    """A piece carried none of the known body branches."""
