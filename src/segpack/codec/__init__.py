"""Binary and JSON codecs for Segments documents."""

from segpack.codec.errors import DecodeError, EmptyUnionError, MalformedError, TruncatedError
from segpack.codec.segments import decode, encode

__all__ = [
    "encode",
    "decode",
    "DecodeError",
    "TruncatedError",
    "MalformedError",
    "EmptyUnionError",
]
