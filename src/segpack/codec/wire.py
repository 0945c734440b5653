"""Tagged-field wire primitives (protocol-buffers compatible).

A message is a sequence of fields. Each field starts with a varint key
``field_number << 3 | wire_type`` followed by its payload:

- VARINT (0): base-128 varint
- FIXED64 (1): 8 bytes little endian
- LEN (2): varint length, then that many bytes
- FIXED32 (5): 4 bytes little endian
- START_GROUP (3) ... END_GROUP (4): deprecated groups, skipped as opaque bodies
"""

from dataclasses import dataclass
from typing import Iterator, Union

import numpy as np

from segpack.codec.errors import MalformedError, TruncatedError

VARINT = 0
FIXED64 = 1
LEN = 2
START_GROUP = 3
END_GROUP = 4
FIXED32 = 5

WIRE_TYPE_NAMES = {
    VARINT: "varint",
    FIXED64: "fixed64",
    LEN: "length-delimited",
    START_GROUP: "group",
    END_GROUP: "group end",
    FIXED32: "fixed32",
}

MAX_VARINT_BYTES = 10
_UINT64_MASK = (1 << 64) - 1
_FLOAT32_ZERO = b"\x00\x00\x00\x00"


def float32_bytes(value: float) -> bytes:
    """Little-endian IEEE-754 single-precision bytes for ``value``."""
    with np.errstate(over="ignore"):
        return np.asarray(value, dtype="<f4").tobytes()


def float32_from_bytes(data: bytes) -> float:
    return float(np.frombuffer(data, dtype="<f4", count=1)[0])


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer (negatives as 64-bit two's complement)."""
    value &= _UINT64_MASK
    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(data: bytes, pos: int, base: int = 0) -> tuple[int, int]:
    """Read a varint at ``pos``.

    Returns:
        (value, position after the varint)

    Raises:
        TruncatedError: data ends before the last varint byte
        MalformedError: varint longer than 10 bytes
    """
    result = 0
    shift = 0
    start = pos
    while True:
        if pos - start >= MAX_VARINT_BYTES:
            raise MalformedError("varint longer than 10 bytes", base + start)
        if pos >= len(data):
            raise TruncatedError("data ended inside a varint", base + start)
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & _UINT64_MASK, pos
        shift += 7


@dataclass(frozen=True)
class Field:
    """One decoded field.

    ``value`` is an int for VARINT fields and raw bytes otherwise.
    ``offset`` is the absolute position of the payload in the outermost buffer.
    """

    number: int
    wire_type: int
    value: Union[int, bytes]
    offset: int


def _read_key(data: bytes, pos: int, base: int) -> tuple[int, int, int]:
    key_start = pos
    key, pos = decode_varint(data, pos, base)
    number = key >> 3
    if number == 0:
        raise MalformedError("field number 0 is reserved", base + key_start)
    return number, key & 0x7, pos


def _read_value(data: bytes, pos: int, number: int, wire_type: int, base: int) -> tuple[Union[int, bytes], int]:
    """Read the payload of a non-group field starting at ``pos``."""
    end = len(data)
    if wire_type == VARINT:
        return decode_varint(data, pos, base)
    if wire_type == LEN:
        length, pos = decode_varint(data, pos, base)
        if length > end - pos:
            raise MalformedError(
                f"field {number} declares {length} bytes but only {end - pos} remain",
                base + pos,
            )
        return data[pos : pos + length], pos + length
    if wire_type in (FIXED32, FIXED64):
        size = 4 if wire_type == FIXED32 else 8
        if size > end - pos:
            raise TruncatedError(f"data ended inside fixed field {number}", base + pos)
        return data[pos : pos + size], pos + size
    raise MalformedError(f"unsupported wire type {wire_type} for field {number}", base + pos)


def _skip_group(data: bytes, pos: int, number: int, base: int) -> tuple[int, int]:
    """Find the END_GROUP matching ``number``.

    Returns:
        (position of the END_GROUP key, position after it)
    """
    open_groups = [number]
    while True:
        if pos >= len(data):
            raise TruncatedError(f"data ended inside group {open_groups[-1]}", base + pos)
        key_start = pos
        inner, wire_type, pos = _read_key(data, pos, base)
        if wire_type == START_GROUP:
            open_groups.append(inner)
        elif wire_type == END_GROUP:
            if inner != open_groups.pop():
                raise MalformedError(f"group end {inner} does not match its start", base + key_start)
            if not open_groups:
                return key_start, pos
        else:
            _, pos = _read_value(data, pos, inner, wire_type, base)


def iter_fields(data: bytes, base: int = 0) -> Iterator[Field]:
    """Yield the fields of one message in wire order.

    A group is yielded with its body (without the END_GROUP key) as value.

    Args:
        data: The message body
        base: Absolute offset of ``data`` in the outermost buffer (for errors)
    """
    end = len(data)
    pos = 0
    while pos < end:
        key_start = pos
        number, wire_type, pos = _read_key(data, pos, base)
        value_start = pos

        if wire_type == START_GROUP:
            body_end, pos = _skip_group(data, pos, number, base)
            value = data[value_start:body_end]
        elif wire_type == END_GROUP:
            raise MalformedError(f"group end {number} without a start", base + key_start)
        else:
            value, pos = _read_value(data, pos, number, wire_type, base)

        yield Field(number=number, wire_type=wire_type, value=value, offset=base + value_start)


class WireWriter:
    """Append-only message builder.

    Scalar writers skip default values (False, 0, +0.0, empty string), so the
    output only carries fields that differ from their defaults.
    """

    def __init__(self) -> None:
        self._buf = bytearray()

    def _key(self, number: int, wire_type: int) -> None:
        self._buf += encode_varint(number << 3 | wire_type)

    def varint(self, number: int, value: int) -> None:
        if value:
            self._key(number, VARINT)
            self._buf += encode_varint(value)

    def flag(self, number: int, value: bool) -> None:
        self.varint(number, 1 if value else 0)

    def float32(self, number: int, value: float) -> None:
        data = float32_bytes(value)
        # -0.0 has a non-zero bit pattern and is kept
        if data != _FLOAT32_ZERO:
            self._key(number, FIXED32)
            self._buf += data

    def raw(self, number: int, value: bytes, always: bool = False) -> None:
        if value or always:
            self._key(number, LEN)
            self._buf += encode_varint(len(value))
            self._buf += value

    def string(self, number: int, value: str) -> None:
        self.raw(number, value.encode("utf-8"))

    def message(self, number: int, body: bytes, always: bool = False) -> None:
        """Write an embedded message; empty bodies are skipped unless ``always``."""
        self.raw(number, body, always=always)

    def getvalue(self) -> bytes:
        return bytes(self._buf)
