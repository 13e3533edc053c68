"""
Minimal protocol buffer wire-format reader and writer.

Only the wire types used by DAG-PB and UnixFS are supported: varint (0),
64-bit fixed (1) and length-delimited (2). The codec has no knowledge of any
message schema; :mod:`ipld_car.codec.dag_pb` and :mod:`ipld_car.codec.unixfs`
fold the ``(number, value)`` pairs produced here into their own records.
"""

from collections.abc import Callable, Iterator
from typing import NamedTuple, Union

from ipld_car.config import MAX_VARINT_VALUE
from ipld_car.exceptions import (
    TruncatedInputError,
    UnsupportedWireTypeError,
    ValueOutOfRangeError,
)
from ipld_car.utils.varint import decode_varint, encode_varint

WIRE_VARINT = 0
WIRE_FIXED64 = 1
WIRE_LENGTH_DELIMITED = 2

FIXED64_SIZE = 8

FieldValue = Union[int, memoryview]


class Field(NamedTuple):
    number: int
    wire_type: int
    value: FieldValue


def iter_fields(buffer: bytes | bytearray | memoryview) -> Iterator[Field]:
    """
    Yield every field of a protobuf message in encounter order.

    Length-delimited values are memoryview slices of ``buffer``; no bytes are
    copied.

    Raises:
        TruncatedInputError: a tag, value or length runs past the end
        UnsupportedWireTypeError: a wire type other than 0, 1 or 2

    """
    view = memoryview(buffer)
    offset = 0
    end = len(view)

    while offset < end:
        tag, offset = decode_varint(view, offset)
        field_number = tag >> 3
        wire_type = tag & 0x7

        value: FieldValue
        if wire_type == WIRE_VARINT:
            value, offset = decode_varint(view, offset)
        elif wire_type == WIRE_FIXED64:
            if offset + FIXED64_SIZE > end:
                raise TruncatedInputError(
                    f"Field {field_number}: 64-bit value at offset {offset} "
                    "runs past end of buffer",
                    offset=offset,
                    needed=FIXED64_SIZE,
                )
            value = int.from_bytes(view[offset : offset + FIXED64_SIZE], "little")
            offset += FIXED64_SIZE
        elif wire_type == WIRE_LENGTH_DELIMITED:
            length, offset = decode_varint(view, offset)
            if offset + length > end:
                raise TruncatedInputError(
                    f"Field {field_number}: {length} bytes at offset {offset} "
                    "run past end of buffer",
                    offset=offset,
                    needed=length,
                )
            value = view[offset : offset + length]
            offset += length
        else:
            raise UnsupportedWireTypeError(wire_type, field_number)

        yield Field(field_number, wire_type, value)


def decode_fields(
    buffer: bytes | bytearray | memoryview,
    visitor: Callable[[int, FieldValue], None],
) -> None:
    """Call ``visitor(field_number, value)`` for each field in ``buffer``."""
    for field in iter_fields(buffer):
        visitor(field.number, field.value)


def expect_wire_type(field: Field, expected: int) -> None:
    """Reject a known field that arrived with the wrong wire type."""
    if field.wire_type != expected:
        raise UnsupportedWireTypeError(field.wire_type, field.number)


def encode_field(
    field_number: int,
    wire_type: int,
    value: int | bytes | bytearray | memoryview,
) -> bytes:
    """
    Encode one field: its tag followed by the wire-type specific value.

    Length-delimited values are prefixed with their own encoded length.
    """
    if field_number < 1:
        raise ValueOutOfRangeError(
            f"Invalid field number: {field_number}", field_number
        )
    if wire_type not in (WIRE_VARINT, WIRE_FIXED64, WIRE_LENGTH_DELIMITED):
        raise UnsupportedWireTypeError(wire_type, field_number)

    tag = encode_varint((field_number << 3) | wire_type)

    if wire_type == WIRE_LENGTH_DELIMITED:
        if isinstance(value, int):
            raise TypeError(f"Field {field_number}: expected bytes, got int")
        payload = bytes(value)
        return tag + encode_varint(len(payload)) + payload

    if not isinstance(value, int):
        raise TypeError(f"Field {field_number}: expected int, got {type(value)}")
    if wire_type == WIRE_VARINT:
        return tag + encode_varint(value)
    if not 0 <= value <= MAX_VARINT_VALUE:
        raise ValueOutOfRangeError(
            f"Field {field_number}: {value} does not fit in 64 bits", value
        )
    return tag + value.to_bytes(FIXED64_SIZE, "little")
