import logging

from ipld_car.config import (
    MAX_VARINT_BYTES,
    MAX_VARINT_VALUE,
)
from ipld_car.exceptions import (
    TruncatedInputError,
    ValueOutOfRangeError,
)

logger = logging.getLogger("ipld_car.utils.varint")

# Unsigned LEB128 (multiformats unsigned-varint)
# Reference: https://github.com/multiformats/unsigned-varint

LOW_MASK = 2**7 - 1
HIGH_MASK = 2**7


def encode_varint(value: int) -> bytes:
    """Encode an unsigned integer as a varint."""
    if value < 0:
        raise ValueOutOfRangeError("Cannot encode negative value as varint", value)
    if value > MAX_VARINT_VALUE:
        raise ValueOutOfRangeError(f"Value {value} does not fit in 64 bits", value)

    result = bytearray()
    while value >= HIGH_MASK:
        result.append((value & LOW_MASK) | HIGH_MASK)
        value >>= 7
    result.append(value)
    return bytes(result)


def decode_varint(
    buffer: bytes | bytearray | memoryview, offset: int = 0
) -> tuple[int, int]:
    """
    Decode a varint starting at ``offset``.

    Returns:
        tuple[int, int]: (value, offset just past the terminating byte)

    Raises:
        TruncatedInputError: the buffer ends before a byte with the high bit clear
        ValueOutOfRangeError: the varint is longer than 64 bits or not minimally
            encoded

    """
    result = 0
    shift = 0
    position = offset
    end = len(buffer)

    while True:
        if position >= end:
            raise TruncatedInputError(
                f"Varint at offset {offset} runs past end of buffer", offset=offset
            )
        if position - offset >= MAX_VARINT_BYTES:
            raise ValueOutOfRangeError(
                f"Varint at offset {offset} exceeds {MAX_VARINT_BYTES} bytes"
            )

        byte = buffer[position]
        position += 1
        result |= (byte & LOW_MASK) << shift

        if not byte & HIGH_MASK:
            break
        shift += 7

    if byte == 0 and position - offset > 1:
        raise ValueOutOfRangeError(
            f"Varint at offset {offset} is not minimally encoded", result
        )
    if result > MAX_VARINT_VALUE:
        raise ValueOutOfRangeError(
            f"Varint at offset {offset} does not fit in 64 bits", result
        )

    return result, position


def encode_varint_prefixed(data: bytes | bytearray | memoryview) -> bytes:
    """Encode data with a varint length prefix."""
    return encode_varint(len(data)) + bytes(data)
