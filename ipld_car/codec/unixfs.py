"""
UnixFS payload codec.

A UnixFS ``Data`` message lives inside a dag-pb PBNode's data field::

    message Data {
        enum DataType {
            Raw = 0; Directory = 1; File = 2;
            Metadata = 3; Symlink = 4; HAMTShard = 5;
        }
        required DataType Type = 1;
        optional bytes Data = 2;
        optional uint64 filesize = 3;
        ...
    }

Only the first three fields are decoded. Anything else (blocksizes, hashType,
fanout, mode, mtime, or fields added later) is skipped so that payloads from
newer producers still decode.

See https://github.com/ipfs/specs/blob/main/UNIXFS.md
"""

from dataclasses import dataclass
from enum import IntEnum
import logging

from ipld_car.codec.protobuf import (
    WIRE_LENGTH_DELIMITED,
    WIRE_VARINT,
    encode_field,
    expect_wire_type,
    iter_fields,
)
from ipld_car.exceptions import MissingFieldError

logger = logging.getLogger(__name__)

UNIXFS_TYPE = 1
UNIXFS_DATA = 2
UNIXFS_FILESIZE = 3


class UnixFSType(IntEnum):
    Raw = 0
    Directory = 1
    File = 2
    Metadata = 3
    Symlink = 4
    HAMTShard = 5


@dataclass(frozen=True)
class UnixFSData:
    """
    Decoded UnixFS payload.

    ``type`` is a :class:`UnixFSType` for known values and a plain ``int``
    otherwise.
    """

    type: UnixFSType | int
    data: bytes | memoryview | None = None
    file_size: int | None = None


def _to_type(value: int) -> UnixFSType | int:
    try:
        return UnixFSType(value)
    except ValueError:
        logger.debug("Unknown UnixFS type %d passed through", value)
        return value


def decode_unixfs(data: bytes | bytearray | memoryview) -> UnixFSData:
    """
    Decode a UnixFS ``Data`` message.

    Example:
        >>> unixfs = decode_unixfs(block.node.data)
        >>> if unixfs.type == UnixFSType.File:
        ...     print(bytes(unixfs.data).decode())

    Raises:
        MissingFieldError: the required Type field is absent

    """
    type_value: int | None = None
    payload: memoryview | None = None
    file_size: int | None = None

    for pb_field in iter_fields(data):
        if pb_field.number == UNIXFS_TYPE:
            expect_wire_type(pb_field, WIRE_VARINT)
            type_value = pb_field.value  # type: ignore[assignment]
        elif pb_field.number == UNIXFS_DATA:
            expect_wire_type(pb_field, WIRE_LENGTH_DELIMITED)
            payload = pb_field.value  # type: ignore[assignment]
        elif pb_field.number == UNIXFS_FILESIZE:
            expect_wire_type(pb_field, WIRE_VARINT)
            file_size = pb_field.value  # type: ignore[assignment]
        # NOTE: other fields are ignored

    if type_value is None:
        raise MissingFieldError("UnixFS Data", "Type")

    return UnixFSData(type=_to_type(type_value), data=payload, file_size=file_size)


def encode_unixfs(unixfs: UnixFSData) -> bytes:
    """Encode a UnixFS ``Data`` message; None fields are omitted."""
    parts = [encode_field(UNIXFS_TYPE, WIRE_VARINT, int(unixfs.type))]
    if unixfs.data is not None:
        parts.append(encode_field(UNIXFS_DATA, WIRE_LENGTH_DELIMITED, unixfs.data))
    if unixfs.file_size is not None:
        parts.append(encode_field(UNIXFS_FILESIZE, WIRE_VARINT, unixfs.file_size))
    return b"".join(parts)
