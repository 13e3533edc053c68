"""
CAR (Content-Addressable aRchive) framing.

A CAR file is a sequence of varint-length-prefixed frames. The first frame is
the header, which this package treats as opaque bytes; every following frame
is a block laid out as ``packed CID || payload``.

Frames and block payloads are exposed as memoryview slices of the source
buffer, so splitting a file does not copy its contents.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
import logging

from ipld_car.codec.cid import CID, pack_cid, read_cid
from ipld_car.codec.dag_pb import PBNode, decode_pb_node
from ipld_car.config import CODEC_DAG_PB, CODEC_RAW
from ipld_car.exceptions import (
    BlockDecodeError,
    CarError,
    TruncatedFrameError,
    TruncatedInputError,
    UnsupportedCodecError,
)
from ipld_car.utils.varint import decode_varint, encode_varint_prefixed
from ipld_car.validation import validate_block

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CarBlockRecord:
    """
    One length-prefixed frame of a CAR file.

    Attributes:
        block_length: Declared length of the frame payload
        data: View of the payload inside the source buffer
        start_offset: Offset of the payload in the source buffer
        frame_offset: Offset of the frame's length prefix

    """

    block_length: int
    data: memoryview
    start_offset: int
    frame_offset: int


@dataclass(frozen=True)
class Block:
    """A decoded block; ``node`` is set only for dag-pb blocks."""

    cid: CID
    codec: int
    data: memoryview
    node: PBNode | None = None


@dataclass(frozen=True)
class CarFile:
    header: CarBlockRecord
    blocks: list[Block] = field(default_factory=list)


def iter_frames(buffer: bytes | bytearray | memoryview) -> Iterator[CarBlockRecord]:
    """
    Yield each varint-length-prefixed frame of ``buffer`` in order.

    Raises:
        TruncatedInputError: a length prefix runs past the end of the buffer
        TruncatedFrameError: a frame declares more bytes than remain

    """
    view = memoryview(buffer)
    offset = 0
    end = len(view)

    while offset < end:
        block_length, data_offset = decode_varint(view, offset)
        if data_offset + block_length > end:
            raise TruncatedFrameError(
                f"Frame at offset {offset} declares {block_length} bytes, "
                f"only {end - data_offset} remain",
                offset=offset,
                needed=block_length,
            )

        yield CarBlockRecord(
            block_length=block_length,
            data=view[data_offset : data_offset + block_length],
            start_offset=data_offset,
            frame_offset=offset,
        )

        # Skip block
        offset = data_offset + block_length


def split_frames(buffer: bytes | bytearray | memoryview) -> list[CarBlockRecord]:
    """
    Split a CAR file into its frames.

    The first record is the header; callers decide what to do with it.
    """
    records = list(iter_frames(buffer))
    logger.debug("Split %d bytes into %d frames", len(buffer), len(records))
    return records


def decode_block(
    frame: bytes | bytearray | memoryview, offset: int | None = None
) -> Block:
    """
    Decode a block frame into its CID, codec, payload and (for dag-pb) node.

    Args:
        frame: The frame payload, ``packed CID || block data``
        offset: Position of the frame in the CAR file, used in error messages

    Raises:
        UnsupportedCodecError: the CID's codec is neither raw nor dag-pb
        BlockDecodeError: the dag-pb payload is malformed; the original error
            is chained as ``__cause__``

    """
    view = memoryview(frame)
    cid, cid_end = read_cid(view)
    block_data = view[cid_end:]

    if cid.codec == CODEC_RAW:
        return Block(cid=cid, codec=cid.codec, data=block_data)

    if cid.codec == CODEC_DAG_PB:
        try:
            node = decode_pb_node(block_data)
        except CarError as e:
            where = "" if offset is None else f" at offset {offset}"
            raise BlockDecodeError(
                f"Error reading PBNode of block {cid}{where}: {e}",
                cid=cid,
                codec=cid.codec,
                offset=offset,
            ) from e
        return Block(cid=cid, codec=cid.codec, data=block_data, node=node)

    raise UnsupportedCodecError(cid.codec)


def encode_block(cid: CID, payload: bytes | memoryview) -> bytes:
    """Lay out a block frame payload: packed CID followed by the data."""
    return pack_cid(cid) + bytes(payload)


def encode_frames(frames: Iterable[bytes | memoryview]) -> bytes:
    """
    Join frame payloads into a CAR byte stream, each with a varint prefix.

    Example:
        >>> car = encode_frames([header, encode_block(cid, payload)])

    """
    return b"".join(encode_varint_prefixed(frame) for frame in frames)


def split_header(
    buffer: bytes | bytearray | memoryview,
) -> tuple[CarBlockRecord, list[CarBlockRecord]]:
    """
    Split a CAR file into its header record and its block records.

    Raises:
        TruncatedInputError: the buffer holds no frame at all

    """
    frames = split_frames(buffer)
    if not frames:
        raise TruncatedInputError("CAR file has no header frame", offset=0)

    header, *records = frames
    return header, records


def decode_record(record: CarBlockRecord, validate: bool = True) -> Block:
    """Decode one block record and, unless ``validate`` is False, check its hash."""
    block = decode_block(record.data, offset=record.frame_offset)
    if validate:
        validate_block(block.cid, block.data)
    return block


def load_car(
    buffer: bytes | bytearray | memoryview, validate: bool = True
) -> CarFile:
    """
    Split and decode a whole CAR file held in memory.

    Every block after the header is decoded and, unless ``validate`` is
    False, checked against its CID before it is returned.
    """
    header, records = split_header(buffer)
    blocks = [decode_record(record, validate) for record in records]
    return CarFile(header=header, blocks=blocks)
