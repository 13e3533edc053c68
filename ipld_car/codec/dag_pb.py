"""
DAG-PB codec for IPFS MerkleDAG nodes.

This module decodes and encodes the two-message schema IPFS uses to represent
files and directories as Merkle DAGs::

    message PBLink {
        optional bytes Hash = 1;   // CID of the target
        optional string Name = 2;  // UTF-8 name, unique per node
        optional uint64 Tsize = 3; // cumulative size of the target
    }

    message PBNode {
        repeated PBLink Links = 2;
        optional bytes Data = 1;
    }

The schema is closed: unknown field numbers are rejected. Nodes are written
links-first, the field order reference encoders produce, so that re-encoding
a decoded node reproduces the original bytes.
"""

from dataclasses import dataclass, field
import logging

from ipld_car.codec.protobuf import (
    WIRE_LENGTH_DELIMITED,
    WIRE_VARINT,
    encode_field,
    expect_wire_type,
    iter_fields,
)
from ipld_car.exceptions import (
    MissingFieldError,
    UnsupportedFieldError,
    ValueOutOfRangeError,
)

logger = logging.getLogger(__name__)

PBLINK_HASH = 1
PBLINK_NAME = 2
PBLINK_TSIZE = 3

PBNODE_DATA = 1
PBNODE_LINKS = 2


@dataclass(frozen=True)
class PBLink:
    """Represents a named, sized link to another block in the DAG."""

    cid: bytes
    name: str = ""
    size: int = 0

    def __post_init__(self) -> None:
        """Validate link data."""
        if not isinstance(self.cid, (bytes, bytearray, memoryview)):
            raise TypeError(f"cid must be bytes, got {type(self.cid)}")
        if not isinstance(self.name, str):
            raise TypeError(f"name must be str, got {type(self.name)}")
        if not isinstance(self.size, int):
            raise TypeError(f"size must be int, got {type(self.size)}")
        if self.size < 0:
            raise ValueOutOfRangeError(
                f"size must be non-negative, got {self.size}", self.size
            )


@dataclass(frozen=True)
class PBNode:
    """A MerkleDAG node: optional opaque data plus ordered links."""

    data: bytes | memoryview | None = None
    links: tuple[PBLink, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable of links; store an immutable tuple
        object.__setattr__(self, "links", tuple(self.links))


def decode_pb_link(data: bytes | bytearray | memoryview) -> PBLink:
    """
    Decode a serialized PBLink.

    Raises:
        UnsupportedFieldError: a field number other than 1, 2 or 3
        MissingFieldError: the Hash field is absent

    """
    cid: bytes | None = None
    name = ""
    size = 0

    for pb_field in iter_fields(data):
        if pb_field.number == PBLINK_HASH:
            expect_wire_type(pb_field, WIRE_LENGTH_DELIMITED)
            cid = bytes(pb_field.value)  # type: ignore[arg-type]
        elif pb_field.number == PBLINK_NAME:
            expect_wire_type(pb_field, WIRE_LENGTH_DELIMITED)
            # Invalid UTF-8 is replaced with U+FFFD
            name = str(pb_field.value, "utf-8", "replace")  # type: ignore[arg-type]
        elif pb_field.number == PBLINK_TSIZE:
            expect_wire_type(pb_field, WIRE_VARINT)
            size = pb_field.value  # type: ignore[assignment]
        else:
            raise UnsupportedFieldError("PBLink", pb_field.number)

    if cid is None:
        raise MissingFieldError("PBLink", "Hash")

    return PBLink(cid=cid, name=name, size=size)


def decode_pb_node(data: bytes | bytearray | memoryview) -> PBNode:
    """
    Decode a serialized PBNode.

    Links keep their encounter order, which for compliant encoders is the
    directory listing order. Data and Links may appear in either order.

    Example:
        >>> node = decode_pb_node(block.data)
        >>> for link in node.links:
        ...     print(f"{link.name} ({link.size})")

    """
    node_data: memoryview | None = None
    raw_links: list[memoryview] = []

    for pb_field in iter_fields(data):
        if pb_field.number == PBNODE_DATA:
            expect_wire_type(pb_field, WIRE_LENGTH_DELIMITED)
            node_data = pb_field.value  # type: ignore[assignment]
        elif pb_field.number == PBNODE_LINKS:
            expect_wire_type(pb_field, WIRE_LENGTH_DELIMITED)
            raw_links.append(pb_field.value)  # type: ignore[arg-type]
        else:
            raise UnsupportedFieldError("PBNode", pb_field.number)

    links = tuple(decode_pb_link(raw) for raw in raw_links)
    logger.debug(
        "Decoded PBNode with %d links and %s data",
        len(links),
        "no" if node_data is None else f"{len(node_data)} bytes of",
    )
    return PBNode(data=node_data, links=links)


def encode_pb_link(link: PBLink) -> bytes:
    """Encode a PBLink; Hash, Name and Tsize are always written."""
    return b"".join(
        [
            encode_field(PBLINK_HASH, WIRE_LENGTH_DELIMITED, link.cid),
            encode_field(PBLINK_NAME, WIRE_LENGTH_DELIMITED, link.name.encode("utf-8")),
            encode_field(PBLINK_TSIZE, WIRE_VARINT, link.size),
        ]
    )


def encode_pb_node(node: PBNode) -> bytes:
    """
    Encode a PBNode with all links before the data field.

    Example:
        >>> from ipld_car.codec.unixfs import UnixFSData, UnixFSType, encode_unixfs
        >>> node = PBNode(
        ...     data=encode_unixfs(UnixFSData(type=UnixFSType.Directory)),
        ...     links=(PBLink(cid=child_cid, name="index.html", size=13779),),
        ... )
        >>> encoded = encode_pb_node(node)

    """
    parts = [
        encode_field(PBNODE_LINKS, WIRE_LENGTH_DELIMITED, encode_pb_link(link))
        for link in node.links
    ]
    if node.data is not None:
        parts.append(encode_field(PBNODE_DATA, WIRE_LENGTH_DELIMITED, node.data))
    return b"".join(parts)
