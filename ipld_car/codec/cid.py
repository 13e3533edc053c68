"""
CID (Content Identifier) parsing and packing.

Two binary layouts are supported:

- CIDv0: a bare SHA-256 multihash, ``<0x12><0x20><32-byte digest>``. The
  codec is implicitly dag-pb.
- CIDv1: ``<version><codec><hash-type><hash-length><digest>``, each prefix
  integer an unsigned varint (one byte for every supported value).

Only SHA-256 with a 32-byte digest is accepted. The human readable form is a
multibase string (base32 by default) of the packed bytes.
"""

from dataclasses import dataclass
import hashlib
import logging

import multibase

from ipld_car.config import (
    CID_V0,
    CID_V0_PREFIX,
    CID_V1,
    CODEC_DAG_PB,
    CODEC_RAW,
    DEFAULT_MULTIBASE_ENCODING,
    HASH_SHA256,
    SHA256_DIGEST_LENGTH,
)
from ipld_car.exceptions import (
    InvalidHashLengthError,
    TruncatedInputError,
    UnsupportedCIDVersionError,
    UnsupportedHashAlgorithmError,
)
from ipld_car.utils.varint import decode_varint, encode_varint

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class CID:
    """
    A parsed content identifier.

    Two CIDs are equal when their packed forms are equal, so a v0 CID never
    equals a v1 CID with the same digest.
    """

    version: int
    codec: int
    hash_type: int
    hash: bytes

    def __bytes__(self) -> bytes:
        return pack_cid(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CID):
            return NotImplemented
        return bytes(self) == bytes(other)

    def __hash__(self) -> int:
        return hash(bytes(self))

    def __str__(self) -> str:
        return cid_to_display_string(self)


def read_cid(
    buffer: bytes | bytearray | memoryview, offset: int = 0
) -> tuple[CID, int]:
    """
    Parse a CID starting at ``offset``.

    Returns:
        tuple[CID, int]: the CID and the offset just past its last hash byte

    """
    view = memoryview(buffer)

    if bytes(view[offset : offset + 2]) == CID_V0_PREFIX:
        start = offset + len(CID_V0_PREFIX)
        digest = _read_digest(view, start, SHA256_DIGEST_LENGTH)
        return (
            CID(
                version=CID_V0,
                codec=CODEC_DAG_PB,
                hash_type=HASH_SHA256,
                hash=digest,
            ),
            start + SHA256_DIGEST_LENGTH,
        )

    version, position = decode_varint(view, offset)
    if version != CID_V1:
        raise UnsupportedCIDVersionError(version)

    codec, position = decode_varint(view, position)

    hash_type, position = decode_varint(view, position)
    if hash_type != HASH_SHA256:
        raise UnsupportedHashAlgorithmError(hash_type)

    hash_length, position = decode_varint(view, position)
    if hash_length != SHA256_DIGEST_LENGTH:
        raise InvalidHashLengthError(SHA256_DIGEST_LENGTH, hash_length)

    digest = _read_digest(view, position, hash_length)
    return (
        CID(version=version, codec=codec, hash_type=hash_type, hash=digest),
        position + hash_length,
    )


def _read_digest(view: memoryview, start: int, length: int) -> bytes:
    if start + length > len(view):
        raise TruncatedInputError(
            f"CID digest at offset {start} needs {length} bytes, "
            f"{max(len(view) - start, 0)} available",
            offset=start,
            needed=length,
        )
    return bytes(view[start : start + length])


def parse_cid(data: bytes | bytearray | memoryview) -> CID:
    """Parse the CID at the start of ``data``; trailing bytes are not consumed."""
    cid, _ = read_cid(data)
    return cid


def pack_cid(cid: CID) -> bytes:
    """
    Serialize a CID to its binary form.

    A v0 CID packs to ``0x12 0x20`` plus the digest regardless of its codec
    and hash_type fields.
    """
    if len(cid.hash) != SHA256_DIGEST_LENGTH:
        raise InvalidHashLengthError(SHA256_DIGEST_LENGTH, len(cid.hash))

    if cid.version == CID_V0:
        return CID_V0_PREFIX + bytes(cid.hash)
    if cid.version != CID_V1:
        raise UnsupportedCIDVersionError(cid.version)
    if cid.hash_type != HASH_SHA256:
        raise UnsupportedHashAlgorithmError(cid.hash_type)

    return (
        encode_varint(cid.version)
        + encode_varint(cid.codec)
        + encode_varint(cid.hash_type)
        + encode_varint(len(cid.hash))
        + bytes(cid.hash)
    )


def compute_cid(data: bytes, codec: int = CODEC_RAW, version: int = CID_V1) -> CID:
    """
    Compute the SHA-256 CID addressing ``data``.

    Args:
        data: The block payload
        codec: Multicodec code (ignored for v0, which is always dag-pb)
        version: CID version (0 or 1)

    """
    digest = hashlib.sha256(data).digest()
    if version == CID_V0:
        return CID(CID_V0, CODEC_DAG_PB, HASH_SHA256, digest)
    if version != CID_V1:
        raise UnsupportedCIDVersionError(version)
    return CID(CID_V1, codec, HASH_SHA256, digest)


def cid_to_display_string(
    cid: CID | bytes, encoding: str = DEFAULT_MULTIBASE_ENCODING
) -> str:
    """
    Render a CID as multibase text, e.g. ``bafkrei...`` for base32.

    Args:
        cid: A CID or its packed bytes
        encoding: Multibase encoding name understood by py-multibase

    Raises:
        ValueError: If *encoding* is not supported by py-multibase.

    """
    if not multibase.is_encoding_supported(encoding):
        supported = ", ".join(multibase.list_encodings())
        raise ValueError(
            f"Unsupported encoding {encoding!r}. Supported encodings: {supported}"
        )

    packed = pack_cid(cid) if isinstance(cid, CID) else bytes(cid)
    return multibase.encode(encoding, packed).decode("ascii")


def display_string_to_cid(text: str) -> bytes:
    """
    Decode a multibase CID string back to packed CID bytes.

    The decoded bytes are parsed to make sure they describe a supported CID.
    """
    packed = bytes(multibase.decode(text))
    cid = parse_cid(packed)
    logger.debug(
        "Decoded CID string %s (v%d, codec 0x%x)", text, cid.version, cid.codec
    )
    return packed
