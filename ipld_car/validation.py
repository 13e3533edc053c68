"""
Block integrity checks.

A block is only trusted once its payload hashes to the digest embedded in its
CID.
"""

import hashlib
import logging

from ipld_car.codec.cid import CID, parse_cid
from ipld_car.config import HASH_SHA256
from ipld_car.exceptions import HashMismatchError, UnsupportedHashAlgorithmError

logger = logging.getLogger(__name__)


def validate_block(cid: CID | bytes, payload: bytes | memoryview) -> None:
    """
    Verify that ``payload`` matches ``cid``.

    Args:
        cid: The block's CID, parsed or packed
        payload: The block data following the CID in its frame

    Raises:
        HashMismatchError: the SHA-256 digest of payload differs from cid.hash

    """
    if not isinstance(cid, CID):
        cid = parse_cid(cid)
    if cid.hash_type != HASH_SHA256:
        raise UnsupportedHashAlgorithmError(cid.hash_type)

    digest = hashlib.sha256(payload).digest()

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("validate_block:")
        logger.debug(f"  CID: {cid}")
        logger.debug(f"  Data size: {len(payload)} bytes")
        logger.debug(f"  Computed digest: {digest.hex()}")

    if digest != cid.hash:
        raise HashMismatchError(expected=cid.hash, actual=digest)


def verify_block(cid: CID | bytes, payload: bytes | memoryview) -> bool:
    """
    Check whether ``payload`` matches ``cid``.

    Returns:
        True if the digests match, False on a hash mismatch. Malformed CIDs
        still raise.

    """
    try:
        validate_block(cid, payload)
    except HashMismatchError:
        return False
    return True
