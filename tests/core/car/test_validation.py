"""Tests for block hash validation."""

import pytest

from ipld_car.codec.cid import CID, compute_cid, pack_cid
from ipld_car.config import CODEC_DAG_PB, CODEC_RAW, HASH_SHA256
from ipld_car.exceptions import (
    HashMismatchError,
    TruncatedInputError,
    UnsupportedHashAlgorithmError,
)
from ipld_car.validation import validate_block, verify_block


class TestValidateBlock:
    """Test validate_block."""

    def test_matching_payload(self):
        """Test that a payload hashing to its CID passes."""
        data = b"block payload"
        validate_block(compute_cid(data, codec=CODEC_RAW), data)

    def test_packed_cid(self):
        """Test validating against packed CID bytes."""
        data = b"block payload"
        validate_block(pack_cid(compute_cid(data, codec=CODEC_DAG_PB)), data)

    def test_memoryview_payload(self):
        """Test validating a payload view without copying it first."""
        source = b"xxblock payload"
        validate_block(compute_cid(b"block payload"), memoryview(source)[2:])

    def test_mismatch(self):
        """Test that a single changed byte is detected."""
        data = b"block payload"
        cid = compute_cid(data)

        with pytest.raises(HashMismatchError) as excinfo:
            validate_block(cid, b"block paylOad")

        assert excinfo.value.expected == cid.hash
        assert excinfo.value.actual != cid.hash

    def test_empty_payload(self):
        """Test the digest of an empty block."""
        validate_block(compute_cid(b""), b"")
        with pytest.raises(HashMismatchError):
            validate_block(compute_cid(b""), b"\x00")

    def test_unsupported_hash(self):
        """Test that only SHA-256 CIDs can be validated."""
        cid = CID(1, CODEC_RAW, 0x13, b"\x00" * 32)
        with pytest.raises(UnsupportedHashAlgorithmError):
            validate_block(cid, b"")

    def test_malformed_packed_cid(self):
        """Test that malformed packed CIDs raise instead of failing the check."""
        with pytest.raises(TruncatedInputError):
            validate_block(b"\x01\x55\x12\x20", b"")


class TestVerifyBlock:
    """Test verify_block."""

    def test_returns_true(self):
        """Test that a matching payload verifies."""
        assert verify_block(compute_cid(b"data"), b"data") is True

    def test_returns_false(self):
        """Test that a mismatch is reported as False."""
        assert verify_block(compute_cid(b"data"), b"Data") is False

    def test_v0_cid(self):
        """Test verifying a dag-pb block under a v0 CID."""
        payload = b"\x0a\x02\x08\x01"
        cid = CID(0, CODEC_DAG_PB, HASH_SHA256, compute_cid(payload).hash)

        assert verify_block(cid, payload)
        assert verify_block(pack_cid(cid), payload)
