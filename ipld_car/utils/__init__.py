"""Utility functions for ipld_car."""

from ipld_car.utils.varint import (
    decode_varint,
    encode_varint,
    encode_varint_prefixed,
)

__all__ = [
    "decode_varint",
    "encode_varint",
    "encode_varint_prefixed",
]
