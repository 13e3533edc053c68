"""
Error kinds raised while decoding and encoding CAR data.

Every error carries the context needed to locate the failure in the input
(offsets, field numbers, expected and actual values) as attributes, so the
caller can render diagnostics without parsing messages.
"""

from typing import Any


class CarError(Exception):
    """Base exception for all CAR codec errors."""


class TruncatedInputError(CarError):
    """Raised when a read runs past the end of the buffer."""

    def __init__(
        self, message: str, offset: int | None = None, needed: int | None = None
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.needed = needed


class TruncatedFrameError(TruncatedInputError):
    """Raised when a CAR frame declares more bytes than the buffer holds."""


class ValueOutOfRangeError(CarError):
    """Raised for negative or overflowing values where uint64 is expected."""

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class UnsupportedWireTypeError(CarError):
    def __init__(self, wire_type: int, field_number: int | None = None) -> None:
        if field_number is None:
            message = f"Unsupported wire type: {wire_type}"
        else:
            message = f"Unsupported wire type {wire_type} for field {field_number}"
        super().__init__(message)
        self.wire_type = wire_type
        self.field_number = field_number


class UnsupportedFieldError(CarError):
    """Raised for unknown field numbers in a closed protobuf schema."""

    def __init__(self, message_name: str, field_number: int) -> None:
        super().__init__(f"Unsupported {message_name} field number: {field_number}")
        self.message_name = message_name
        self.field_number = field_number


class MissingFieldError(CarError):
    """Raised when a required protobuf field is absent."""

    def __init__(self, message_name: str, field_name: str) -> None:
        super().__init__(f"{message_name} is missing required field {field_name}")
        self.message_name = message_name
        self.field_name = field_name


class UnsupportedCIDVersionError(CarError):
    def __init__(self, version: int) -> None:
        super().__init__(f"Unsupported CID version: {version}")
        self.version = version


class UnsupportedHashAlgorithmError(CarError):
    def __init__(self, hash_type: int) -> None:
        super().__init__(
            f"Unsupported hash type: 0x{hash_type:x}. Only SHA-256 is supported."
        )
        self.hash_type = hash_type


class InvalidHashLengthError(CarError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Wrong SHA-256 hash size: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class UnsupportedCodecError(CarError):
    def __init__(self, codec: int) -> None:
        super().__init__(f"Unsupported multicodec: 0x{codec:x}")
        self.codec = codec


class HashMismatchError(CarError):
    """Raised when a block payload does not hash to its CID."""

    def __init__(self, expected: bytes, actual: bytes) -> None:
        super().__init__(
            f"Hash mismatch: expected {expected.hex()}, computed {actual.hex()}"
        )
        self.expected = expected
        self.actual = actual


class BlockDecodeError(CarError):
    """
    Raised when a block's payload fails to decode with its codec.

    The underlying error is available as ``__cause__``.
    """

    def __init__(
        self, message: str, cid: Any, codec: int, offset: int | None = None
    ) -> None:
        super().__init__(message)
        self.cid = cid
        self.codec = codec
        self.offset = offset
