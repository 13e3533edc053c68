"""Decode, validate and re-encode IPFS CAR files."""

from importlib.metadata import version as __version

from ipld_car.car import (
    Block,
    CarBlockRecord,
    CarFile,
    decode_block,
    decode_record,
    encode_block,
    encode_frames,
    iter_frames,
    load_car,
    split_frames,
    split_header,
)
from ipld_car.codec import (
    CID,
    PBLink,
    PBNode,
    UnixFSData,
    UnixFSType,
    cid_to_display_string,
    compute_cid,
    decode_pb_link,
    decode_pb_node,
    decode_unixfs,
    display_string_to_cid,
    encode_pb_link,
    encode_pb_node,
    encode_unixfs,
    pack_cid,
    parse_cid,
    read_cid,
)
from ipld_car.config import (
    CODEC_DAG_PB,
    CODEC_RAW,
)
from ipld_car.exceptions import (
    BlockDecodeError,
    CarError,
    HashMismatchError,
    InvalidHashLengthError,
    MissingFieldError,
    TruncatedFrameError,
    TruncatedInputError,
    UnsupportedCIDVersionError,
    UnsupportedCodecError,
    UnsupportedFieldError,
    UnsupportedHashAlgorithmError,
    UnsupportedWireTypeError,
    ValueOutOfRangeError,
)
from ipld_car.utils.logging import (
    setup_logging,
)
from ipld_car.validation import (
    validate_block,
    verify_block,
)

# Initialize logging configuration
setup_logging()

__all__ = [
    # CAR framing
    "Block",
    "CarBlockRecord",
    "CarFile",
    "decode_block",
    "decode_record",
    "encode_block",
    "encode_frames",
    "iter_frames",
    "load_car",
    "split_frames",
    "split_header",
    # Codecs
    "CID",
    "PBLink",
    "PBNode",
    "UnixFSData",
    "UnixFSType",
    "cid_to_display_string",
    "compute_cid",
    "decode_pb_link",
    "decode_pb_node",
    "decode_unixfs",
    "display_string_to_cid",
    "encode_pb_link",
    "encode_pb_node",
    "encode_unixfs",
    "pack_cid",
    "parse_cid",
    "read_cid",
    "CODEC_DAG_PB",
    "CODEC_RAW",
    # Validation
    "validate_block",
    "verify_block",
    # Errors
    "BlockDecodeError",
    "CarError",
    "HashMismatchError",
    "InvalidHashLengthError",
    "MissingFieldError",
    "TruncatedFrameError",
    "TruncatedInputError",
    "UnsupportedCIDVersionError",
    "UnsupportedCodecError",
    "UnsupportedFieldError",
    "UnsupportedHashAlgorithmError",
    "UnsupportedWireTypeError",
    "ValueOutOfRangeError",
]

__version__ = __version("ipld-car")
