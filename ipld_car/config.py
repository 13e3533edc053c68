"""
CAR codec constants and defaults.
"""

# CID versions
CID_V0 = 0
CID_V1 = 1

# Multicodec codes
CODEC_RAW = 0x55
CODEC_DAG_PB = 0x70

# Block codecs decode_block knows how to handle
SUPPORTED_CODECS = frozenset({CODEC_RAW, CODEC_DAG_PB})

# Multihash: SHA-256 is the only supported algorithm
HASH_SHA256 = 0x12
SHA256_DIGEST_LENGTH = 32

# A CIDv0 is a bare SHA-256 multihash: <0x12><0x20><32-byte digest>
CID_V0_PREFIX = bytes([HASH_SHA256, SHA256_DIGEST_LENGTH])

# Multibase used when rendering CIDs for humans
DEFAULT_MULTIBASE_ENCODING = "base32"

# Varints are unsigned 64-bit integers at most (10 bytes on the wire)
MAX_VARINT_VALUE = 2**64 - 1
MAX_VARINT_BYTES = 10

# Environment variables read by ipld_car.utils.logging
DEBUG_ENV_VAR = "IPLD_CAR_DEBUG"
DEBUG_FILE_ENV_VAR = "IPLD_CAR_DEBUG_FILE"
