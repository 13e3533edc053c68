"""
Binary codecs for CAR blocks: protobuf wire format, CIDs, DAG-PB and UnixFS.
"""

from .cid import (
    CID,
    cid_to_display_string,
    compute_cid,
    display_string_to_cid,
    pack_cid,
    parse_cid,
    read_cid,
)
from .dag_pb import (
    PBLink,
    PBNode,
    decode_pb_link,
    decode_pb_node,
    encode_pb_link,
    encode_pb_node,
)
from .protobuf import (
    Field,
    decode_fields,
    encode_field,
    iter_fields,
)
from .unixfs import (
    UnixFSData,
    UnixFSType,
    decode_unixfs,
    encode_unixfs,
)

__all__ = [
    # CID
    "CID",
    "cid_to_display_string",
    "compute_cid",
    "display_string_to_cid",
    "pack_cid",
    "parse_cid",
    "read_cid",
    # DAG-PB
    "PBLink",
    "PBNode",
    "decode_pb_link",
    "decode_pb_node",
    "encode_pb_link",
    "encode_pb_node",
    # Protobuf wire format
    "Field",
    "decode_fields",
    "encode_field",
    "iter_fields",
    # UnixFS
    "UnixFSData",
    "UnixFSType",
    "decode_unixfs",
    "encode_unixfs",
]
