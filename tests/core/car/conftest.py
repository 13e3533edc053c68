"""Pytest configuration and fixtures for CAR codec tests."""

from types import SimpleNamespace

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
import pytest

from ipld_car.car import encode_block, encode_frames
from ipld_car.codec.cid import compute_cid, display_string_to_cid, pack_cid
from ipld_car.codec.dag_pb import PBLink, PBNode, encode_pb_node
from ipld_car.codec.unixfs import UnixFSData, UnixFSType, encode_unixfs
from ipld_car.config import CODEC_DAG_PB, CODEC_RAW

HELLO_WORLD = b"Hello, World\n"

# UnixFS payload of a directory node: Type = Directory
UNIXFS_DIRECTORY = b"\x08\x01"

# Directory nodes of the web4.near.page static site, in the order their
# reference encoder wrote the links.
WEB4_DIRECTORIES = [
    {
        "cid": "bafybeiaqy5c3qam5kd5oafrziutpqtbltwla5lj3feydfxjsyqusu7cndi",
        "links": [
            ("_index.html", 13346, "bafkreibxxxpva5lpcge263lkx6yyx3tkpkfcqwtx3ujr3lz2xcxeeqtsze"),  # noqa: E501
            ("index.html", 13779, "bafkreic7ra6yc55c3ych75rjdetnvmnig3l7u2ujhzloy26pkghth43cua"),  # noqa: E501
            ("manifest.arkb", 356, "bafkreibqdpw5vjiloxlt64mnxpyeucjwqyxy34cxmkzfqcru3gvfzixmp4"),  # noqa: E501
            ("normalize.css", 7797, "bafkreihu27uckd4pcjhyw7iipzpcmb3gunfqph65yq7hwigyyggkd2joke"),  # noqa: E501
            ("skeleton.css", 11452, "bafkreiaqeb6w3ncofru3zqhkarwhob2hdfdygmnkmkio2njyanhsb46tba"),  # noqa: E501
            ("tmp.html", 3580, "bafkreihwzlmtjajwh4od6urlecyxw74dub7l5cnzxgc5kmbsphde2zcymu"),  # noqa: E501
            ("under-construction", 1636, "bafybeihgn4nvivxmd77xwr6fa6ywjtsdwwxvscrmqady5nzjf72r6bpmbe"),  # noqa: E501
        ],
    },
    {
        "cid": "bafybeidg3ohf4kscsf6cjbgg7vttcvu7q4olena3kwhpl5wl3trhhougyi",
        "links": [
            ("dist", 52350, "bafybeiaqy5c3qam5kd5oafrziutpqtbltwla5lj3feydfxjsyqusu7cndi"),  # noqa: E501
        ],
    },
    {
        "cid": "bafybeihgn4nvivxmd77xwr6fa6ywjtsdwwxvscrmqady5nzjf72r6bpmbe",
        "links": [
            ("index.html", 1577, "bafkreidndhj7jyy3upcypraiwjfs5wvwlt42bz7j3pzmwvgq3lwcmmcvjq"),  # noqa: E501
        ],
    },
]


def car_header_for(root_cid_bytes: bytes) -> bytes:
    """DAG-CBOR ``{"roots": [root], "version": 1}`` as written by CAR v1 tools."""
    return (
        b"\xa2\x65roots\x81\xd8\x2a\x58"
        + bytes([len(root_cid_bytes) + 1])
        + b"\x00"
        + root_cid_bytes
        + b"\x67version\x01"
    )


def _web4_directory_node(directory) -> PBNode:
    return PBNode(
        data=UNIXFS_DIRECTORY,
        links=[
            PBLink(cid=display_string_to_cid(cid), name=name, size=size)
            for name, size, cid in directory["links"]
        ],
    )


@pytest.fixture
def web4_directories():
    """Published web4 directory CIDs with their (name, size, cid) links."""
    return WEB4_DIRECTORIES


@pytest.fixture
def web4_directory_node():
    """Build the PBNode of a web4 directory entry."""
    return _web4_directory_node


@pytest.fixture
def hello_payload():
    """dag-pb node wrapping a UnixFS file holding "Hello, World\\n"."""
    unixfs = UnixFSData(
        type=UnixFSType.File, data=HELLO_WORLD, file_size=len(HELLO_WORLD)
    )
    return encode_pb_node(PBNode(data=encode_unixfs(unixfs)))


@pytest.fixture
def hello_car(hello_payload):
    """A CAR file with one CIDv0 dag-pb block, like `ipfs dag export` writes."""
    cid = compute_cid(hello_payload, version=0)
    return encode_frames(
        [car_header_for(pack_cid(cid)), encode_block(cid, hello_payload)]
    )


@pytest.fixture
def hi_car():
    """Two frames: a 6-byte opaque header and a raw block holding b"hi"."""
    cid = compute_cid(b"hi", codec=CODEC_RAW)
    return encode_frames([b"\x01\x02\x03\x04\x05\x06", encode_block(cid, b"hi")])


@pytest.fixture
def web4_car():
    """CAR holding a raw file block plus the web4 directory tree."""
    frames = []
    raw = b"<html>under construction</html>\n"
    frames.append(encode_block(compute_cid(raw, codec=CODEC_RAW), raw))
    for directory in WEB4_DIRECTORIES:
        payload = encode_pb_node(_web4_directory_node(directory))
        frames.append(encode_block(compute_cid(payload, codec=CODEC_DAG_PB), payload))

    root = display_string_to_cid(WEB4_DIRECTORIES[1]["cid"])
    return encode_frames([car_header_for(root), *frames])


@pytest.fixture(scope="session")
def reference_pb():
    """
    PBLink, PBNode and UnixFS Data message classes built with the protobuf
    runtime, used as a reference encoder/decoder.
    """
    field_proto = descriptor_pb2.FieldDescriptorProto
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="ipld_car_reference.proto",
        package="ipld_car.reference",
        syntax="proto2",
    )

    def add_field(message, name, number, field_type, repeated=False, type_name=None):
        field = message.field.add(
            name=name,
            number=number,
            type=field_type,
            label=(
                field_proto.LABEL_REPEATED if repeated else field_proto.LABEL_OPTIONAL
            ),
        )
        if type_name is not None:
            field.type_name = type_name

    link = file_proto.message_type.add(name="PBLink")
    add_field(link, "Hash", 1, field_proto.TYPE_BYTES)
    add_field(link, "Name", 2, field_proto.TYPE_STRING)
    add_field(link, "Tsize", 3, field_proto.TYPE_UINT64)

    node = file_proto.message_type.add(name="PBNode")
    add_field(
        node,
        "Links",
        2,
        field_proto.TYPE_MESSAGE,
        repeated=True,
        type_name=".ipld_car.reference.PBLink",
    )
    add_field(node, "Data", 1, field_proto.TYPE_BYTES)

    data = file_proto.message_type.add(name="Data")
    add_field(data, "Type", 1, field_proto.TYPE_UINT64)
    add_field(data, "Data", 2, field_proto.TYPE_BYTES)
    add_field(data, "filesize", 3, field_proto.TYPE_UINT64)
    add_field(data, "blocksizes", 4, field_proto.TYPE_UINT64, repeated=True)
    add_field(data, "hashType", 5, field_proto.TYPE_UINT64)
    add_field(data, "fanout", 6, field_proto.TYPE_UINT64)

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())

    return SimpleNamespace(
        **{
            name: message_factory.GetMessageClass(
                pool.FindMessageTypeByName(f"ipld_car.reference.{name}")
            )
            for name in ("PBLink", "PBNode", "Data")
        }
    )
