import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys
from typing import TextIO

from ipld_car.car import Block, CarBlockRecord, decode_record, split_header
from ipld_car.codec.cid import cid_to_display_string
from ipld_car.config import DEFAULT_MULTIBASE_ENCODING
from ipld_car.exceptions import CarError

logger = logging.getLogger("ipld_car.tools.dump_car")


def print_header(header: CarBlockRecord, out: TextIO) -> None:
    print(
        f"Header at offset {header.frame_offset} with length {header.block_length}",
        file=out,
    )
    print(f"   {bytes(header.data).hex()}", file=out)


def print_block(
    record: CarBlockRecord, block: Block, encoding: str, out: TextIO
) -> None:
    print(
        f"\nBlock at offset {record.frame_offset} with length {record.block_length}",
        file=out,
    )
    print(f"Codec: 0x{block.codec:x}", file=out)
    print(f"CID: {cid_to_display_string(block.cid, encoding)}", file=out)
    if block.node is not None and block.node.links:
        print("Links:", file=out)
        for link in block.node.links:
            target = cid_to_display_string(link.cid, encoding)
            print(f"   {link.name} ({link.size}) -> {target}", file=out)


def dump_car(
    data: bytes,
    validate: bool = True,
    encoding: str = DEFAULT_MULTIBASE_ENCODING,
    out: TextIO | None = None,
) -> int:
    """
    Print the header and every block of a CAR file.

    Returns:
        Number of blocks printed

    """
    out = out if out is not None else sys.stdout
    header, records = split_header(data)
    print_header(header, out)

    for record in records:
        block = decode_record(record, validate)
        print_block(record, block, encoding, out)

    return len(records)


def main(argv: Sequence[str] | None = None) -> int:
    """Main function with argument parsing."""
    parser = argparse.ArgumentParser(
        prog="dump-car",
        description="Print the blocks, CIDs and links of a CAR file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dump-car site.car                    # Decode and validate every block
  dump-car site.car --no-validate      # Skip SHA-256 checks
  dump-car site.car --encoding base58btc

Set IPLD_CAR_DEBUG=DEBUG for decoder tracing.
        """,
    )
    parser.add_argument("car_file", nargs="?", help="Path to the CAR file")
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Do not check block payloads against their CIDs",
    )
    parser.add_argument(
        "--encoding",
        default=DEFAULT_MULTIBASE_ENCODING,
        help=f"Multibase encoding for CIDs (default: {DEFAULT_MULTIBASE_ENCODING})",
    )

    args = parser.parse_args(argv)

    if not args.car_file:
        parser.print_help()
        return 1

    try:
        data = Path(args.car_file).read_bytes()
        dump_car(data, validate=not args.no_validate, encoding=args.encoding)
    except (CarError, OSError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        logger.debug("Failed to dump %s", args.car_file, exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
