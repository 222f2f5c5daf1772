"""
Command-line wrapper around HuffmanCodec.

Usage:
  huffman-text codes  SOURCE            # symbol, frequency and code table
  huffman-text encode SOURCE [INPUT]    # bit string for INPUT (default: SOURCE)
  huffman-text decode SOURCE BITS       # text for BITS ('-' reads stdin)

SOURCE is the text file the code is built from.
"""

import argparse
import logging
import sys
from typing import List, Optional

from codec import HuffmanCodec
from config import configure_logging
from huffman import HuffmanError

logger = logging.getLogger(__name__)


def cmd_codes(codec: HuffmanCodec, args: argparse.Namespace) -> None:
    for symbol in sorted(codec.codes, key=lambda s: (len(codec.codes[s]), s)):
        print(f"{symbol!r}\t{codec.frequencies[symbol]}\t{codec.codes[symbol]}")


def cmd_encode(codec: HuffmanCodec, args: argparse.Namespace) -> None:
    print(codec.encode_file(args.input or args.source, args.encoding))


def cmd_decode(codec: HuffmanCodec, args: argparse.Namespace) -> None:
    bits = sys.stdin.read() if args.bits == "-" else args.bits
    sys.stdout.write(codec.decode(bits.strip()))


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="huffman-text", description="Huffman-code text into a '0'/'1' string and back.")
    ap.add_argument("--encoding", default=None, help="Text encoding of the files (default: latin-1)")
    ap.add_argument("--log-level", default=None, help="Logging level, e.g. DEBUG or INFO (default: WARNING)")

    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("codes", help="Print the code table built from SOURCE")
    p.add_argument("source", help="Text file the code is built from")
    p.set_defaults(func=cmd_codes)

    p = sub.add_parser("encode", help="Encode INPUT with the code built from SOURCE")
    p.add_argument("source", help="Text file the code is built from")
    p.add_argument("input", nargs="?", default=None, help="Text file to encode (default: SOURCE)")
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser("decode", help="Decode BITS with the code built from SOURCE")
    p.add_argument("source", help="Text file the code is built from")
    p.add_argument("bits", help="String of 0/1 characters, or '-' to read it from stdin")
    p.set_defaults(func=cmd_decode)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    try:
        configure_logging(args.log_level)
    except ValueError as exc:
        ap.error(str(exc))

    try:
        codec = HuffmanCodec.from_file(args.source, args.encoding)
        args.func(codec, args)
    except HuffmanError as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
