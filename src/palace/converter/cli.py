#!/usr/bin/env python
"""Convert an OPDS 1 (Atom) feed to an OPDS 2 (JSON) feed."""

import argparse
import logging
import os
import sys
from urllib.parse import urlparse

from palace.converter.config import ConverterConfiguration
from palace.converter.exceptions import BaseConverterException
from palace.converter.mapping import convert
from palace.converter.opds1 import parser as opds1_parser
from palace.converter.opds1.model import Feed as OPDS1Feed
from palace.converter.opds2.codec import serialize_feed

logger = logging.getLogger("palace.converter.cli")


def parse_arguments(args: list[str] | None = None) -> argparse.Namespace:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Convert an OPDS 1 feed to OPDS 2."
    )
    parser.add_argument(
        "source", help="The URL or the path of the OPDS 1 feed", metavar="URL_OR_PATH"
    )
    parser.add_argument(
        "--output", "-o", help="Write the OPDS 2 feed to this file, not stdout"
    )
    layout = parser.add_mutually_exclusive_group()
    layout.add_argument(
        "--indent", type=int, help="Indent the output by this many spaces"
    )
    layout.add_argument(
        "--compact", action="store_true", help="Write the output on a single line"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times)",
    )
    return parser.parse_args(args)


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def load_feed(source: str, config: ConverterConfiguration) -> OPDS1Feed:
    if is_url(source):
        return opds1_parser.parse_url(
            source, timeout=config.http_timeout, user_agent=config.user_agent
        )
    return opds1_parser.parse_file(source)


def save_feed(serialized: bytes, output_file: str) -> None:
    output_file_tmp: str = output_file + ".tmp"
    with open(output_file_tmp, "wb") as out:
        out.write(serialized)
    os.replace(output_file_tmp, output_file)


def run(args: argparse.Namespace, config: ConverterConfiguration) -> None:
    feed = convert(load_feed(args.source, config), args.source)

    if args.compact:
        indent = None
    elif args.indent is not None:
        indent = args.indent
    else:
        indent = config.indent
    serialized = serialize_feed(feed, indent=indent)

    if args.output:
        save_feed(serialized, args.output)
        logger.info(f"Wrote {args.source} to {args.output}")
    else:
        sys.stdout.buffer.write(serialized + b"\n")
        sys.stdout.flush()


def main(args: list[str] | None = None) -> None:
    parsed = parse_arguments(args)
    logging.basicConfig()

    try:
        config = ConverterConfiguration()
    except BaseConverterException as e:
        logger.fatal(str(e))
        sys.exit(1)

    level = config.log_level.levelno
    if parsed.verbose > 0:
        level = min(level, logging.INFO)
    if parsed.verbose > 1:
        level = logging.DEBUG
    logging.getLogger().setLevel(level)

    try:
        run(parsed, config)
    except (BaseConverterException, OSError) as e:
        logger.fatal(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
