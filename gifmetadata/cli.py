# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for gifmetadata

GIFs contain 'comments' that were commonly used for copyright and
attribution in the early days of the web. gifmetadata reads and prints
them, along with application extensions and plain text blocks.

Copyright 2025 DNAi inc.
"""

import argparse
import logging
import sys
from contextlib import closing
from pathlib import Path
from typing import List, Optional, TextIO

from gifmetadata import __version__
from gifmetadata.config import DEFAULT_CHUNK_SIZE, ParserConfig
from gifmetadata.core import GIFMetadata
from gifmetadata.events import ParseState, ParseStatus, ParseWarning, WarningKind
from gifmetadata.exceptions import GifMetadataError
from gifmetadata.formatting import format_output, format_warning, render_extension
from gifmetadata.parser import read_gif_stream
from gifmetadata.sources import iter_file_chunks


STATUS_ERRORS = {
    ParseStatus.INVALID_SIGNATURE: "file does not appear to be a gif (wrong sig)",
    ParseStatus.TRUNCATED_HEADER: "file does not appear to be a gif (too small)",
    ParseStatus.BUFFER_OVERFLOW: "internal buffer overflow while reading extension data",
}


class TaggedFormatter(logging.Formatter):
    """Prefix log lines with the ``[dev]`` / ``[verbose]`` tags of the CLI output."""

    LEVEL_TAGS = {
        logging.DEBUG: "dev",
        logging.INFO: "verbose",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:
        tag = self.LEVEL_TAGS.get(record.levelno, record.levelname.lower())
        return f"[{tag}] {record.getMessage()}"


def configure_logging(verbose: bool = False, dev: bool = False, stream: Optional[TextIO] = None) -> None:
    """
    Send package log records to the terminal.

    Args:
        verbose: Show INFO records as ``[verbose]`` lines
        dev: Show DEBUG records as ``[dev]`` lines
        stream: Output stream; stdout by default so log lines interleave
            with extracted text
    """
    package_logger = logging.getLogger("gifmetadata")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(TaggedFormatter())
    package_logger.addHandler(handler)
    package_logger.propagate = False

    if dev:
        package_logger.setLevel(logging.DEBUG)
    elif verbose:
        package_logger.setLevel(logging.INFO)
    else:
        package_logger.setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gifmetadata",
        description="Read comments, application extensions and plain text embedded in a GIF.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output:
  comment: <text>          Text messages, primarily copyright and attribution
  application: <name>      Application extension identifier and auth code
  - <data>                 Application extension sub-block (may ping your terminal)
  plain text: <text>       89a plain text blocks drawn over the image

Examples:
  gifmetadata image.gif
  gifmetadata -v image.gif
  gifmetadata --json image.gif
        """
    )
    parser.add_argument('file', help='GIF file to read')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Display more data about the gif, e.g. width/height')
    parser.add_argument('-d', '--dev', action='store_true',
                        help='Display inner program workings intended for developers')
    output = parser.add_mutually_exclusive_group()
    output.add_argument('-j', '--json', action='store_true', help='Output metadata in JSON format')
    output.add_argument('--csv', action='store_true', help='Output metadata in CSV format')
    parser.add_argument('--strict', action='store_true',
                        help='Stop reading at the trailer instead of scanning to end of file')
    parser.add_argument('--chunk-size', type=int, default=DEFAULT_CHUNK_SIZE,
                        help=f'Bytes read per chunk (default: {DEFAULT_CHUNK_SIZE})')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def _print_warnings(warnings: List[ParseWarning], show_unknown_bytes: bool) -> None:
    for warning in warnings:
        if warning.kind == WarningKind.UNKNOWN_BYTE_WHILE_SEARCHING and not show_unknown_bytes:
            continue
        print(format_warning(warning))


def _print_metadata(path: Path, config: ParserConfig, format_type: str) -> int:
    try:
        with GIFMetadata(path, config=config) as gif:
            metadata = gif.get_all_metadata()
    except GifMetadataError as e:
        print(f"[error] {e.message}")
        return 1
    print(format_output(metadata, format_type))
    return 0


def _stream_text(path: Path, config: ParserConfig, verbose: bool, dev: bool) -> int:
    if verbose:
        print(f"[verbose] opened file '{path}'")
        print(f"[verbose] file size: {path.stat().st_size} bytes")

    warnings: List[ParseWarning] = []

    def on_state(state: ParseState) -> None:
        print(f"[dev] entering state: {state.value}")

    try:
        with closing(iter_file_chunks(path, config.chunk_size)) as chunks:
            status = read_gif_stream(
                chunks,
                lambda event: print(render_extension(event)),
                state_cb=on_state if dev else None,
                config=config,
                warning_cb=warnings.append,
            )
    except OSError as e:
        print(f"[error] file '{path}' cannot be read: {e}")
        return 1

    if status != ParseStatus.SUCCESS:
        print(f"[error] {STATUS_ERRORS[status]}")
        return 1

    _print_warnings(warnings, show_unknown_bytes=verbose or dev)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # stdout carries only the document in json/csv mode
    structured = args.json or args.csv
    diagnostics = sys.stderr if structured else sys.stdout
    configure_logging(verbose=args.verbose, dev=args.dev, stream=diagnostics)

    if args.dev:
        print("[dev] dev flag active", file=diagnostics)
        if args.verbose:
            print("[dev] verbose flag active", file=diagnostics)

    path = Path(args.file)
    if not path.is_file():
        print(f"[error] file '{path}' cannot be accessed")
        return 1

    try:
        config = ParserConfig(stop_at_trailer=args.strict, chunk_size=args.chunk_size)
    except ValueError as e:
        print(f"[error] {e}")
        return 1

    if args.json:
        return _print_metadata(path, config, "json")
    if args.csv:
        return _print_metadata(path, config, "csv")
    return _stream_text(path, config, verbose=args.verbose, dev=args.dev)


if __name__ == "__main__":
    sys.exit(main())
