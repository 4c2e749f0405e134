# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Streaming GIF block parser

Walks the block structure of a GIF stream fed in chunks of any size:

    header -> logical screen descriptor -> [global color table]
    -> { extension | image descriptor [local color table] image data }*
    -> trailer

Extension text is emitted as ExtensionEvent records, every state change
as a StateEvent. Color tables and image data are skipped, never decoded.

The parser keeps scanning after the trailer byte unless
``ParserConfig.stop_at_trailer`` is set; some GIFs carry comments past the
end of the image.

Structure references:
    https://www.w3.org/Graphics/GIF/spec-gif89a.txt
    http://giflib.sourceforge.net/whatsinagif/bits_and_bytes.html

Copyright 2025 DNAi inc.
"""

import logging
from typing import Callable, Dict, Generator, Iterable, List, Optional

from gifmetadata.config import ParserConfig
from gifmetadata.context import ParserContext
from gifmetadata.events import (
    ExtensionEvent,
    ExtensionKind,
    LsdField,
    ParseEvent,
    ParseResult,
    ParseState,
    ParseStatus,
    ParseWarning,
    StateEvent,
    WarningKind,
)
from gifmetadata.exceptions import (
    BufferOverflowError,
    GifMetadataError,
    InvalidSignatureError,
    ParserClosedError,
    TruncatedHeaderError,
)
from gifmetadata.extension_decoder import (
    ExtensionDecoder,
    extension_kind_for_label,
    skip_sub_blocks,
)
from gifmetadata.signature import HEADER_LENGTH, is_signature_prefix, validate_signature

logger = logging.getLogger(__name__)


EXTENSION_INTRODUCER = 0x21
IMAGE_SEPARATOR = 0x2C
TRAILER = 0x3B

IMAGE_DESCRIPTOR_LENGTH = 9
COLOR_TABLE_FLAG = 0x80
COLOR_TABLE_SIZE_MASK = 0x07


def color_table_length(packed: int) -> int:
    """
    Byte length of the color table described by a packed field.

    The low three bits hold ``size``; the table has ``2 ** (size + 1)``
    RGB entries of three bytes each.
    """
    return 3 * 2 ** ((packed & COLOR_TABLE_SIZE_MASK) + 1)


def has_color_table(packed: int) -> bool:
    return (packed & COLOR_TABLE_FLAG) != 0


def status_for_error(exc: GifMetadataError) -> ParseStatus:
    """Map a fatal parse error onto the status reported to callers."""
    if isinstance(exc, InvalidSignatureError):
        return ParseStatus.INVALID_SIGNATURE
    if isinstance(exc, TruncatedHeaderError):
        return ParseStatus.TRUNCATED_HEADER
    if isinstance(exc, BufferOverflowError):
        return ParseStatus.BUFFER_OVERFLOW
    raise exc


class GIFStreamParser:
    """
    Incremental parser for one GIF stream.

    Feed chunks with ``feed()``; each call returns the events completed by
    that chunk. Call ``close()`` at end of input to get the ParseResult and
    the accumulated warnings.

    Example:
        >>> parser = GIFStreamParser()
        >>> for chunk in chunks:
        ...     for event in parser.feed(chunk):
        ...         handle(event)
        >>> result = parser.close()
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self.context = ParserContext()
        self.context.scratch.reset(HEADER_LENGTH)
        self.warnings: List[ParseWarning] = []

        self._events: List[ParseEvent] = []
        self._decoder = ExtensionDecoder(self._events.append)
        self._started = False
        self._closed = False
        self._failed = False
        self._result: Optional[ParseResult] = None

        self._unknown_run_start = 0
        self._unknown_run_length = 0
        self._unknown_run_first = 0

        self._handlers: Dict[ParseState, Callable[[bytes, int], int]] = {
            ParseState.HEADER: self._read_header,
            ParseState.LOGICAL_SCREEN_DESCRIPTOR: self._read_logical_screen_descriptor,
            ParseState.GLOBAL_COLOR_TABLE: self._skip_color_table,
            ParseState.SEARCHING: self._search,
            ParseState.EXTENSION: self._read_extension_label,
            ParseState.KNOWN_EXTENSION: self._read_known_extension,
            ParseState.UNKNOWN_EXTENSION: self._skip_unknown_extension,
            ParseState.IMAGE_DESCRIPTOR: self._read_image_descriptor,
            ParseState.LOCAL_COLOR_TABLE: self._skip_color_table,
            ParseState.IMAGE_DATA: self._skip_image_data,
            ParseState.TRAILER: self._after_trailer,
        }

    @property
    def state(self) -> ParseState:
        return self.context.state

    @property
    def stopped(self) -> bool:
        """True when the trailer was reached and further input is ignored."""
        return self.context.saw_trailer and self.config.stop_at_trailer

    def feed(self, chunk: bytes) -> List[ParseEvent]:
        """
        Consume one chunk of the stream.

        Args:
            chunk: Next bytes of the stream; may be empty

        Returns:
            Events completed while consuming the chunk, in stream order

        Raises:
            InvalidSignatureError: If the stream does not start with ``GIF``
            BufferOverflowError: If a scratch buffer invariant is broken
            ParserClosedError: If the parser was closed or already failed
        """
        if self._closed or self._failed:
            raise ParserClosedError("parser no longer accepts input")

        data = bytes(chunk)
        ctx = self.context
        if not self._started:
            self._started = True
            self._events.append(StateEvent(ParseState.HEADER))

        pos = 0
        end = len(data)
        try:
            while pos < end:
                if self.stopped:
                    # discarded bytes do not count toward the offset
                    break
                new_pos = self._handlers[ctx.state](data, pos)
                ctx.offset += new_pos - pos
                pos = new_pos
        except GifMetadataError:
            self._failed = True
            self._events.clear()
            raise

        events = self._events[:]
        self._events.clear()
        return events

    def close(self) -> ParseResult:
        """
        Signal end of input.

        Returns:
            ParseResult with the warnings collected during the parse

        Raises:
            TruncatedHeaderError: If the stream ended inside the header
        """
        if self._failed:
            raise ParserClosedError("parser failed and has no result")
        if self._result is not None:
            return self._result

        ctx = self.context
        self._closed = True
        if ctx.state == ParseState.HEADER:
            self._failed = True
            raise TruncatedHeaderError(
                f"file does not appear to be a gif (too small, {ctx.offset} bytes)"
            )

        self._end_unknown_run()
        if not ctx.saw_trailer:
            self._warn(
                WarningKind.NO_TRAILER_OBSERVED,
                "file was incompatible and therefore gifmetadata may have missed "
                "some data, recommended that you view this file in a hex editor "
                f"to get more information (stream ended in {ctx.state.value})",
                ctx.offset,
            )
        logger.debug("finished reading image, %d bytes", ctx.offset)

        self._result = ParseResult(
            status=ParseStatus.SUCCESS,
            version=ctx.version,
            canvas_width=ctx.canvas_width,
            canvas_height=ctx.canvas_height,
            image_count=ctx.image_count,
            saw_trailer=ctx.saw_trailer,
            final_state=ctx.state,
            bytes_read=ctx.offset,
            warnings=list(self.warnings),
        )
        return self._result

    # Transitions and warnings

    def _transition(self, state: ParseState) -> None:
        ctx = self.context
        if state == ctx.state:
            return
        if ctx.state == ParseState.SEARCHING:
            self._end_unknown_run()
        ctx.state = state
        self._events.append(StateEvent(state))

    def _warn(self, kind: WarningKind, message: str, offset: Optional[int] = None) -> None:
        self.warnings.append(ParseWarning(kind, message, offset))

    def _note_unknown_byte(self, byte: int) -> None:
        if self._unknown_run_length == 0:
            self._unknown_run_start = self.context.offset
            self._unknown_run_first = byte
        self._unknown_run_length += 1
        logger.debug("unknown byte: (0x%x)...", byte)

    def _end_unknown_run(self) -> None:
        if self._unknown_run_length == 0:
            return
        self._warn(
            WarningKind.UNKNOWN_BYTE_WHILE_SEARCHING,
            f"skipped {self._unknown_run_length} unknown byte(s) starting with "
            f"0x{self._unknown_run_first:02x} at offset {self._unknown_run_start}",
            self._unknown_run_start,
        )
        self._unknown_run_length = 0

    # State handlers. Each takes the chunk and the index of the next unread
    # byte and returns the index after the bytes it consumed.

    def _read_header(self, data: bytes, pos: int) -> int:
        ctx = self.context
        scratch = ctx.scratch
        run = data[pos:pos + scratch.remaining]
        scratch.extend(run)
        if not is_signature_prefix(scratch.data):
            raise InvalidSignatureError("file does not appear to be a gif (wrong sig)")

        if scratch.is_complete():
            info = validate_signature(scratch.data)
            ctx.version = info.version
            logger.info("gif is version %s", info.version)
            if not info.supported:
                self._warn(
                    WarningKind.UNSUPPORTED_VERSION,
                    f"gif is an unsupported version: {info.version}",
                    3,
                )
            ctx.lsd_field = LsdField.WIDTH
            scratch.reset(2)
            self._transition(ParseState.LOGICAL_SCREEN_DESCRIPTOR)
        return pos + len(run)

    def _read_logical_screen_descriptor(self, data: bytes, pos: int) -> int:
        ctx = self.context
        field = ctx.lsd_field

        if field in (LsdField.WIDTH, LsdField.HEIGHT):
            scratch = ctx.scratch
            run = data[pos:pos + scratch.remaining]
            scratch.extend(run)
            if scratch.is_complete():
                value = int.from_bytes(scratch.data, 'little')
                if field == LsdField.WIDTH:
                    ctx.canvas_width = value
                    logger.info("canvas width: %d", value)
                    ctx.lsd_field = LsdField.HEIGHT
                else:
                    ctx.canvas_height = value
                    logger.info("canvas height: %d", value)
                    ctx.lsd_field = LsdField.PACKED
                scratch.reset(2)
            return pos + len(run)

        byte = data[pos]
        if field == LsdField.PACKED:
            ctx.lsd_packed = byte
            ctx.color_table_length = color_table_length(byte)
            logger.debug("color table size: %d, len: %d",
                         byte & COLOR_TABLE_SIZE_MASK, ctx.color_table_length)
            ctx.lsd_field = LsdField.BACKGROUND_COLOR
        elif field == LsdField.BACKGROUND_COLOR:
            ctx.lsd_field = LsdField.PIXEL_ASPECT_RATIO
        else:
            if has_color_table(ctx.lsd_packed):
                logger.debug("has a global color table")
                ctx.skip_remaining = ctx.color_table_length
                self._transition(ParseState.GLOBAL_COLOR_TABLE)
            else:
                self._transition(ParseState.SEARCHING)
        return pos + 1

    def _skip_color_table(self, data: bytes, pos: int) -> int:
        ctx = self.context
        step = min(ctx.skip_remaining, len(data) - pos)
        ctx.skip_remaining -= step
        if ctx.skip_remaining == 0:
            if ctx.state == ParseState.GLOBAL_COLOR_TABLE:
                logger.debug("finished the global color table")
                self._transition(ParseState.SEARCHING)
            else:
                logger.debug("reached the end of the local color table")
                self._start_image_data()
        return pos + step

    def _search(self, data: bytes, pos: int) -> int:
        ctx = self.context
        byte = data[pos]
        if byte == EXTENSION_INTRODUCER:
            logger.debug("found an extension")
            self._transition(ParseState.EXTENSION)
        elif byte == IMAGE_SEPARATOR:
            logger.debug("found an image descriptor")
            ctx.scratch.reset(IMAGE_DESCRIPTOR_LENGTH)
            self._transition(ParseState.IMAGE_DESCRIPTOR)
        elif byte == TRAILER:
            logger.debug("found the trailer")
            ctx.saw_trailer = True
            self._transition(ParseState.TRAILER)
        else:
            self._note_unknown_byte(byte)
        return pos + 1

    def _after_trailer(self, data: bytes, pos: int) -> int:
        # Bytes past the trailer are scanned like any other block position.
        self._transition(ParseState.SEARCHING)
        return self._search(data, pos)

    def _read_extension_label(self, data: bytes, pos: int) -> int:
        ctx = self.context
        label = data[pos]
        kind = extension_kind_for_label(label)
        if kind == ExtensionKind.UNKNOWN:
            logger.debug("found an unknown extension (label 0x%02x)", label)
            ctx.extension_kind = ExtensionKind.UNKNOWN
            ctx.block_remaining = 0
            self._transition(ParseState.UNKNOWN_EXTENSION)
        else:
            self._decoder.begin(ctx, kind)
            self._transition(ParseState.KNOWN_EXTENSION)
        return pos + 1

    def _read_known_extension(self, data: bytes, pos: int) -> int:
        pos, done = self._decoder.feed(self.context, data, pos)
        if done:
            self._transition(ParseState.SEARCHING)
        return pos

    def _skip_unknown_extension(self, data: bytes, pos: int) -> int:
        ctx = self.context
        pos, done = skip_sub_blocks(ctx, data, pos)
        if done:
            logger.debug("reached the end of the unknown extension")
            ctx.extension_kind = ExtensionKind.NONE
            self._transition(ParseState.SEARCHING)
        return pos

    def _read_image_descriptor(self, data: bytes, pos: int) -> int:
        ctx = self.context
        scratch = ctx.scratch
        run = data[pos:pos + scratch.remaining]
        scratch.extend(run)
        if scratch.is_complete():
            packed = scratch[IMAGE_DESCRIPTOR_LENGTH - 1]
            ctx.image_count += 1
            logger.debug("reached the end of image descriptor %d", ctx.image_count)
            if has_color_table(packed):
                ctx.skip_remaining = color_table_length(packed)
                logger.debug("image descriptor contains a local color table with length %d",
                             ctx.skip_remaining)
                self._transition(ParseState.LOCAL_COLOR_TABLE)
            else:
                self._start_image_data()
        return pos + len(run)

    def _start_image_data(self) -> None:
        ctx = self.context
        ctx.lzw_code_size_pending = True
        ctx.block_remaining = 0
        self._transition(ParseState.IMAGE_DATA)

    def _skip_image_data(self, data: bytes, pos: int) -> int:
        ctx = self.context
        if ctx.lzw_code_size_pending:
            ctx.lzw_code_size_pending = False
            logger.debug("start of image data blocks, lzw minimum code size: %d", data[pos])
            return pos + 1
        pos, done = skip_sub_blocks(ctx, data, pos)
        if done:
            logger.debug("reached the end of image data blocks")
            self._transition(ParseState.SEARCHING)
        return pos


def iter_events(
    chunks: Iterable[bytes],
    config: Optional[ParserConfig] = None,
) -> Generator[ParseEvent, None, ParseResult]:
    """
    Parse a stream of chunks lazily.

    Args:
        chunks: Byte chunks in stream order
        config: Optional parser configuration

    Yields:
        StateEvent and ExtensionEvent records in stream order

    Returns:
        The ParseResult, as the generator's return value

    Raises:
        InvalidSignatureError, TruncatedHeaderError, BufferOverflowError
    """
    parser = GIFStreamParser(config)
    for chunk in chunks:
        yield from parser.feed(chunk)
        if parser.stopped:
            break
    return parser.close()


def read_gif_stream(
    chunks: Iterable[bytes],
    extension_cb: Callable[[ExtensionEvent], None],
    state_cb: Optional[Callable[[ParseState], None]] = None,
    config: Optional[ParserConfig] = None,
    warning_cb: Optional[Callable[[ParseWarning], None]] = None,
) -> ParseStatus:
    """
    Parse a stream and report through callbacks.

    Args:
        chunks: Byte chunks in stream order
        extension_cb: Called with each ExtensionEvent
        state_cb: Called with each ParseState entered
        config: Optional parser configuration
        warning_cb: Called with each ParseWarning once the stream is exhausted

    Returns:
        ParseStatus.SUCCESS, or the status of the fatal error that ended the parse
    """
    parser = GIFStreamParser(config)
    try:
        for chunk in chunks:
            for event in parser.feed(chunk):
                if isinstance(event, ExtensionEvent):
                    extension_cb(event)
                elif state_cb is not None:
                    state_cb(event.state)
            if parser.stopped:
                break
        result = parser.close()
    except (InvalidSignatureError, TruncatedHeaderError, BufferOverflowError) as exc:
        logger.debug("parse aborted: %s", exc)
        return status_for_error(exc)

    if warning_cb is not None:
        for warning in result.warnings:
            warning_cb(warning)
    return result.status
