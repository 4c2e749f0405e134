# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Extension block decoder

Every extension is a label byte followed by sub-blocks: a size byte ``L``
then ``L`` data bytes, ending with a sub-block of size zero.

- Comment and plain text sub-blocks are joined into one text, emitted at
  the terminator. A 0x00 data byte before the sub-block is full also ends
  the text: it is emitted at once and the rest of the sub-block is left to
  the block scanner.
- The plain text extension's first sub-block is its 12-byte text grid
  header and carries no text.
- The first application sub-block is the identifier and auth code; each
  later sub-block is emitted on its own.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Callable, Tuple

from gifmetadata.context import ParserContext
from gifmetadata.events import ExtensionEvent, ExtensionKind

logger = logging.getLogger(__name__)


PLAIN_TEXT_LABEL = 0x01
APPLICATION_LABEL = 0xFF
COMMENT_LABEL = 0xFE

EXTENSION_LABELS = {
    PLAIN_TEXT_LABEL: ExtensionKind.PLAIN_TEXT,
    APPLICATION_LABEL: ExtensionKind.APPLICATION,
    COMMENT_LABEL: ExtensionKind.COMMENT,
}

TEXT_KINDS = (ExtensionKind.COMMENT, ExtensionKind.PLAIN_TEXT)


def extension_kind_for_label(label: int) -> ExtensionKind:
    """Map an extension label byte to the kind of decoding it gets."""
    return EXTENSION_LABELS.get(label, ExtensionKind.UNKNOWN)


def skip_sub_blocks(ctx: ParserContext, data: bytes, pos: int) -> Tuple[int, bool]:
    """
    Skip generic sub-blocks without looking at their contents.

    Used for unknown extensions and LZW image data.

    Args:
        ctx: Parse context; ``block_remaining`` carries the position
            inside the current sub-block between calls
        data: Current chunk
        pos: Index of the next unread byte in ``data``

    Returns:
        Tuple of (new position, True once the zero-size terminator was read)
    """
    end = len(data)
    while pos < end:
        if ctx.block_remaining == 0:
            size = data[pos]
            pos += 1
            if size == 0:
                return pos, True
            ctx.block_remaining = size
        else:
            step = min(ctx.block_remaining, end - pos)
            ctx.block_remaining -= step
            pos += step
    return pos, False


class ExtensionDecoder:
    """
    Decodes the sub-blocks of comment, plain text and application extensions.

    The decoder holds no parse state of its own; everything lives in the
    ParserContext passed to each call. Completed text is handed to ``emit``.
    """

    def __init__(self, emit: Callable[[ExtensionEvent], None]):
        self._emit = emit

    def begin(self, ctx: ParserContext, kind: ExtensionKind) -> None:
        """Prepare ``ctx`` for a new extension of the given kind."""
        if kind not in TEXT_KINDS and kind != ExtensionKind.APPLICATION:
            raise ValueError(f"cannot decode extension kind {kind.value!r}")
        ctx.extension_kind = kind
        ctx.in_sub_block = False
        ctx.sub_block_index = 0
        ctx.text.clear()
        ctx.scratch.reset()
        logger.debug("found a %s extension", kind.value)

    def feed(self, ctx: ParserContext, data: bytes, pos: int) -> Tuple[int, bool]:
        """
        Consume extension bytes from ``data`` starting at ``pos``.

        Returns:
            Tuple of (new position, True once the extension has ended)
        """
        end = len(data)
        scratch = ctx.scratch
        while pos < end:
            if not ctx.in_sub_block:
                size = data[pos]
                pos += 1
                if size == 0:
                    self._finish(ctx)
                    return pos, True
                scratch.reset(size)
                ctx.in_sub_block = True
                logger.debug("new extension block len: %d", size)
                continue

            run = data[pos:pos + scratch.remaining]
            if self._is_text_block(ctx):
                null_at = run.find(0)
                if null_at >= 0:
                    scratch.extend(run[:null_at])
                    pos += null_at + 1
                    ctx.text.extend(scratch.data)
                    ctx.in_sub_block = False
                    logger.debug("null byte inside %s block, ending text early",
                                 ctx.extension_kind.value)
                    self._emit_text(ctx)
                    ctx.extension_kind = ExtensionKind.NONE
                    return pos, True

            scratch.extend(run)
            pos += len(run)
            if scratch.is_complete():
                self._complete_sub_block(ctx)
        return pos, False

    def _is_text_block(self, ctx: ParserContext) -> bool:
        if ctx.extension_kind == ExtensionKind.COMMENT:
            return True
        return ctx.extension_kind == ExtensionKind.PLAIN_TEXT and ctx.sub_block_index > 0

    def _complete_sub_block(self, ctx: ParserContext) -> None:
        block = ctx.scratch.data
        kind = ctx.extension_kind
        if kind == ExtensionKind.APPLICATION:
            self._emit(ExtensionEvent(ExtensionKind.APPLICATION, block))
            ctx.extension_kind = ExtensionKind.APPLICATION_SUBBLOCK
        elif kind == ExtensionKind.APPLICATION_SUBBLOCK:
            self._emit(ExtensionEvent(ExtensionKind.APPLICATION_SUBBLOCK, block))
        elif kind == ExtensionKind.PLAIN_TEXT and ctx.sub_block_index == 0:
            logger.debug("skipped %d byte plain text header", len(block))
        else:
            ctx.text.extend(block)
        ctx.sub_block_index += 1
        ctx.in_sub_block = False

    def _finish(self, ctx: ParserContext) -> None:
        kind = ctx.extension_kind
        if kind in TEXT_KINDS:
            text_blocks = ctx.sub_block_index
            if kind == ExtensionKind.PLAIN_TEXT:
                text_blocks -= 1
            if text_blocks > 0:
                self._emit_text(ctx)
            else:
                logger.debug("%s extension carried no text", kind.value)
        logger.debug("reached the end of the %s extension", kind.value)
        ctx.extension_kind = ExtensionKind.NONE

    def _emit_text(self, ctx: ParserContext) -> None:
        self._emit(ExtensionEvent(ctx.extension_kind, bytes(ctx.text)))
        ctx.text.clear()
