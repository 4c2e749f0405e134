# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Mutable state of a single parse.

One ParserContext belongs to one parser instance. Every field needed to
resume in the middle of a block lives here, so a chunk may end on any
byte.
"""

from dataclasses import dataclass, field
from typing import Optional

from gifmetadata.events import ExtensionKind, LsdField, ParseState
from gifmetadata.scratch import ScratchAccumulator


@dataclass
class ParserContext:
    state: ParseState = ParseState.HEADER
    lsd_field: LsdField = LsdField.WIDTH
    lsd_packed: int = 0
    color_table_length: int = 0
    extension_kind: ExtensionKind = ExtensionKind.NONE
    scratch: ScratchAccumulator = field(default_factory=ScratchAccumulator)
    saw_trailer: bool = False

    # Bytes left in the color table being skipped
    skip_remaining: int = 0
    # Data bytes left in a generic sub-block; 0 means a size byte is next
    block_remaining: int = 0
    # Image data starts with the LZW minimum code size byte
    lzw_code_size_pending: bool = False

    # Known extension sub-state
    in_sub_block: bool = False
    sub_block_index: int = 0
    text: bytearray = field(default_factory=bytearray)

    # Absolute offset of the next byte to be consumed
    offset: int = 0

    version: Optional[str] = None
    canvas_width: Optional[int] = None
    canvas_height: Optional[int] = None
    image_count: int = 0
