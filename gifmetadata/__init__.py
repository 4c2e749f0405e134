# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
gifmetadata - streaming GIF text metadata extraction

Reads comments, application extensions and plain text blocks from GIF87a
and GIF89a streams without decoding any image data. Input may arrive in
chunks of any size.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from gifmetadata.config import ParserConfig
from gifmetadata.core import ApplicationExtension, ExtractionResult, GIFMetadata
from gifmetadata.events import (
    ExtensionEvent,
    ExtensionKind,
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
    MetadataReadError,
    ParserClosedError,
    TruncatedHeaderError,
)
from gifmetadata.parser import GIFStreamParser, color_table_length, iter_events, read_gif_stream
from gifmetadata.sources import iter_bytes_chunks, iter_file_chunks

__all__ = [
    "ParserConfig",
    "ApplicationExtension",
    "ExtractionResult",
    "GIFMetadata",
    "ExtensionEvent",
    "ExtensionKind",
    "ParseResult",
    "ParseState",
    "ParseStatus",
    "ParseWarning",
    "StateEvent",
    "WarningKind",
    "BufferOverflowError",
    "GifMetadataError",
    "InvalidSignatureError",
    "MetadataReadError",
    "ParserClosedError",
    "TruncatedHeaderError",
    "GIFStreamParser",
    "color_table_length",
    "iter_events",
    "read_gif_stream",
    "iter_bytes_chunks",
    "iter_file_chunks",
]
