# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Parse states, events and results

Every record here is created by the parser and handed to the caller;
events are frozen so a sink can keep them without copying.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class ParseState(Enum):
    """Top-level states of the block state machine."""
    HEADER = "header"
    LOGICAL_SCREEN_DESCRIPTOR = "logical_screen_descriptor"
    GLOBAL_COLOR_TABLE = "global_color_table"
    SEARCHING = "searching"
    EXTENSION = "extension"
    KNOWN_EXTENSION = "known_extension"
    UNKNOWN_EXTENSION = "unknown_extension"
    IMAGE_DESCRIPTOR = "image_descriptor"
    LOCAL_COLOR_TABLE = "local_color_table"
    IMAGE_DATA = "image_data"
    TRAILER = "trailer"


class LsdField(Enum):
    """Field of the logical screen descriptor currently being read."""
    WIDTH = "width"
    HEIGHT = "height"
    PACKED = "packed"
    BACKGROUND_COLOR = "background_color"
    PIXEL_ASPECT_RATIO = "pixel_aspect_ratio"


class ExtensionKind(Enum):
    """Kind of extension block being decoded."""
    PLAIN_TEXT = "plain text"
    APPLICATION = "application"
    APPLICATION_SUBBLOCK = "application subblock"
    COMMENT = "comment"
    UNKNOWN = "unknown"
    NONE = "none"


class WarningKind(Enum):
    """Non-fatal anomalies collected during a parse."""
    UNSUPPORTED_VERSION = "unsupported_version"
    UNKNOWN_BYTE_WHILE_SEARCHING = "unknown_byte_while_searching"
    NO_TRAILER_OBSERVED = "no_trailer_observed"


class ParseStatus(Enum):
    """Outcome of a complete parse."""
    SUCCESS = "success"
    INVALID_SIGNATURE = "invalid_signature"
    TRUNCATED_HEADER = "truncated_header"
    BUFFER_OVERFLOW = "buffer_overflow"


@dataclass(frozen=True)
class ExtensionEvent:
    """Text extracted from one extension sub-block or text unit."""
    kind: ExtensionKind
    text: bytes


@dataclass(frozen=True)
class StateEvent:
    """Notification that the parser entered ``state``."""
    state: ParseState


ParseEvent = Union[StateEvent, ExtensionEvent]


@dataclass(frozen=True)
class ParseWarning:
    """A recoverable anomaly, with the stream offset where it was seen."""
    kind: WarningKind
    message: str
    offset: Optional[int] = None


@dataclass
class ParseResult:
    """
    Summary returned once the byte source is exhausted.

    ``bytes_read`` counts the bytes the parser consumed; input fed after
    the trailer in strict mode is not included.
    """
    status: ParseStatus
    version: Optional[str] = None
    canvas_width: Optional[int] = None
    canvas_height: Optional[int] = None
    image_count: int = 0
    saw_trailer: bool = False
    final_state: ParseState = ParseState.HEADER
    bytes_read: int = 0
    warnings: List[ParseWarning] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when the stream reached its trailer."""
        return self.status == ParseStatus.SUCCESS and self.saw_trailer
