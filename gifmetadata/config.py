# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Parser configuration

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass


DEFAULT_CHUNK_SIZE = 256


@dataclass
class ParserConfig:
    """
    Options controlling how a GIF stream is read.

    Attributes:
        stop_at_trailer: Stop consuming input at the first trailer byte.
            By default the parser keeps scanning after the trailer so that
            comments appended past the end of the image are still found.
        chunk_size: Number of bytes requested per read by the byte
            sources in ``gifmetadata.sources``.
    """
    stop_at_trailer: bool = False
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
