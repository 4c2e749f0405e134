# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Byte sources

The parser only needs an iterable of byte chunks. These helpers produce
one from a file or from bytes already in memory.
"""

from pathlib import Path
from typing import BinaryIO, Iterator, Union

from gifmetadata.config import DEFAULT_CHUNK_SIZE


def _check_chunk_size(chunk_size: int) -> None:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")


def iter_bytes_chunks(data: bytes, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Split in-memory data into chunks of at most ``chunk_size`` bytes."""
    _check_chunk_size(chunk_size)
    view = memoryview(data)
    for start in range(0, len(view), chunk_size):
        yield bytes(view[start:start + chunk_size])


def iter_file_chunks(
    source: Union[str, Path, BinaryIO],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterator[bytes]:
    """
    Read a file in chunks.

    Args:
        source: Path to a file, or a binary file object opened by the caller
        chunk_size: Maximum number of bytes per chunk

    Yields:
        Chunks in file order until end of file

    Note:
        A file object passed in is read from its current position and left
        open; a path is opened and closed here.
    """
    _check_chunk_size(chunk_size)
    if isinstance(source, (str, Path)):
        with open(source, 'rb') as f:
            yield from _read_chunks(f, chunk_size)
    else:
        yield from _read_chunks(source, chunk_size)


def _read_chunks(f: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    while True:
        chunk = f.read(chunk_size)
        if not chunk:
            break
        yield chunk
