# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Bounded scratch buffer

Reassembles multi-byte fields and length-prefixed sub-blocks that may be
split across chunk boundaries. A GIF block size is a single byte, so 256
bytes is always enough.
"""

from gifmetadata.exceptions import BufferOverflowError


SCRATCH_CAPACITY = 256


class ScratchAccumulator:
    """
    Fixed-capacity byte buffer with a cursor and an expected length.

    ``expected_length`` is the length the current field or sub-block
    should reach; ``is_complete()`` reports when it has.
    """

    __slots__ = ('_buffer', 'write_index', 'expected_length', 'capacity')

    def __init__(self, capacity: int = SCRATCH_CAPACITY):
        self.capacity = capacity
        self._buffer = bytearray(capacity)
        self.write_index = 0
        self.expected_length = 0

    def reset(self, expected_length: int = 0) -> None:
        """Start a new field or sub-block of ``expected_length`` bytes."""
        if not 0 <= expected_length <= self.capacity:
            raise BufferOverflowError(
                f"expected length {expected_length} exceeds scratch capacity {self.capacity}"
            )
        self.write_index = 0
        self.expected_length = expected_length

    def push(self, byte: int) -> None:
        """
        Append one byte.

        Raises:
            BufferOverflowError: If the buffer is already full
        """
        if self.write_index >= self.capacity:
            raise BufferOverflowError(
                f"scratch buffer full at {self.capacity} bytes"
            )
        self._buffer[self.write_index] = byte
        self.write_index += 1

    def extend(self, data: bytes) -> None:
        """
        Append a run of bytes.

        Raises:
            BufferOverflowError: If the run does not fit; nothing is written
        """
        end = self.write_index + len(data)
        if end > self.capacity:
            raise BufferOverflowError(
                f"write of {len(data)} bytes at index {self.write_index} "
                f"exceeds scratch capacity {self.capacity}"
            )
        self._buffer[self.write_index:end] = data
        self.write_index = end

    def is_complete(self) -> bool:
        return self.write_index >= self.expected_length

    @property
    def remaining(self) -> int:
        """Bytes still missing before the expected length is reached."""
        return max(self.expected_length - self.write_index, 0)

    @property
    def data(self) -> bytes:
        """Bytes written since the last reset."""
        return bytes(self._buffer[:self.write_index])

    def __len__(self) -> int:
        return self.write_index

    def __getitem__(self, index: int) -> int:
        if not 0 <= index < self.write_index:
            raise IndexError("scratch index out of range")
        return self._buffer[index]
