# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for gifmetadata

Only fatal conditions are exceptions. Recoverable anomalies (unsupported
version, stray bytes, missing trailer) are reported as ParseWarning
records once the parse has finished.

Copyright 2025 DNAi inc.
"""


class GifMetadataError(Exception):
    """
    Base exception for all gifmetadata errors.

    All gifmetadata exceptions inherit from this class, allowing
    catch-all error handling for any parse-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(GifMetadataError):
    """
    Raised when metadata cannot be read from a GIF stream.

    This exception is raised when:
    - The file cannot be opened or read
    - The stream does not start with a GIF header
    - The stream ends before the header is complete
    """
    pass


class InvalidSignatureError(MetadataReadError):
    """
    Raised when the first three bytes of the stream are not ``GIF``.

    The parse is aborted immediately; no extension events are emitted.
    """
    pass


class TruncatedHeaderError(MetadataReadError):
    """Raised when the stream ends before the 6-byte header was read."""
    pass


class BufferOverflowError(GifMetadataError):
    """
    Raised when a write would run past the scratch buffer capacity.

    Sub-block lengths are single bytes so this cannot happen on any input;
    seeing it means an internal invariant was broken.
    """
    pass


class ParserClosedError(GifMetadataError):
    """Raised when a parser is fed after it was closed or failed."""
    pass
