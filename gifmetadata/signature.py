# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
GIF signature validation

The first six bytes of a GIF stream are the ASCII signature ``GIF``
followed by a three character version, ``87a`` or ``89a``.
"""

from dataclasses import dataclass

from gifmetadata.exceptions import InvalidSignatureError, TruncatedHeaderError


GIF_SIGNATURE = b'GIF'
GIF_87A = b'87a'
GIF_89A = b'89a'
SUPPORTED_VERSIONS = (GIF_87A, GIF_89A)
HEADER_LENGTH = 6


@dataclass(frozen=True)
class SignatureInfo:
    """Version read from a validated header."""
    version: str
    supported: bool


def is_signature_prefix(data: bytes) -> bool:
    """
    Check the signature bytes seen so far.

    Args:
        data: The first bytes of the stream, any length

    Returns:
        False as soon as one of the first three bytes differs from ``GIF``
    """
    prefix = bytes(data[:len(GIF_SIGNATURE)])
    return GIF_SIGNATURE.startswith(prefix)


def validate_signature(header: bytes) -> SignatureInfo:
    """
    Validate the 6-byte GIF header.

    Args:
        header: The first bytes of the stream

    Returns:
        SignatureInfo with the version string and whether it is supported

    Raises:
        InvalidSignatureError: If the available bytes do not start with ``GIF``
        TruncatedHeaderError: If fewer than 6 bytes are available
    """
    if not is_signature_prefix(header):
        raise InvalidSignatureError("file does not appear to be a gif (wrong sig)")
    if len(header) < HEADER_LENGTH:
        raise TruncatedHeaderError("file does not appear to be a gif (too small)")

    version = bytes(header[len(GIF_SIGNATURE):HEADER_LENGTH])
    return SignatureInfo(
        version=version.decode('latin-1'),
        supported=version in SUPPORTED_VERSIONS,
    )
