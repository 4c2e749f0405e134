"""Builders for synthetic GIF streams used across the test suite."""

import struct
from typing import Optional

from gifmetadata.events import ExtensionEvent, ExtensionKind, StateEvent
from gifmetadata.parser import GIFStreamParser
from gifmetadata.sources import iter_bytes_chunks

TRAILER = b'\x3b'


def header(version: bytes = b'89a') -> bytes:
    return b'GIF' + version


def screen_descriptor(width: int = 1, height: int = 1, global_table_size: Optional[int] = None,
                      background: int = 0, aspect: int = 0) -> bytes:
    packed = 0x70
    if global_table_size is not None:
        packed |= 0x80 | global_table_size
    return struct.pack('<HHBBB', width, height, packed, background, aspect)


def color_table(size: int, fill: bytes = b'\x21') -> bytes:
    """Color table full of introducer bytes, so a wrong skip length shows up."""
    return fill * (3 * 2 ** (size + 1))


def sub_blocks(*blocks: bytes) -> bytes:
    out = b''
    for block in blocks:
        assert len(block) < 256
        out += bytes([len(block)]) + block
    return out + b'\x00'


def comment_extension(*blocks: bytes) -> bytes:
    return b'\x21\xfe' + sub_blocks(*blocks)


def application_extension(identifier: bytes, *blocks: bytes) -> bytes:
    return b'\x21\xff' + sub_blocks(identifier, *blocks)


def plain_text_extension(*blocks: bytes) -> bytes:
    grid = struct.pack('<HHHHBBBB', 0, 0, 64, 16, 8, 16, 1, 0)
    return b'\x21\x01' + sub_blocks(grid, *blocks)


def graphic_control_extension(delay: int = 10) -> bytes:
    return b'\x21\xf9' + sub_blocks(struct.pack('<BHB', 0, delay, 0))


def image(width: int = 1, height: int = 1, local_table_size: Optional[int] = None,
          data: bytes = b'\x4c\x01') -> bytes:
    packed = 0
    table = b''
    if local_table_size is not None:
        packed = 0x80 | local_table_size
        table = color_table(local_table_size, fill=b'\x3b')
    descriptor = struct.pack('<HHHHB', 0, 0, width, height, packed)
    return b'\x2c' + descriptor + table + b'\x02' + sub_blocks(data)


def gif(*blocks: bytes, version: bytes = b'89a', global_table_size: Optional[int] = None,
        trailer: bool = True, width: int = 1, height: int = 1) -> bytes:
    out = header(version) + screen_descriptor(width, height, global_table_size)
    if global_table_size is not None:
        out += color_table(global_table_size)
    out += b''.join(blocks)
    if trailer:
        out += TRAILER
    return out


def sample_gif() -> bytes:
    """A small animated GIF carrying every kind of text metadata."""
    return gif(
        application_extension(b'NETSCAPE2.0', b'\x01\x00\x00'),
        comment_extension(b'Copyright 1996 ', b'Example Corp.'),
        graphic_control_extension(),
        image(width=4, height=4, data=b'\x21\x3b\x2c\x00\xfe'),
        plain_text_extension(b'Hello, ', b'world'),
        graphic_control_extension(),
        image(width=4, height=4, local_table_size=2, data=bytes(range(200))),
        comment_extension(b'second frame'),
        global_table_size=1,
        width=4,
        height=4,
    )


SAMPLE_EXTENSIONS = [
    ExtensionEvent(ExtensionKind.APPLICATION, b'NETSCAPE2.0'),
    ExtensionEvent(ExtensionKind.APPLICATION_SUBBLOCK, b'\x01\x00\x00'),
    ExtensionEvent(ExtensionKind.COMMENT, b'Copyright 1996 Example Corp.'),
    ExtensionEvent(ExtensionKind.PLAIN_TEXT, b'Hello, world'),
    ExtensionEvent(ExtensionKind.COMMENT, b'second frame'),
]


def run_parser(data: bytes, chunk_size: Optional[int] = None, config=None):
    """Feed ``data`` to a fresh parser and return (events, result)."""
    parser = GIFStreamParser(config)
    chunks = [data] if chunk_size is None else iter_bytes_chunks(data, chunk_size)
    events = []
    for chunk in chunks:
        events.extend(parser.feed(chunk))
    return events, parser.close()


def extensions_of(events):
    return [e for e in events if isinstance(e, ExtensionEvent)]


def states_of(events):
    return [e.state for e in events if isinstance(e, StateEvent)]
