import io
import random

import pytest

from gifmetadata.parser import GIFStreamParser
from gifmetadata.sources import iter_bytes_chunks, iter_file_chunks

from gif_streams import SAMPLE_EXTENSIONS, extensions_of, run_parser


@pytest.mark.parametrize("chunk_size", [1, 2, 3, 7, 13, 256, None])
def test_events_do_not_depend_on_chunking(sample_bytes, chunk_size):
    whole_events, whole_result = run_parser(sample_bytes)
    events, result = run_parser(sample_bytes, chunk_size=chunk_size)
    assert extensions_of(events) == SAMPLE_EXTENSIONS
    assert events == whole_events
    assert result == whole_result


def test_whole_file_as_one_chunk(sample_bytes):
    events, _ = run_parser(sample_bytes, chunk_size=len(sample_bytes))
    assert extensions_of(events) == SAMPLE_EXTENSIONS


@pytest.mark.parametrize("seed", range(5))
def test_random_split_points(sample_bytes, seed):
    rng = random.Random(seed)
    parser = GIFStreamParser()
    events = []
    pos = 0
    while pos < len(sample_bytes):
        size = rng.choice([0, 1, 2, 5, 11, 40, 300])
        events.extend(parser.feed(sample_bytes[pos:pos + size]))
        pos += size
    assert extensions_of(events) == SAMPLE_EXTENSIONS
    assert parser.close().warnings == []


def test_iter_bytes_chunks():
    assert list(iter_bytes_chunks(b'abcdefg', 3)) == [b'abc', b'def', b'g']
    assert list(iter_bytes_chunks(b'', 3)) == []


def test_iter_bytes_chunks_rejects_bad_size():
    with pytest.raises(ValueError):
        list(iter_bytes_chunks(b'abc', 0))


def test_iter_file_chunks_from_path(sample_path, sample_bytes):
    chunks = list(iter_file_chunks(sample_path, 100))
    assert b''.join(chunks) == sample_bytes
    assert all(len(chunk) <= 100 for chunk in chunks)


def test_iter_file_chunks_from_file_object(sample_bytes):
    stream = io.BytesIO(sample_bytes)
    chunks = list(iter_file_chunks(stream, 64))
    assert b''.join(chunks) == sample_bytes
    assert not stream.closed
