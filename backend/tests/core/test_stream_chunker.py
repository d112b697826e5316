"""Stream Chunker: fixed-size re-chunking of variable-size fragments.

Tests cover:
    - Concatenation of output == concatenation of input
    - Every chunk but the last has exactly max_size characters
    - Empty fragments ignored; empty input yields nothing
    - max_size < 1 rejected
    - ChunkStream is single-pass
    - Async variant matches the sync one
"""

import pytest

from journal_coach.core.stream_chunker import (
    ChunkStream, achunk_fragments, chunk_fragments,
)


def test_rechunks_to_exact_size():
    assert list(chunk_fragments(["ab", "c", "defg"], 3)) == ["abc", "def", "g"]


@pytest.mark.parametrize("fragments,size", [
    (["hello world, this is", " a ", "streamed reply"], 5),
    (["x"] * 17, 4),
    (["a long fragment that spans many chunks"], 3),
    (["", "abc", "", "de"], 2),
])
def test_concatenation_and_sizes(fragments, size):
    chunks = list(chunk_fragments(fragments, size))
    assert "".join(chunks) == "".join(fragments)
    assert all(len(c) == size for c in chunks[:-1])
    assert 1 <= len(chunks[-1]) <= size


def test_exact_multiple_has_no_short_tail():
    assert list(chunk_fragments(["abcdef"], 3)) == ["abc", "def"]


def test_empty_input_yields_nothing():
    assert list(chunk_fragments([], 5)) == []
    assert list(chunk_fragments(["", ""], 5)) == []


def test_size_one_emits_each_character():
    assert list(chunk_fragments(["ab", "c"], 1)) == ["a", "b", "c"]


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        ChunkStream(0)
    with pytest.raises(ValueError):
        list(chunk_fragments(["abc"], -1))


def test_chunk_stream_state_machine():
    stream = ChunkStream(4)
    assert stream.feed("ab") == []
    assert stream.pending == 2
    assert stream.feed("cdefghij") == ["abcd", "efgh"]
    assert stream.pending == 2
    assert stream.flush() == "ij"
    assert stream.pending == 0


def test_flush_with_empty_buffer_returns_none():
    stream = ChunkStream(3)
    stream.feed("abc")
    assert stream.flush() is None


def test_feed_after_flush_raises():
    stream = ChunkStream(3)
    stream.flush()
    with pytest.raises(RuntimeError):
        stream.feed("abc")


def test_sync_generator_is_lazy():
    def fragments():
        yield "abcd"
        raise AssertionError("consumed too far")

    gen = chunk_fragments(fragments(), 2)
    assert next(gen) == "ab"
    assert next(gen) == "cd"


async def _agen(items):
    for item in items:
        yield item


async def test_async_variant_matches_sync():
    fragments = ["Hel", "lo, ", "", "wor", "ld!"]
    chunks = [c async for c in achunk_fragments(_agen(fragments), 5)]
    assert chunks == list(chunk_fragments(fragments, 5))
    assert chunks == ["Hello", ", wor", "ld!"]
