"""Stream Chunker: repackages variable-size text fragments into fixed-size chunks.

Invariants:
    - Every character fed is emitted exactly once, in arrival order
    - Every chunk except possibly the last has exactly max_size characters
    - The final (possibly short) chunk is emitted only on flush, never empty
    - A ChunkStream is single-pass: feeding after flush raises RuntimeError

Design Decisions:
    - ChunkStream is an explicit state machine (buffer, emit-while-over-threshold,
      flush-on-end); the generators below are thin pull-based wrappers over it
    - Pure core module: no IO, no logging
"""

from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator


class ChunkStream:
    """Per-call chunking state: accumulation buffer + maximum chunk size."""

    def __init__(self, max_size: int):
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self.max_size = max_size
        self._buffer = ""
        self._flushed = False

    @property
    def pending(self) -> int:
        """Characters buffered but not yet emitted."""
        return len(self._buffer)

    def feed(self, fragment: str) -> list[str]:
        """Append a fragment; return every full chunk now available."""
        if self._flushed:
            raise RuntimeError("ChunkStream already flushed")
        if not fragment:
            return []
        self._buffer += fragment
        chunks = []
        while len(self._buffer) >= self.max_size:
            chunks.append(self._buffer[:self.max_size])
            self._buffer = self._buffer[self.max_size:]
        return chunks

    def flush(self) -> str | None:
        """End of input: return the remainder (if any) and close the stream."""
        self._flushed = True
        remainder, self._buffer = self._buffer, ""
        return remainder or None


def chunk_fragments(fragments: Iterable[str], max_size: int) -> Iterator[str]:
    """Lazily re-chunk a synchronous fragment sequence."""
    stream = ChunkStream(max_size)
    for fragment in fragments:
        yield from stream.feed(fragment)
    remainder = stream.flush()
    if remainder is not None:
        yield remainder


async def achunk_fragments(
    fragments: AsyncIterable[str], max_size: int,
) -> AsyncIterator[str]:
    """Lazily re-chunk an async fragment stream (e.g. LLM text deltas)."""
    stream = ChunkStream(max_size)
    async for fragment in fragments:
        for chunk in stream.feed(fragment):
            yield chunk
    remainder = stream.flush()
    if remainder is not None:
        yield remainder
