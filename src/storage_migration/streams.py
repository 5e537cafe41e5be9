"""Byte streams passed between filesystems.

Streams are `anyio` byte receive streams: they yield chunks from `receive()`, raise
`anyio.EndOfStream` once drained, and can be iterated with `async for`. Closing a stream
more than once is a no-op.
"""

from anyio import ClosedResourceError, EndOfStream
from anyio.abc import ByteReceiveStream
from typing_extensions import override

ReadStream = ByteReceiveStream

DEFAULT_CHUNK_SIZE = 65536


class BytesReadStream(ByteReceiveStream):
    """A read stream over an in-memory bytes buffer."""

    def __init__(self, data: bytes, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            msg = f"chunk_size must be positive, got {chunk_size}"
            raise ValueError(msg)

        self._data: memoryview = memoryview(data)
        self._chunk_size: int = chunk_size
        self._position: int = 0
        self._closed: bool = False

    @property
    def closed(self) -> bool:
        return self._closed

    @override
    async def receive(self, max_bytes: int = DEFAULT_CHUNK_SIZE) -> bytes:
        if self._closed:
            raise ClosedResourceError

        if self._position >= len(self._data):
            raise EndOfStream

        end = self._position + min(max_bytes, self._chunk_size)
        chunk = bytes(self._data[self._position : end])
        self._position += len(chunk)
        return chunk

    @override
    async def aclose(self) -> None:
        self._closed = True


async def read_all(stream: ReadStream) -> bytes:
    """Drain a stream into memory. The stream is left open."""
    return b"".join([chunk async for chunk in stream])
