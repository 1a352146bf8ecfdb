from __future__ import annotations

from typing import Protocol


class ByteSource(Protocol):
    """
    Upstream byte-range reader.

    pull() returns at most `length` bytes starting at `offset`; b"" means end
    of stream. Failures are raised as UpstreamReadError.
    """

    def pull(self, offset: int, length: int) -> bytes: ...


class MemoryByteSource:
    def __init__(self, data: bytes | str):
        self.data = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        self.pulls = 0

    def pull(self, offset: int, length: int) -> bytes:
        self.pulls += 1
        return self.data[offset : offset + length]
