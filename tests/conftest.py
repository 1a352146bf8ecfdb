from __future__ import annotations

import itertools

import pytest

from lrc_stream.demux.errors import UpstreamReadError
from lrc_stream.lrc.model import LyricEntry
from lrc_stream.sinks.base import SinkResult


SAMPLE_LRC = (
    "[ti:Yellow]\n"
    "[ar:Coldplay]\n"
    "[al:Parachutes]\n"
    "[by:someone]\n"
    "[offset:+250]\n"
    "\n"
    "[00:01.50]Look\n"
    "[00:05.00]at the stars\n"
    "[00:09.25]Look how they shine\n"
    "[01:02.03]\n"
    "[00:59.99]Yellow\n"
    "a stray comment\n"
    "[01:10.00]Привет мир"
)


class ChunkedSource:
    """Returns chunks cycling through `sizes`, never more than asked for."""

    def __init__(self, data: bytes, sizes: tuple[int, ...]):
        self.data = data
        self._sizes = itertools.cycle(sizes)
        self.offsets: list[int] = []

    def pull(self, offset: int, length: int) -> bytes:
        self.offsets.append(offset)
        n = min(length, next(self._sizes))
        return self.data[offset : offset + n]


class FailingSource:
    def __init__(self, data: bytes, fail_at: int):
        self.data = data
        self.fail_at = fail_at

    def pull(self, offset: int, length: int) -> bytes:
        if offset >= self.fail_at:
            raise UpstreamReadError(f"device gone at {offset}")
        return self.data[offset : offset + length]


class RejectingSink:
    """Rejects the entries whose index is in `reject`, once each."""

    def __init__(self, reject: set[int]):
        self.reject = set(reject)
        self.calls = 0
        self.entries: list[LyricEntry] = []
        self.eos_count = 0

    def accept(self, entry: LyricEntry) -> SinkResult:
        idx = self.calls
        self.calls += 1
        if idx in self.reject:
            self.reject.discard(idx)
            return SinkResult.rejected("queue full")
        self.entries.append(entry)
        return SinkResult.ok()

    def signal_end_of_stream(self) -> None:
        self.eos_count += 1


@pytest.fixture
def sample_bytes() -> bytes:
    return SAMPLE_LRC.encode("utf-8")


@pytest.fixture
def lrc_file(tmp_path, sample_bytes):
    path = tmp_path / "yellow.lrc"
    path.write_bytes(sample_bytes)
    return path
