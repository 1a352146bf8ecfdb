from __future__ import annotations

from typing import Iterator

from lrc_stream.demux.errors import TimelineFrozen

from .model import LyricEntry


class LyricTimeline:
    """
    Entries in parse order. Nothing is sorted or deduplicated: out of order
    timestamps in the source come out in the same order.
    """

    def __init__(self, entries: tuple[LyricEntry, ...] = ()):
        self._entries: list[LyricEntry] = list(entries)
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def append(self, entry: LyricEntry) -> None:
        if self._frozen:
            raise TimelineFrozen("Timeline is read-only once parsing has completed")
        self._entries.append(entry)

    def iter(self) -> Iterator[LyricEntry]:
        return iter(tuple(self._entries))

    def __iter__(self) -> Iterator[LyricEntry]:
        return self.iter()

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, idx: int) -> LyricEntry:
        return self._entries[idx]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LyricTimeline):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"LyricTimeline({len(self._entries)} entries, frozen={self._frozen})"

    @property
    def entries(self) -> tuple[LyricEntry, ...]:
        return tuple(self._entries)
