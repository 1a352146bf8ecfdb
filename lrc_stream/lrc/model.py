from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .timeline import LyricTimeline


@dataclass(frozen=True, slots=True)
class LyricEntry:
    t_ms: int
    text: str

    @property
    def timestamp(self) -> timedelta:
        return timedelta(milliseconds=self.t_ms)


# LRC tag prefix -> Metadata field, in match order
METADATA_TAGS: tuple[tuple[str, str], ...] = (
    ("ti:", "title"),
    ("ar:", "artist"),
    ("al:", "album"),
    ("by:", "creator"),
    ("re:", "remark"),
    ("ve:", "version"),
    ("offset:", "offset"),
)


@dataclass(slots=True)
class Metadata:
    title: str | None = None
    artist: str | None = None
    album: str | None = None
    creator: str | None = None
    remark: str | None = None
    version: str | None = None
    offset: str | None = None

    def set(self, key: str, value: str) -> None:
        if key not in self.keys():
            raise KeyError(key)
        setattr(self, key, value)

    @staticmethod
    def keys() -> tuple[str, ...]:
        return tuple(f.name for f in fields(Metadata))

    def as_dict(self) -> dict[str, str]:
        """Only the keys that were set."""
        return {k: v for k in self.keys() if (v := getattr(self, k)) is not None}

    @property
    def offset_ms(self) -> int | None:
        # informational; timestamps are never shifted by it
        if self.offset is None:
            return None
        try:
            return int(self.offset.strip())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class MetadataTag:
    key: str
    value: str


@dataclass(frozen=True, slots=True)
class Lyric:
    entry: LyricEntry


@dataclass(frozen=True, slots=True)
class Ignored:
    reason: str


Classified = MetadataTag | Lyric | Ignored


@dataclass(frozen=True, slots=True)
class LrcDocument:
    timeline: LyricTimeline
    metadata: Metadata

    @property
    def entries(self) -> tuple[LyricEntry, ...]:
        return self.timeline.entries
