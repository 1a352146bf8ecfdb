from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from lrc_stream.lrc.model import LyricEntry


@dataclass(frozen=True, slots=True)
class SinkResult:
    accepted: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> "SinkResult":
        return cls(accepted=True)

    @classmethod
    def rejected(cls, reason: str) -> "SinkResult":
        return cls(accepted=False, reason=reason)


class LyricSink(Protocol):
    def accept(self, entry: LyricEntry) -> SinkResult: ...

    def signal_end_of_stream(self) -> None: ...
