from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lrc_stream.lrc.model import LyricEntry


class LrcStreamError(RuntimeError):
    pass


class MalformedTimestamp(LrcStreamError, ValueError):
    pass


class EmptySource(LrcStreamError):
    pass


class UpstreamReadError(LrcStreamError):
    pass


class TimelineFrozen(LrcStreamError):
    pass


class DriverBusy(LrcStreamError):
    pass


class EntryRejected(LrcStreamError):
    def __init__(self, entry: LyricEntry, reason: str):
        super().__init__(f"Entry at {entry.t_ms} ms rejected: {reason}")
        self.entry = entry
        self.reason = reason
