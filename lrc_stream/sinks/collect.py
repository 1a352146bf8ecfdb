from __future__ import annotations

import logging

from lrc_stream.lrc.model import LyricEntry

from .base import SinkResult

logger = logging.getLogger(__name__)


class CollectingSink:
    """Keeps every accepted entry and records end of stream."""

    def __init__(self) -> None:
        self.entries: list[LyricEntry] = []
        self.eos_count = 0

    @property
    def ended(self) -> bool:
        return self.eos_count > 0

    def accept(self, entry: LyricEntry) -> SinkResult:
        logger.debug("Store %d bytes at %d ms", len(entry.text.encode("utf-8")), entry.t_ms)
        self.entries.append(entry)
        return SinkResult.ok()

    def signal_end_of_stream(self) -> None:
        logger.debug("Received end of stream after %d entries", len(self.entries))
        self.eos_count += 1
