from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import threading

from lrc_stream.lrc.model import LyricEntry, Metadata
from lrc_stream.lrc.parse import LrcStreamParser
from lrc_stream.lrc.reassemble import check_encoding
from lrc_stream.lrc.timeline import LyricTimeline
from lrc_stream.sinks.base import LyricSink
from lrc_stream.sources.base import ByteSource
from lrc_stream.sync.pacer import WallClockPacer

from .errors import DriverBusy, EntryRejected, UpstreamReadError

DEFAULT_BLOCK_SIZE = 50


@dataclass(frozen=True, slots=True)
class Capabilities:
    consumes: str
    produces: str


CAPABILITIES = Capabilities(consumes="ANY", produces="text/lrc")


class DriverState(str, Enum):
    UNPARSED = "unparsed"
    PARSING = "parsing"
    READY = "ready"
    DRAINING = "draining"
    DONE = "done"
    FAILED = "failed"


class DriveOutcome(str, Enum):
    PARSED = "parsed"
    EMITTED = "emitted"
    END_OF_STREAM = "end-of-stream"
    IDLE = "idle"
    NO_DATA = "no-data"
    CANCELLED = "cancelled"


_STOP_OUTCOMES = frozenset(
    {DriveOutcome.END_OF_STREAM, DriveOutcome.IDLE, DriveOutcome.NO_DATA, DriveOutcome.CANCELLED}
)


class LyricDriver:
    """
    Parses one LRC source and hands its entries to a sink, one per drive().

    The first drive() reads the whole source and builds the timeline. Each
    later drive() emits a single entry; the one that emits the last entry
    also signals end of stream. After that drive() is a no-op.

    The state machine is the same whether an outside scheduler calls drive()
    (pull) or run() loops over it (push).
    """

    def __init__(
        self,
        source: ByteSource,
        sink: LyricSink,
        *,
        block_size: int = DEFAULT_BLOCK_SIZE,
        whole_text: bool = False,
        encoding: str = "utf-8",
        logger: logging.Logger | None = None,
    ):
        if block_size <= 0:
            raise ValueError(f"block_size must be positive, got {block_size}")
        self.source = source
        self.sink = sink
        self.block_size = block_size
        self.whole_text = whole_text
        self.encoding = check_encoding(encoding)
        self.log = logger if logger is not None else logging.getLogger(__name__)

        self._state = DriverState.UNPARSED
        self._parser: LrcStreamParser | None = None
        self._cursor = 0
        self._stop = threading.Event()
        self._busy = threading.Lock()

    @property
    def state(self) -> DriverState:
        return self._state

    @property
    def metadata(self) -> Metadata:
        return self._parser.metadata if self._parser else Metadata()

    @property
    def timeline(self) -> LyricTimeline:
        return self._parser.timeline if self._parser else LyricTimeline()

    @property
    def position(self) -> int:
        return self._cursor

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def cancel(self) -> None:
        """Ask the driver to stop; honoured before the next unit of work."""
        self._stop.set()

    def clear_cancel(self) -> None:
        self._stop.clear()

    def drive(self) -> DriveOutcome:
        if not self._busy.acquire(blocking=False):
            raise DriverBusy("drive() is already running on this instance")
        try:
            if self._state is DriverState.UNPARSED:
                return self._parse_all()
            if self._state in (DriverState.READY, DriverState.DRAINING):
                return self._emit_one()
            if self._state is DriverState.DONE:
                return DriveOutcome.IDLE
            return DriveOutcome.NO_DATA
        finally:
            self._busy.release()

    def run(self, pacer: WallClockPacer | None = None) -> DriveOutcome:
        """
        Push model: keep driving until end of stream, failure or cancel.
        With a pacer each entry waits for its timestamp first.
        """
        while True:
            if pacer is not None and self._state in (DriverState.READY, DriverState.DRAINING):
                entry = self._next_entry()
                if not pacer.wait_until(entry.t_ms, self._stop):
                    self.log.info("Cancelled while waiting for entry at %d ms", entry.t_ms)
                    return DriveOutcome.CANCELLED
            outcome = self.drive()
            if outcome in _STOP_OUTCOMES:
                return outcome

    def _parse_all(self) -> DriveOutcome:
        self._state = DriverState.PARSING
        parser = LrcStreamParser(whole_text=self.whole_text, encoding=self.encoding, logger=self.log)
        offset = 0
        try:
            while True:
                if self._stop.is_set():
                    # nothing partial survives, the next drive starts over
                    self.log.info("Parse cancelled at offset %d", offset)
                    self._state = DriverState.UNPARSED
                    return DriveOutcome.CANCELLED
                chunk = self.source.pull(offset, self.block_size)
                if not chunk:
                    self.log.debug("End of stream after %d bytes", offset)
                    break
                offset += len(chunk)
                parser.feed(chunk)
        except UpstreamReadError as e:
            self.log.error("Upstream read failed at offset %d: %s", offset, e)
            self._state = DriverState.FAILED
            raise
        except Exception:
            self._state = DriverState.FAILED
            raise

        parser.finish()
        if parser.timeline.is_empty():
            self.log.error("No lyric entries in source (%d bytes read)", offset)
            self._state = DriverState.FAILED
            return DriveOutcome.NO_DATA

        self._parser = parser
        self._cursor = 0
        self._state = DriverState.READY
        self.log.info("Parsed %d lyric entries", len(parser.timeline))
        return DriveOutcome.PARSED

    def _next_entry(self) -> LyricEntry:
        assert self._parser is not None
        return self._parser.timeline[self._cursor]

    def _emit_one(self) -> DriveOutcome:
        if self._stop.is_set():
            return DriveOutcome.CANCELLED

        entry = self._next_entry()
        res = self.sink.accept(entry)
        if not res.accepted:
            # cursor stays put, retrying is up to the caller
            raise EntryRejected(entry, res.reason or "rejected")

        self._cursor += 1
        self.log.debug("Pushed entry %d at %d ms", self._cursor, entry.t_ms)
        if self._cursor >= len(self.timeline):
            # DONE before the sink call: later drives stay no-ops even if it raises
            self._state = DriverState.DONE
            self.sink.signal_end_of_stream()
            return DriveOutcome.END_OF_STREAM

        self._state = DriverState.DRAINING
        return DriveOutcome.EMITTED
