from __future__ import annotations

from dataclasses import dataclass
import logging

import regex

from lrc_stream.demux.errors import EmptySource, MalformedTimestamp

from .model import (
    METADATA_TAGS,
    Classified,
    Ignored,
    LrcDocument,
    Lyric,
    LyricEntry,
    Metadata,
    MetadataTag,
)
from .reassemble import LineReassembler
from .timeline import LyricTimeline

logger = logging.getLogger(__name__)

_TS_RE = regex.compile(r"^\[(\d+):(\d+)\.(\d{2})\]", regex.ASCII)  # [mm:ss.cc]
_WS_RE = regex.compile(r"\s")


@dataclass(frozen=True, slots=True)
class LrcParseStats:
    lines_total: int
    events_total: int
    metadata_total: int
    lines_ignored: int


def parse_timestamp(tag: str) -> tuple[int, int]:
    """
    Parse a leading [mm:ss.cc] tag.

    Returns (t_ms, end) where end is the index just past the closing bracket.
    Minutes and seconds are taken literally, so [01:75.00] is 135 s.
    """
    m = _TS_RE.match(tag)
    if not m:
        raise MalformedTimestamp(f"Not a [mm:ss.cc] tag: {tag!r}")
    mm, ss, cc = (int(g) for g in m.groups())
    return (mm * 60 + ss) * 1000 + cc * 10, m.end()


def _metadata_value(rest: str) -> str:
    end = rest.rfind("]")
    if end != -1:
        rest = rest[:end]
    return rest.strip()


def _lyric_text(rest: str, whole_text: bool) -> str:
    if whole_text:
        return rest.strip()
    rest = rest.lstrip()
    ws = _WS_RE.search(rest)
    return rest[: ws.start()] if ws else rest


def parse_line(line: str, *, whole_text: bool = False) -> Classified:
    """
    Classify one logical line.

    - not starting with "[": Ignored
    - [ti:], [ar:], [al:], [by:], [re:], [ve:], [offset:]: MetadataTag
    - [mm:ss.cc]text: Lyric; text stops at the first whitespace unless
      whole_text is set
    - any other bracketed line: Ignored (malformed timestamp, skipped)
    """
    if not line.startswith("["):
        logger.debug("Not an LRC tag, ignoring: %r", line)
        return Ignored("not a tag")

    body = line[1:]
    for prefix, key in METADATA_TAGS:
        if body.startswith(prefix):
            return MetadataTag(key=key, value=_metadata_value(body[len(prefix) :]))

    try:
        t_ms, end = parse_timestamp(line)
    except MalformedTimestamp as e:
        logger.warning("Skipping line: %s", e)
        return Ignored("malformed timestamp")

    return Lyric(LyricEntry(t_ms=t_ms, text=_lyric_text(line[end:], whole_text)))


class LrcStreamParser:
    """
    Incremental parse state for one source: feed chunks as they arrive,
    then call finish() once the input is exhausted.
    """

    def __init__(
        self,
        *,
        whole_text: bool = False,
        encoding: str = "utf-8",
        logger: logging.Logger | None = None,
    ):
        self.whole_text = whole_text
        self.log = logger if logger is not None else logging.getLogger(__name__)
        self.metadata = Metadata()
        self.timeline = LyricTimeline()
        self.parsed = False
        self._reassembler = LineReassembler(encoding)
        self._lines = 0
        self._tags = 0
        self._ignored = 0

    def feed(self, chunk: bytes) -> int:
        """Returns how many entries the chunk completed."""
        before = len(self.timeline)
        for line in self._reassembler.feed(chunk):
            self._consume(line)
        return len(self.timeline) - before

    def finish(self) -> LyricTimeline:
        tail = self._reassembler.flush()
        if tail is not None:
            self._consume(tail)
        self.timeline.freeze()
        self.parsed = True
        self.log.debug(
            "Parsed %d lines: %d entries, %d tags, %d ignored",
            self._lines,
            len(self.timeline),
            self._tags,
            self._ignored,
        )
        return self.timeline

    @property
    def stats(self) -> LrcParseStats:
        return LrcParseStats(
            lines_total=self._lines,
            events_total=len(self.timeline),
            metadata_total=self._tags,
            lines_ignored=self._ignored,
        )

    def document(self) -> LrcDocument:
        return LrcDocument(timeline=self.timeline, metadata=self.metadata)

    def _consume(self, line: str) -> None:
        if self._lines == 0:
            line = line.lstrip("\ufeff")  # BOM
        self._lines += 1
        res = parse_line(line, whole_text=self.whole_text)
        if isinstance(res, Lyric):
            self.timeline.append(res.entry)
        elif isinstance(res, MetadataTag):
            self._tags += 1
            self.metadata.set(res.key, res.value)
        else:
            self._ignored += 1


def parse_lrc_with_stats(
    data: str | bytes, *, whole_text: bool = False, strict: bool = False, encoding: str = "utf-8"
) -> tuple[LrcDocument, LrcParseStats]:
    if isinstance(data, str):
        data, encoding = data.encode("utf-8"), "utf-8"
    p = LrcStreamParser(whole_text=whole_text, encoding=encoding)
    p.feed(data)
    p.finish()
    if strict and p.timeline.is_empty():
        raise EmptySource("No timestamped lyric lines found")
    return p.document(), p.stats


def parse_lrc(
    data: str | bytes, *, whole_text: bool = False, strict: bool = False, encoding: str = "utf-8"
) -> LrcDocument:
    """
    Parse a whole LRC text in one go.

    Entries keep source order, [offset:] is recorded but not applied.
    With strict=True an input without lyric lines raises EmptySource.
    Bytes are decoded with `encoding`; str input is used as is.
    """
    doc, _stats = parse_lrc_with_stats(data, whole_text=whole_text, strict=strict, encoding=encoding)
    return doc
