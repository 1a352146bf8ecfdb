from __future__ import annotations

from lrc_stream.lrc.model import LyricEntry, Metadata
from lrc_stream.render.ansi import AnsiRenderer

from .base import SinkResult


def _title(metadata: Metadata | None) -> str:
    if metadata is None:
        return "lrc-stream"
    if metadata.artist and metadata.title:
        return f"{metadata.artist} - {metadata.title}"
    return metadata.title or metadata.artist or "lrc-stream"


def _clock(ms: int) -> str:
    m, rem = divmod(ms, 60_000)
    return f"{m:02d}:{rem // 1000:02d}.{rem % 1000 // 10:02d}"


class ConsoleSink:
    """Shows each entry as it arrives, highlighting the newest line."""

    def __init__(
        self,
        renderer: AnsiRenderer,
        *,
        metadata: Metadata | None = None,
        context_lines: int = 1,
    ):
        self.renderer = renderer
        self.metadata = metadata
        self.context_lines = context_lines
        self.lines: list[str] = []

    def accept(self, entry: LyricEntry) -> SinkResult:
        self.lines.append(entry.text)
        self.renderer.render(
            _title(self.metadata),
            self.lines,
            current_idx=len(self.lines) - 1,
            context_lines=self.context_lines,
            footer=_clock(entry.t_ms),
        )
        return SinkResult.ok()

    def signal_end_of_stream(self) -> None:
        self.renderer.render(
            _title(self.metadata),
            self.lines,
            current_idx=-1,
            context_lines=self.context_lines,
            footer="[end]",
        )
