from __future__ import annotations

from dataclasses import replace
import logging
from pathlib import Path

import typer

from lrc_stream.config import load_config, save_config
from lrc_stream.demux.driver import DriveOutcome, LyricDriver
from lrc_stream.demux.errors import EntryRejected, UpstreamReadError
from lrc_stream.logging_setup import setup_logging
from lrc_stream.lrc.export import export_json, export_lrc, export_srt
from lrc_stream.lrc.parse import parse_lrc_with_stats
from lrc_stream.render.ansi import AnsiRenderer
from lrc_stream.sinks.console import ConsoleSink
from lrc_stream.sources.file import FileByteSource
from lrc_stream.sync.pacer import WallClockPacer

logger = logging.getLogger(__name__)

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        typer.echo(f"Error: cannot read {path}: {e}", err=True)
        raise typer.Exit(code=2)


@app.command()
def parse(
    lrc_path: Path,
    whole_text: bool | None = typer.Option(None, "--whole-text/--first-word", help="Keep the full lyric text"),
):
    """Parse LRC and print stats."""
    cfg = load_config()
    doc, stats = parse_lrc_with_stats(
        _read(lrc_path),
        whole_text=cfg.whole_text if whole_text is None else whole_text,
        encoding=cfg.encoding,
    )
    typer.echo(f"lines_total={stats.lines_total}")
    typer.echo(f"metadata_total={stats.metadata_total}")
    typer.echo(f"lines_ignored={stats.lines_ignored}")
    typer.echo(f"events_total={stats.events_total}")
    typer.echo(f"offset_ms={doc.metadata.offset_ms}")
    typer.echo(f"metadata={doc.metadata.as_dict()}")
    if not stats.events_total:
        raise typer.Exit(code=1)


@app.command()
def play(
    lrc_path: Path,
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    no_pace: bool = typer.Option(False, "--no-pace", help="Emit lines immediately instead of in real time"),
    block_size: int | None = typer.Option(None, "--block-size", min=1, help="Bytes per read"),
    whole_text: bool | None = typer.Option(None, "--whole-text/--first-word", help="Keep the full lyric text"),
    context_lines: int | None = typer.Option(None, "--context", min=0, help="Lines above/below current line"),
    no_alt_screen: bool = typer.Option(False, "--no-alt-screen", help="Do not use alternate screen buffer"),
):
    """
    Show lyrics line by line, each at its timestamp.
    """
    cfg = load_config()
    if block_size is not None:
        cfg = replace(cfg, block_size=block_size)
    if whole_text is not None:
        cfg = replace(cfg, whole_text=whole_text)
    if context_lines is not None:
        cfg = replace(cfg, context_lines=context_lines)
    if no_alt_screen:
        cfg = replace(cfg, use_alt_screen=False)
    if no_pace:
        cfg = replace(cfg, pace=False)

    setup_logging(debug)

    renderer = AnsiRenderer(use_alt_screen=cfg.use_alt_screen)
    sink = ConsoleSink(renderer, context_lines=cfg.context_lines)
    with FileByteSource(lrc_path) as source:
        driver = LyricDriver(
            source,
            sink,
            block_size=cfg.block_size,
            whole_text=cfg.whole_text,
            encoding=cfg.encoding,
        )
        try:
            outcome = driver.drive()
        except UpstreamReadError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=2)

        if outcome is not DriveOutcome.PARSED:
            typer.echo(f"No lyric lines found in {lrc_path}", err=True)
            raise typer.Exit(code=1)

        sink.metadata = driver.metadata
        pacer = WallClockPacer() if cfg.pace else None
        renderer.enter()
        try:
            outcome = driver.run(pacer)
        except KeyboardInterrupt:
            driver.cancel()
            outcome = DriveOutcome.CANCELLED
        except EntryRejected as e:
            logger.error("%s", e)
            raise typer.Exit(code=1)
        finally:
            renderer.exit()

    logger.debug("Playback finished: %s", outcome.value)
    raise typer.Exit(code=0 if outcome is DriveOutcome.END_OF_STREAM else 130)


@app.command()
def export(
    lrc_path: Path,
    fmt: str = typer.Option("srt", "--format", case_sensitive=False, help="lrc|srt|json"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
    whole_text: bool = typer.Option(True, "--whole-text/--first-word", help="Keep the full lyric text"),
):
    """Export LRC to SRT/JSON/LRC."""
    cfg = load_config()
    doc, _stats = parse_lrc_with_stats(_read(lrc_path), whole_text=whole_text, encoding=cfg.encoding)
    fmt_l = fmt.lower()
    if fmt_l == "json":
        data = export_json(doc)
    elif fmt_l == "lrc":
        data = export_lrc(doc)
    elif fmt_l == "srt":
        data = export_srt(doc)
    else:
        raise typer.BadParameter("format must be one of: lrc, srt, json")

    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data, nl=False)


@app.command()
def config(
    block_size: int | None = typer.Option(None, "--block-size", min=1, help="Bytes per read"),
    whole_text: bool | None = typer.Option(None, "--whole-text/--first-word", help="Keep the full lyric text"),
    pace: bool | None = typer.Option(None, "--pace/--no-pace", help="Real-time playback"),
):
    """Show or update saved settings."""
    updates = {
        k: v
        for k, v in (("block_size", block_size), ("whole_text", whole_text), ("pace", pace))
        if v is not None
    }
    if updates:
        path = save_config(**updates)
        typer.echo(f"Saved: {path}")

    cfg = load_config()
    typer.echo(f"block_size={cfg.block_size}")
    typer.echo(f"whole_text={cfg.whole_text}")
    typer.echo(f"encoding={cfg.encoding}")
    typer.echo(f"pace={cfg.pace}")
    typer.echo(f"context_lines={cfg.context_lines}")
    typer.echo(f"alt_screen={cfg.use_alt_screen}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
