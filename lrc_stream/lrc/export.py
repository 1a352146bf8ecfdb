from __future__ import annotations

import json

from .model import METADATA_TAGS, LrcDocument


def export_json(doc: LrcDocument) -> str:
    return json.dumps(
        {
            "metadata": doc.metadata.as_dict(),
            "entries": [{"t_ms": e.t_ms, "text": e.text} for e in doc.entries],
        },
        ensure_ascii=False,
        indent=2,
    )


def _fmt_lrc_time(ms: int) -> str:
    m, rem = divmod(ms, 60_000)
    s, ms2 = divmod(rem, 1_000)
    return f"{m:02d}:{s:02d}.{ms2 // 10:02d}"


def export_lrc(doc: LrcDocument, include_tags: bool = True) -> str:
    out: list[str] = []
    if include_tags:
        for prefix, key in METADATA_TAGS:
            value = getattr(doc.metadata, key)
            if value is not None:
                out.append(f"[{prefix}{value}]")

    # source order is kept, no sorting
    for e in doc.entries:
        out.append(f"[{_fmt_lrc_time(e.t_ms)}]{e.text}")
    return "\n".join(out) + ("\n" if out else "")


def _fmt_srt_time(ms: int) -> str:
    # HH:MM:SS,mmm
    h, rem = divmod(ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms2 = divmod(rem, 1_000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms2:03d}"


def export_srt(doc: LrcDocument, last_line_duration_ms: int = 2000) -> str:
    """
    End time is next start time, last line ends at +last_line_duration_ms.
    """
    ev = doc.entries
    if not ev:
        return ""
    out: list[str] = []
    for i, e in enumerate(ev, start=1):
        start = e.t_ms
        if i < len(ev):
            end = max(ev[i].t_ms, start + 1)
        else:
            end = start + last_line_duration_ms
        out.append(str(i))
        out.append(f"{_fmt_srt_time(start)} --> {_fmt_srt_time(end)}")
        out.append(e.text or "")
        out.append("")
    return "\n".join(out)
