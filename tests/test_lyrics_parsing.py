from __future__ import annotations

from datetime import timedelta

import pytest

from lrc_stream.demux.errors import EmptySource, MalformedTimestamp
from lrc_stream.lrc.model import Ignored, Lyric, LyricEntry, MetadataTag
from lrc_stream.lrc.parse import LrcStreamParser, parse_line, parse_lrc, parse_lrc_with_stats, parse_timestamp


def test_parse_lyric_line():
    res = parse_line("[02:15.30]Hello")
    assert res == Lyric(LyricEntry(t_ms=135_300, text="Hello"))
    assert res.entry.timestamp == timedelta(seconds=135, milliseconds=300)


def test_parse_metadata_line():
    assert parse_line("[ar:Some Artist]") == MetadataTag(key="artist", value="Some Artist")


@pytest.mark.parametrize(
    "line, key, value",
    [
        ("[ti:Title]", "title", "Title"),
        ("[al:Album]", "album", "Album"),
        ("[by:Me]", "creator", "Me"),
        ("[re:Some Editor 1.0]", "remark", "Some Editor 1.0"),
        ("[ve:2.1]", "version", "2.1"),
        ("[offset:-500]", "offset", "-500"),
        ("[ti:No closing bracket", "title", "No closing bracket"),
        ("[ti:[nested]]", "title", "[nested]"),
    ],
)
def test_metadata_tags(line, key, value):
    assert parse_line(line) == MetadataTag(key=key, value=value)


def test_metadata_prefix_is_case_sensitive():
    assert isinstance(parse_line("[TI:Title]"), Ignored)


def test_not_a_tag_is_ignored():
    assert isinstance(parse_line("not a tag"), Ignored)
    assert isinstance(parse_line(""), Ignored)


@pytest.mark.parametrize(
    "line",
    ["[aa:bb.cc]x", "[00:01.00x", "[00:01]x", "[00:01.5]x", "[]", "[:.]"],
)
def test_malformed_timestamp_is_skipped(line):
    res = parse_line(line)
    assert res == Ignored("malformed timestamp")


def test_parse_timestamp_raises_on_garbage():
    with pytest.raises(MalformedTimestamp):
        parse_timestamp("[xx:yy.zz]")


def test_seconds_not_range_checked():
    assert parse_line("[01:75.00]late").entry.t_ms == 135_000
    assert parse_line("[120:00.00]x").entry.t_ms == 7_200_000


def test_text_stops_at_whitespace_by_default():
    assert parse_line("[00:01.00]  Look at the stars").entry.text == "Look"
    assert parse_line("[00:01.00]Look at the stars", whole_text=True).entry.text == "Look at the stars"


def test_empty_text_allowed():
    assert parse_line("[00:03.00]") == Lyric(LyricEntry(t_ms=3000, text=""))
    assert parse_line("[00:03.00]   ").entry.text == ""


def test_long_text_is_not_truncated():
    word = "a" * 5000
    assert parse_line(f"[00:00.01]{word}").entry.text == word


def test_second_tag_is_text_not_expanded():
    res = parse_line("[00:01.00][00:02.00]hey")
    assert res.entry.t_ms == 1000
    assert res.entry.text == "[00:02.00]hey"


def test_parse_document(sample_bytes):
    doc, stats = parse_lrc_with_stats(sample_bytes)
    assert [(e.t_ms, e.text) for e in doc.entries] == [
        (1500, "Look"),
        (5000, "at"),
        (9250, "Look"),
        (62_030, ""),
        (59_990, "Yellow"),
        (70_000, "Привет"),
    ]
    assert doc.metadata.as_dict() == {
        "title": "Yellow",
        "artist": "Coldplay",
        "album": "Parachutes",
        "creator": "someone",
        "offset": "+250",
    }
    assert stats.lines_total == 13
    assert stats.metadata_total == 5
    assert stats.lines_ignored == 2
    assert stats.events_total == 6


def test_offset_recorded_but_not_applied():
    doc = parse_lrc("[offset:-1500]\n[00:01.00]x\n")
    assert doc.metadata.offset_ms == -1500
    assert doc.entries[0].t_ms == 1000


def test_unparsable_offset_is_kept_verbatim():
    doc = parse_lrc("[offset:soon]\n[00:01.00]x\n")
    assert doc.metadata.offset == "soon"
    assert doc.metadata.offset_ms is None


def test_last_metadata_write_wins():
    doc = parse_lrc("[ti:First]\n[ti:Second]\n[00:00.00]x")
    assert doc.metadata.title == "Second"


def test_strict_parse_of_empty_source():
    assert parse_lrc("[ti:Only tags]\n").timeline.is_empty()
    with pytest.raises(EmptySource):
        parse_lrc("[ti:Only tags]\n", strict=True)


def test_stream_parser_counts_completed_entries():
    p = LrcStreamParser()
    assert p.feed(b"[00:01.00]a\n[00:0") == 1
    assert p.feed(b"2.00]b") == 0
    timeline = p.finish()
    assert p.parsed
    assert timeline.frozen
    assert [e.text for e in timeline] == ["a", "b"]


def test_leading_bom_is_dropped():
    doc = parse_lrc("\ufeff[ti:Song]\n[00:01.00]x".encode("utf-8"))
    assert doc.metadata.title == "Song"


def test_parse_bytes_in_other_encoding():
    doc = parse_lrc("[ar:Кино]\n[00:02.00]Группа".encode("cp1251"), encoding="cp1251")
    assert doc.metadata.artist == "Кино"
    assert doc.entries[0].text == "Группа"
