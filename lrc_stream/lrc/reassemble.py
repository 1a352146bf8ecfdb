from __future__ import annotations

import codecs
from typing import Iterator

_ASCII_PROBE = "[00:01.00]\r\n"


def check_encoding(encoding: str) -> str:
    """
    Return the canonical codec name, or raise ValueError.

    Lines are split on the byte b"\\n" before decoding, so only encodings
    that keep ASCII bytes as they are (utf-8, cp1251, latin-1, ...) work.
    """
    try:
        info = codecs.lookup(encoding)
        encoded = _ASCII_PROBE.encode(info.name)
    except (LookupError, UnicodeError) as e:
        raise ValueError(f"Unknown encoding {encoding!r}") from e
    # utf-8-sig prepends a BOM, which is fine
    if not encoded.endswith(_ASCII_PROBE.encode("ascii")):
        raise ValueError(f"Encoding {encoding!r} is not ASCII-compatible")
    return info.name


def _decode(raw: bytes, encoding: str) -> str:
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw.decode(encoding, errors="replace")


class LineReassembler:
    """
    Turns byte chunks, cut at arbitrary points, into logical lines.

    At most one trailing fragment is carried between calls. A chunk with no
    terminator is appended to it, so nothing is dropped when a line spans
    more than two chunks. Decoding happens per complete line, which keeps
    multi-byte characters intact across chunk boundaries.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = check_encoding(encoding)
        self._fragment = b""

    @property
    def pending(self) -> bool:
        return bool(self._fragment)

    def feed(self, chunk: bytes) -> Iterator[str]:
        # split eagerly so the fragment is right even if the caller never iterates
        parts = chunk.split(b"\n")
        if len(parts) == 1:
            self._fragment += chunk
            return iter(())

        first = self._fragment + parts[0]
        self._fragment = parts[-1]
        raw_lines = [first, *parts[1:-1]]
        return (_decode(raw, self.encoding) for raw in raw_lines)

    def flush(self) -> str | None:
        if not self._fragment:
            return None
        raw, self._fragment = self._fragment, b""
        return _decode(raw, self.encoding)
