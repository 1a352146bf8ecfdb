from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from lrc_stream.demux.errors import UpstreamReadError

logger = logging.getLogger(__name__)


class FileByteSource:
    """Byte-range reads from a local file. Opened lazily on first pull."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._fh: BinaryIO | None = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def pull(self, offset: int, length: int) -> bytes:
        try:
            if self._fh is None:
                self._fh = self.path.open("rb")
                logger.debug("Opened %s", self.path)
            self._fh.seek(offset)
            return self._fh.read(length)
        except OSError as e:
            raise UpstreamReadError(f"Cannot read {self.path} at offset {offset}: {e}") from e

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
