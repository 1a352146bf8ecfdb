from __future__ import annotations

import shutil
import signal
import sys
from dataclasses import dataclass
from typing import Callable, TextIO

import colorama


CSI = "\x1b["


def _sgr(*codes: int) -> str:
    return CSI + ";".join(str(c) for c in codes) + "m"


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = _sgr(36, 1)  # cyan bold
    current: str = _sgr(32, 1)  # green bold
    dim: str = _sgr(90)  # bright black
    footer: str = _sgr(33)  # yellow
    reset: str = _sgr(0)


class AnsiRenderer:
    """
    Full-frame redraw of a lyric window: title line, then the lines around
    the current one. Redraws on terminal resize where SIGWINCH exists.
    """

    def __init__(
        self,
        use_alt_screen: bool = True,
        theme: Theme | None = None,
        stream: TextIO | None = None,
    ):
        self.use_alt_screen = use_alt_screen
        self.theme = theme or Theme()
        self.stream = stream or sys.stdout
        self._entered = False
        self._resize_handler: Callable | None = None
        self._last_frame: tuple[str, list[str], int, int, str | None] | None = None

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exit()

    def enter(self) -> None:
        if self._entered:
            return
        colorama.just_fix_windows_console()
        if self.use_alt_screen:
            self.stream.write(CSI + "?1049h")  # alt screen
        self.stream.write(CSI + "?25l")  # hide cursor
        self.stream.write(CSI + "H" + CSI + "2J")
        self.stream.flush()
        self._entered = True

        if hasattr(signal, "SIGWINCH"):

            def _on_resize(signum=None, frame=None):
                if self._last_frame:
                    self.render(*self._last_frame)

            try:
                signal.signal(signal.SIGWINCH, _on_resize)
                self._resize_handler = _on_resize
            except ValueError:
                # not on the main thread
                self._resize_handler = None

    def exit(self) -> None:
        if not self._entered:
            return
        if self._resize_handler:
            signal.signal(signal.SIGWINCH, signal.SIG_DFL)
            self._resize_handler = None
        self.stream.write(self.theme.reset)
        self.stream.write(CSI + "?25h")  # show cursor
        if self.use_alt_screen:
            self.stream.write(CSI + "?1049l")
        self.stream.write("\n")
        self.stream.flush()
        self._entered = False
        self._last_frame = None

    def render(
        self,
        title: str,
        lines: list[str],
        current_idx: int,
        context_lines: int = 1,
        footer: str | None = None,
    ) -> None:
        self._last_frame = (title, lines, current_idx, context_lines, footer)

        _cols, rows = shutil.get_terminal_size(fallback=(80, 24))
        # title and footer take a row each
        body_rows = max(rows - 2, 1)

        if current_idx < 0:
            start = 0
        else:
            start = max(current_idx - context_lines, 0)
        end = min(start + body_rows, len(lines))
        start = max(end - body_rows, 0)

        out: list[str] = [f"{self.theme.title}♫ {title} ♫{self.theme.reset}"]
        for i in range(start, end):
            style = self.theme.current if i == current_idx else self.theme.dim
            out.append(f"{style}{lines[i]}{self.theme.reset}")
        if footer:
            out.append(f"{self.theme.footer}{footer}{self.theme.reset}")

        self.stream.write(CSI + "H" + CSI + "2J")
        self.stream.write("\n".join(out))
        self.stream.write(self.theme.reset)
        self.stream.flush()
