"""Terminal input and status rendering."""

from __future__ import annotations

import logging
import os
import sys
import threading
import time
from typing import IO, Iterator, Optional

import typer

from .models import KeyEvent, Modifier, StatusLine, StatusTier

logger = logging.getLogger(__name__)

ESCAPE = "\x1b"

# US layout: shift + digit row.
_SHIFTED_KEYS = {
    "!": "1",
    "@": "2",
    "#": "3",
    "$": "4",
    "%": "5",
    "^": "6",
    "&": "7",
    "*": "8",
    "(": "9",
    ")": "0",
    "_": "-",
}

_TIER_COLORS: dict[StatusTier, Optional[str]] = {
    StatusTier.NORMAL: typer.colors.GREEN,
    StatusTier.WARNING: typer.colors.YELLOW,
    StatusTier.CRITICAL: typer.colors.RED,
    StatusTier.IDLE: typer.colors.BLUE,
    StatusTier.INFO: None,
    StatusTier.ERROR: typer.colors.BRIGHT_RED,
}


def key_event_from_char(char: str, modifiers: Modifier = Modifier.NONE) -> KeyEvent:
    """Map a single typed character to a key event, inferring modifiers."""
    if char == ESCAPE:
        return KeyEvent("escape", modifiers)
    if char == "=":
        return KeyEvent("+", modifiers)
    if char in _SHIFTED_KEYS:
        return KeyEvent(_SHIFTED_KEYS[char], modifiers | Modifier.SHIFT)
    code = ord(char)
    if 1 <= code <= 26 and char not in "\t\r\n":
        return KeyEvent(chr(code + 96), modifiers | Modifier.CTRL)
    if char.isalpha() and char.isupper():
        return KeyEvent(char.lower(), modifiers | Modifier.SHIFT)
    return KeyEvent(char, modifiers)


def parse_key_chunk(chunk: str) -> list[KeyEvent]:
    """Turn the characters delivered by one terminal read into key events."""
    if not chunk:
        return []
    if chunk == ESCAPE:
        return [key_event_from_char(ESCAPE)]
    if chunk.startswith(ESCAPE):
        if chunk[1:2] in ("[", "O"):
            # Cursor and function keys carry no command.
            return []
        return [key_event_from_char(char, Modifier.ALT) for char in chunk[1:]]
    return [key_event_from_char(char) for char in chunk]


class ConsoleKeySource:
    """Reads keystrokes from the controlling terminal without echo.

    Use as a context manager; iterating :meth:`events` yields ``None`` every
    ``poll_interval`` seconds without input.
    """

    def __init__(self, poll_interval: float = 0.2) -> None:
        self.poll_interval = poll_interval
        self._saved_attrs: Optional[list] = None

    def __enter__(self) -> "ConsoleKeySource":
        if os.name != "nt":
            import termios
            import tty

            fd = sys.stdin.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._saved_attrs is not None:
            import termios

            termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    def events(self) -> Iterator[Optional[KeyEvent]]:
        while True:
            chunk = self._read_chunk()
            if chunk is None:
                yield None
                continue
            yield from parse_key_chunk(chunk)

    def _read_chunk(self) -> Optional[str]:
        if os.name == "nt":
            return self._read_chunk_windows()
        import select

        fd = sys.stdin.fileno()
        ready, _, _ = select.select([fd], [], [], self.poll_interval)
        if not ready:
            return None
        return os.read(fd, 32).decode(errors="ignore")

    def _read_chunk_windows(self) -> Optional[str]:
        import msvcrt

        deadline = time.monotonic() + self.poll_interval
        while not msvcrt.kbhit():
            if time.monotonic() >= deadline:
                return None
            time.sleep(0.02)
        char = msvcrt.getwch()
        if char in ("\x00", "\xe0"):
            msvcrt.getwch()
            return ""
        return char


class ConsoleDisplay:
    """Writes status lines at fixed terminal rows using ANSI positioning."""

    def __init__(
        self,
        width: int = 70,
        footer: Optional[StatusLine] = None,
        stream: Optional[IO[str]] = None,
    ) -> None:
        self.width = width
        self.footer = footer
        self._stream = stream
        self._lock = threading.Lock()
        self._message_row = (footer.row if footer else 0) + 2

    def show(self, line: StatusLine) -> None:
        with self._lock:
            self._write_locked(line)

    def clear(self) -> None:
        with self._lock:
            typer.echo("\x1b[2J\x1b[1;1H", nl=False, file=self._stream)
            if self.footer:
                self._write_locked(self.footer)

    def message(self, text: str) -> None:
        """Print a free-form line below the status rows."""
        with self._lock:
            typer.echo(f"\x1b[{self._message_row + 1};1H{text}", file=self._stream)
            self._message_row += 1

    def _write_locked(self, line: StatusLine) -> None:
        text = line.text[: self.width].ljust(self.width)
        color = _TIER_COLORS.get(line.tier)
        if color:
            text = typer.style(text, fg=color)
        typer.echo(f"\x1b[{line.row + 1};1H{text}", nl=False, file=self._stream)


class LogDisplay:
    """Display sink for headless sessions: status changes go to the log."""

    def __init__(self) -> None:
        self._last: dict[int, str] = {}
        self._lock = threading.Lock()

    def show(self, line: StatusLine) -> None:
        with self._lock:
            if self._last.get(line.row) == line.text:
                return
            self._last[line.row] = line.text
        logger.debug("[row %d] %s", line.row, line.text)

    def clear(self) -> None:
        with self._lock:
            self._last.clear()
