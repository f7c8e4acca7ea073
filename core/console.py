"""
Retro Micro-OS Console Surfaces
The output transcript sink and the single-line input field.
"""

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional


@dataclass(frozen=True)
class TranscriptLine:
    """One line of console output with an optional style tag."""
    text: str
    style: Optional[str] = None


class Transcript:
    """Append-only output transcript."""

    def __init__(self):
        self.lines: List[TranscriptLine] = []
        self._lock = threading.Lock()
        self._listeners: List[Callable[[Optional[TranscriptLine]], None]] = []

    def append_line(self, text: str, style: Optional[str] = None) -> None:
        """Append a line. style is a presentation hint only."""
        line = TranscriptLine(text, style)
        with self._lock:
            self.lines.append(line)
            listeners = list(self._listeners)
        for listener in listeners:
            listener(line)

    def clear(self) -> None:
        """Remove every line. Listeners receive None."""
        with self._lock:
            self.lines.clear()
            listeners = list(self._listeners)
        for listener in listeners:
            listener(None)

    def texts(self) -> List[str]:
        with self._lock:
            return [line.text for line in self.lines]

    def add_listener(self, listener: Callable[[Optional[TranscriptLine]], None]) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[Optional[TranscriptLine]], None]) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def __len__(self) -> int:
        return len(self.lines)


class InputLine:
    """Single-line text input with a caret and an enabled flag."""

    def __init__(self, text: str = ""):
        self.text = text
        self.caret = len(text)
        self.enabled = True

    def set_text(self, text: str, caret: Optional[int] = None) -> None:
        """Replace the text; caret defaults to the end."""
        self.text = text
        if caret is None:
            caret = len(text)
        self.caret = max(0, min(caret, len(text)))

    def insert(self, chars: str) -> None:
        self.text = self.text[:self.caret] + chars + self.text[self.caret:]
        self.caret += len(chars)

    def backspace(self) -> None:
        if self.caret > 0:
            self.text = self.text[:self.caret - 1] + self.text[self.caret:]
            self.caret -= 1

    def move_caret(self, offset: int) -> None:
        self.caret = max(0, min(self.caret + offset, len(self.text)))

    def clear(self) -> None:
        self.text = ""
        self.caret = 0

    def disable(self) -> None:
        self.enabled = False

    def enable(self) -> None:
        self.enabled = True
