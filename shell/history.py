"""
Retro Micro-OS Command History
Append-only log of submitted lines with a browse cursor.
"""

from typing import List, Optional


class HistoryLog:
    """Submitted input lines plus a recall index.

    The index is always within [0, len(entries)]; index == len(entries)
    means the user is not browsing and the input is free text.
    """

    def __init__(self, entries: Optional[List[str]] = None, limit: int = 0):
        self.limit = limit
        self.entries: List[str] = list(entries or [])
        self._trim()
        self.index = len(self.entries)

    def append(self, line: str) -> None:
        """Record a submitted line and stop browsing."""
        self.entries.append(line)
        self._trim()
        self.reset()

    def reset(self) -> None:
        self.index = len(self.entries)

    def previous(self) -> Optional[str]:
        """Step toward older entries. Returns the text to show, or None if empty."""
        if not self.entries:
            return None
        self.index = max(0, self.index - 1)
        return self.current()

    def next(self) -> Optional[str]:
        """Step toward newer entries. Returns the text to show, or None if empty."""
        if not self.entries:
            return None
        self.index = min(len(self.entries), self.index + 1)
        return self.current()

    def current(self) -> str:
        if self.index >= len(self.entries):
            return ""
        return self.entries[self.index]

    def is_browsing(self) -> bool:
        return self.index < len(self.entries)

    def _trim(self) -> None:
        if self.limit and len(self.entries) > self.limit:
            del self.entries[:len(self.entries) - self.limit]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)
