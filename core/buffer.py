"""
Retro Micro-OS Line Buffer
Ordered sequence of text lines with a 2-D cursor.
Pure data plus bounds-safe mutation, no I/O.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class CursorPosition:
    """Cursor position inside a LineBuffer."""
    row: int = 0
    col: int = 0

    def as_tuple(self):
        return (self.row, self.col)


class LineBuffer:
    """Buffer of lines. Never empty; an empty document is ['']."""

    def __init__(self, lines: Optional[List[str]] = None):
        self.lines: List[str] = []
        for line in lines or [""]:
            self.lines.extend(line.split("\n"))
        if not self.lines:
            self.lines = [""]

    @classmethod
    def from_text(cls, text: Optional[str]) -> "LineBuffer":
        """Build a buffer by splitting text on newlines."""
        if not text:
            return cls([""])
        return cls(text.split("\n"))

    def to_text(self) -> str:
        """Serialize the buffer, lines joined with a single newline."""
        return "\n".join(self.lines)

    def line_count(self) -> int:
        return len(self.lines)

    def line(self, row: int) -> str:
        return self.lines[row]

    def line_length(self, row: int) -> int:
        return len(self.lines[row])

    def clamp_row(self, row: int) -> int:
        """Clamp a row index to [0, line_count)."""
        return max(0, min(row, len(self.lines) - 1))

    def clamp_col(self, row: int, col: int, past_end: bool = True) -> int:
        """Clamp a column to the line at row.

        With past_end the column may rest after the last character
        (insert semantics); otherwise it stays on the last character
        unless the line is empty.
        """
        length = len(self.lines[row])
        upper = length if past_end else max(0, length - 1)
        return max(0, min(col, upper))

    def insert_char(self, cursor: CursorPosition, char: str) -> None:
        """Splice text into the current line at the cursor and advance."""
        line = self.lines[cursor.row]
        self.lines[cursor.row] = line[:cursor.col] + char + line[cursor.col:]
        cursor.col += len(char)

    def split_line(self, cursor: CursorPosition) -> None:
        """Break the current line at the cursor; cursor goes to the new row."""
        line = self.lines[cursor.row]
        self.lines[cursor.row] = line[:cursor.col]
        self.lines.insert(cursor.row + 1, line[cursor.col:])
        cursor.row += 1
        cursor.col = 0

    def delete_before(self, cursor: CursorPosition) -> bool:
        """Backspace at the cursor.

        Deletes the character before the cursor, or joins the current line
        onto the previous one when at column 0. Returns False when the cursor
        is at the very start of the buffer and nothing changed.
        """
        if cursor.col > 0:
            line = self.lines[cursor.row]
            self.lines[cursor.row] = line[:cursor.col - 1] + line[cursor.col:]
            cursor.col -= 1
            return True
        if cursor.row > 0:
            self.join_with_previous(cursor)
            return True
        return False

    def join_with_previous(self, cursor: CursorPosition) -> None:
        """Append the current line to the previous one and remove it."""
        previous = self.lines[cursor.row - 1]
        self.lines[cursor.row - 1] = previous + self.lines[cursor.row]
        del self.lines[cursor.row]
        cursor.row -= 1
        cursor.col = len(previous)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def __repr__(self) -> str:
        return f"LineBuffer({self.lines!r})"
