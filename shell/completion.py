"""
Retro Micro-OS Tab Completion
Two-level completion: command names at the start of the line, then
arguments through each command's own completion provider.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from shell.registry import CommandRegistry


@dataclass
class CompletionResult:
    """Outcome of one completion request."""
    text: str
    caret: int
    matches: List[str] = field(default_factory=list)
    show_matches: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.matches)


def find_matches(partial: str, options: List[str]) -> List[str]:
    """Options whose lower-cased form starts with the lower-cased partial."""
    if not partial:
        return list(options)
    lower_partial = partial.lower()
    return [option for option in options if option.lower().startswith(lower_partial)]


def common_prefix(strings: List[str]) -> str:
    """Longest case-insensitive common prefix, keeping the first string's case."""
    if not strings:
        return ""
    prefix = strings[0]
    for other in strings[1:]:
        while not other.lower().startswith(prefix.lower()):
            prefix = prefix[:-1]
            if not prefix:
                return ""
    return prefix


def format_columns(matches: List[str], per_row: int = 4, width: int = 20) -> List[str]:
    """Lay out matches in rows of fixed-width columns."""
    rows = []
    for i in range(0, len(matches), per_row):
        row = matches[i:i + per_row]
        rows.append("".join(item.ljust(width) for item in row).rstrip())
    return rows


class TabCompleter:
    """Handles tab completion for command names and their arguments."""

    def __init__(self, registry: CommandRegistry, shell=None):
        self.registry = registry
        self.shell = shell

    def complete(self, text: str, caret: Optional[int] = None) -> CompletionResult:
        """
        Generate completion for text at caret position.

        Returns a CompletionResult holding the new text and caret, the
        matches found, and whether the match list should be displayed.
        """
        if caret is None:
            caret = len(text)
        line_before = text[:caret]
        line_after = text[caret:]
        parts = re.split(r"\s+", line_before)

        if " " not in line_before or len(parts) == 1:
            return self._complete_command(parts[0], line_after, text, caret)
        return self._complete_argument(parts, line_after, text, caret)

    def _complete_command(self, partial: str, line_after: str,
                          text: str, caret: int) -> CompletionResult:
        """Complete command names."""
        matches = find_matches(partial, self.registry.names())

        if not matches:
            return CompletionResult(text, caret)

        if len(matches) == 1:
            completion = matches[0] + " "
            return CompletionResult(completion + line_after, len(completion), matches)

        prefix = common_prefix(matches)
        if len(prefix) > len(partial):
            return CompletionResult(prefix + line_after, len(prefix), matches, True)
        return CompletionResult(text, caret, matches, True)

    def _complete_argument(self, parts: List[str], line_after: str,
                           text: str, caret: int) -> CompletionResult:
        """Complete arguments through the command's completion provider."""
        entry = self.registry.get(parts[0])
        if entry is None or entry.completion is None:
            return CompletionResult(text, caret)

        current_word = parts[-1]
        args = parts[1:-1]
        suggestions = entry.completion(args, current_word, self.shell) or []
        matches = find_matches(current_word, list(suggestions))

        if not matches:
            return CompletionResult(text, caret)

        if len(matches) == 1:
            completed = " ".join(parts[:-1] + [matches[0]]) + " "
            return CompletionResult(completed + line_after, len(completed), matches)

        prefix = common_prefix(matches)
        if len(prefix) > len(current_word):
            completed = " ".join(parts[:-1] + [prefix])
            return CompletionResult(completed + line_after, len(completed), matches, True)
        return CompletionResult(text, caret, matches, True)
