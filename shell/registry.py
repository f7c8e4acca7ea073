"""
Retro Micro-OS Command Registry
Maps command names to handlers and completion providers.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional


CommandHandler = Callable[[List[str], object], object]
CompletionProvider = Callable[[List[str], str, object], List[str]]


@dataclass(frozen=True)
class CommandEntry:
    """A registered command. Immutable once registered."""
    name: str
    description: str
    handler: CommandHandler
    completion: Optional[CompletionProvider] = None

    @property
    def key(self) -> str:
        return self.name.lower()

    def get_help(self) -> str:
        """Get help text for the command."""
        return f"{self.name}: {self.description}"


class CommandRegistry:
    """Command table owned by one shell, keyed by lower-cased name."""

    def __init__(self):
        self.commands: Dict[str, CommandEntry] = {}

    def register(self, name: str, description: str, handler: CommandHandler,
                 completion: Optional[CompletionProvider] = None) -> CommandEntry:
        """Register a command. Re-registering a name replaces the old entry."""
        if not name or not name.strip():
            raise ValueError("Command name cannot be empty")
        entry = CommandEntry(name, description, handler, completion)
        self.commands[entry.key] = entry
        return entry

    def get(self, name: str) -> Optional[CommandEntry]:
        return self.commands.get(name.lower())

    def names(self) -> List[str]:
        """Registry keys in registration order."""
        return list(self.commands.keys())

    def entries(self) -> List[CommandEntry]:
        return list(self.commands.values())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self.commands

    def __len__(self) -> int:
        return len(self.commands)
