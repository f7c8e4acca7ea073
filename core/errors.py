"""
Retro Micro-OS Errors
Exception hierarchy shared by the shell, the editor and storage.
"""

from typing import Optional


class ConsoleError(Exception):
    """Base class for all console errors."""


class UserInputError(ConsoleError):
    """Bad input from the user: unknown command, missing argument, etc."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class HandlerFault(ConsoleError):
    """An exception raised inside a registered command handler."""

    def __init__(self, command: str, cause: BaseException):
        super().__init__(f"{command}: {cause}")
        self.command = command
        self.cause = cause


class StorageError(ConsoleError):
    """File storage could not complete an operation."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message)
        self.filename = filename


class EditorStateError(ConsoleError):
    """Key event for an editor mode that has no transition table."""
