"""Retro Micro-OS Core Module"""
from .buffer import LineBuffer, CursorPosition
from .console import Transcript, TranscriptLine, InputLine
from .storage import FileStorage, PersistentStorage
from .manpages import ManPage, ManPageRegistry
from .errors import ConsoleError, UserInputError, HandlerFault, StorageError, EditorStateError

__all__ = [
    'LineBuffer', 'CursorPosition', 'Transcript', 'TranscriptLine', 'InputLine',
    'FileStorage', 'PersistentStorage', 'ManPage', 'ManPageRegistry',
    'ConsoleError', 'UserInputError', 'HandlerFault', 'StorageError', 'EditorStateError'
]
