"""
tests/fixtures.py
=================
Shared, reusable test fixtures for Retro Micro-OS tests.

Fixtures are plain functions (not classes) so they compose cleanly. Each call
returns a brand-new object; no state is shared between calls unless the caller
passes the same object into multiple fixtures.
"""

import os
import sys
from typing import Dict, List, Tuple

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from core.storage import FileStorage
from shell.shell import Shell


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------

def sample_storage() -> FileStorage:
    """Storage holding a few small text files."""
    return FileStorage({
        "notes.txt": "hello\nworld",
        "todo.txt": "buy milk",
        "empty.txt": "",
    })


# ---------------------------------------------------------------------------
# Shell fixtures
# ---------------------------------------------------------------------------

class Recorder:
    """Command handler that records every call."""

    def __init__(self):
        self.calls: List[list] = []

    def __call__(self, args, shell):
        self.calls.append(list(args))

    @property
    def count(self) -> int:
        return len(self.calls)


def bare_shell(storage: FileStorage = None) -> Shell:
    """Shell with an empty command registry."""
    return Shell(storage=storage, register_builtins=False)


def shell_with_commands(names: List[str]) -> Tuple[Shell, Dict[str, Recorder]]:
    """Shell whose registry holds one Recorder per name.

    Returns the shell and a dict mapping each name to its recorder.
    """
    shell = bare_shell()
    recorders = {}
    for name in names:
        recorder = Recorder()
        shell.register_command(name, f"{name} command", recorder)
        recorders[name] = recorder
    return shell, recorders
