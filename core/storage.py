"""
Retro Micro-OS File Storage
Flat key/value store of named text files.
FileStorage keeps everything in memory; PersistentStorage mirrors it to
a JSON file on disk so files survive restarts.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

from core.errors import StorageError
from core.logging import LogLevel, SystemLogger, log_storage


class FileStorage:
    """In-memory virtual file storage."""

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self.files: Dict[str, str] = dict(files or {})

    def save(self, name: str, content: str) -> None:
        """Save a file, replacing any previous content."""
        if not name:
            raise StorageError("Filename cannot be empty")
        self.files[name] = content

    def load(self, name: str) -> Optional[str]:
        """Load a file. Returns None if it doesn't exist."""
        if not name:
            return None
        return self.files.get(name)

    def exists(self, name: str) -> bool:
        if not name:
            return False
        return name in self.files

    def list(self) -> List[str]:
        """List all file names, sorted."""
        return sorted(self.files)

    def delete(self, name: str) -> bool:
        """Delete a file. Returns False if it didn't exist."""
        if not name or name not in self.files:
            return False
        del self.files[name]
        return True

    def size(self, name: str) -> int:
        """Size of a file in characters, -1 if it doesn't exist."""
        content = self.load(name)
        return len(content) if content is not None else -1


class PersistentStorage(FileStorage):
    """File storage backed by <state_dir>/files.json."""

    def __init__(self, state_dir: str, logger: Optional[SystemLogger] = None):
        """Initialize persistent storage.

        Args:
            state_dir: Directory holding the storage file. Created if missing.
            logger: Optional system logger for write failures.
        """
        super().__init__()
        self.logger = logger
        self.state_dir = Path(state_dir)
        self.state_file = self.state_dir / "files.json"
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self._load_from_disk()

    def _load_from_disk(self) -> None:
        if not self.state_file.exists():
            return
        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                state = json.load(f)
        except (OSError, ValueError) as e:
            log_storage(self.logger, LogLevel.ERR, f"Cannot read {self.state_file}: {e}")
            return

        files = state.get("files", {})
        if isinstance(files, dict):
            self.files = {str(k): str(v) for k, v in files.items()}

    def _write_to_disk(self) -> None:
        state = {
            "version": "1.0",
            "files": self.files,
        }
        try:
            with open(self.state_file, "w", encoding="utf-8") as f:
                json.dump(state, f, indent=2)
        except OSError as e:
            log_storage(self.logger, LogLevel.ERR, f"Cannot write {self.state_file}: {e}")
            raise StorageError(f"Cannot write {self.state_file}: {e}")

    def save(self, name: str, content: str) -> None:
        previous = self.files.get(name)
        super().save(name, content)
        try:
            self._write_to_disk()
        except StorageError:
            # Keep memory and disk in agreement
            if previous is None:
                self.files.pop(name, None)
            else:
                self.files[name] = previous
            raise

    def delete(self, name: str) -> bool:
        previous = self.files.get(name)
        if not super().delete(name):
            return False
        try:
            self._write_to_disk()
        except StorageError:
            self.files[name] = previous
            raise
        return True
