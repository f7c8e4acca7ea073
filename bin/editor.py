"""
Retro Micro-OS Text Editor
Minimal vim-like modal editor: NORMAL, INSERT and COMMAND_LINE modes over a
buffer of lines, with the ex-commands :w, :q, :wq and :q!.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from core.buffer import CursorPosition, LineBuffer
from core.errors import EditorStateError, StorageError
from core.logging import LogLevel, SystemLogger, log_editor


ESCAPE = "Escape"
ENTER = "Enter"
BACKSPACE = "Backspace"


class EditorMode(Enum):
    """Editor modes."""
    NORMAL = "normal"
    INSERT = "insert"
    COMMAND_LINE = "command"


@dataclass
class EditorSession:
    """State of one open editor, from open to close."""
    buffer: LineBuffer = field(default_factory=LineBuffer)
    cursor: CursorPosition = field(default_factory=CursorPosition)
    mode: EditorMode = EditorMode.NORMAL
    filename: Optional[str] = None
    modified: bool = False
    command_text: str = ""
    message: str = ""
    message_is_error: bool = False


def is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class TextEditor:
    """Modal text editor hosted by a shell."""

    def __init__(self, shell, storage, logger: Optional[SystemLogger] = None):
        self.shell = shell
        self.storage = storage
        self.logger = logger if logger is not None else getattr(shell, "logger", None)
        self.session = EditorSession()
        self.active = False
        self._render_listeners: List[Callable[["TextEditor"], None]] = []
        self._close_listeners: List[Callable[["TextEditor"], None]] = []
        self._handlers: Dict[EditorMode, Callable[[str], None]] = {
            EditorMode.NORMAL: self._handle_normal_mode,
            EditorMode.INSERT: self._handle_insert_mode,
            EditorMode.COMMAND_LINE: self._handle_command_line,
        }

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_render_listener(self, listener: Callable[["TextEditor"], None]) -> None:
        self._render_listeners.append(listener)

    def add_close_listener(self, listener: Callable[["TextEditor"], None]) -> None:
        self._close_listeners.append(listener)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    @property
    def mode(self) -> EditorMode:
        return self.session.mode

    @property
    def buffer(self) -> LineBuffer:
        return self.session.buffer

    @property
    def cursor(self) -> CursorPosition:
        return self.session.cursor

    def open(self, filename: Optional[str] = None) -> None:
        """Open a file (or an empty buffer) and take over keyboard input."""
        content = None
        if filename and self.storage.exists(filename):
            content = self.storage.load(filename)

        # A new open replaces whatever session was there before
        self.session = EditorSession(
            buffer=LineBuffer.from_text(content),
            filename=filename,
        )
        self.active = True
        self.shell.disable_input()
        log_editor(self.logger, LogLevel.INFO, f"opened {filename or '[New File]'}")
        self.render()

    def close(self) -> None:
        """Close the session and hand input back to the shell."""
        self.session.message = ""
        self.session.message_is_error = False
        self.session.mode = EditorMode.NORMAL
        self.active = False
        self.shell.enable_input()
        log_editor(self.logger, LogLevel.INFO, f"closed {self.session.filename or '[New File]'}")
        for listener in list(self._close_listeners):
            listener(self)

    def render(self) -> None:
        """Notify render listeners of the full editor state."""
        for listener in list(self._render_listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Key handling
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        """Handle one key event. Returns False if the editor is not open."""
        if not self.active:
            return False

        handler = self._handlers.get(self.session.mode)
        if handler is None:
            raise EditorStateError(f"No key handling for mode {self.session.mode!r}")
        handler(key)

        if self.active:
            self.render()
        return True

    def feed_keys(self, keys: Iterable[str]) -> None:
        """Handle a sequence of key events, stopping if the editor closes."""
        for key in keys:
            if not self.handle_key(key):
                break

    def _handle_normal_mode(self, key: str) -> None:
        session = self.session
        buffer = session.buffer
        cursor = session.cursor

        if key == "i":
            session.mode = EditorMode.INSERT
        elif key == "h":
            if cursor.col > 0:
                cursor.col -= 1
        elif key == "l":
            if cursor.col < buffer.line_length(cursor.row) - 1:
                cursor.col += 1
        elif key == "j":
            if cursor.row < buffer.line_count() - 1:
                cursor.row += 1
                cursor.col = buffer.clamp_col(cursor.row, cursor.col, past_end=False)
        elif key == "k":
            if cursor.row > 0:
                cursor.row -= 1
                cursor.col = buffer.clamp_col(cursor.row, cursor.col, past_end=False)
        elif key == ":":
            self.enter_command_mode()

    def _handle_insert_mode(self, key: str) -> None:
        session = self.session
        cursor = session.cursor

        if key == ESCAPE:
            session.mode = EditorMode.NORMAL
            # Cursor rests on the last inserted character
            if cursor.col > 0:
                cursor.col -= 1
            return

        if key == ENTER:
            session.buffer.split_line(cursor)
            session.modified = True
        elif key == BACKSPACE:
            session.buffer.delete_before(cursor)
            session.modified = True
        elif is_printable(key):
            session.buffer.insert_char(cursor, key)
            session.modified = True

    def _handle_command_line(self, key: str) -> None:
        session = self.session

        if key == ENTER:
            self.execute_command(session.command_text)
        elif key == ESCAPE:
            self.exit_command_mode()
        elif key == BACKSPACE:
            if session.command_text:
                session.command_text = session.command_text[:-1]
            else:
                self.exit_command_mode()
        elif is_printable(key):
            session.command_text += key

    # ------------------------------------------------------------------
    # Command line
    # ------------------------------------------------------------------

    def enter_command_mode(self) -> None:
        self.session.mode = EditorMode.COMMAND_LINE
        self.session.command_text = ""
        self.clear_message()

    def exit_command_mode(self) -> None:
        self.session.mode = EditorMode.NORMAL
        self.session.command_text = ""

    def execute_command(self, text: str) -> None:
        """Run an ex-command (without the leading colon)."""
        cmd = text.strip()
        if not cmd:
            self.exit_command_mode()
            return

        parts = cmd.split()
        command = parts[0]
        arg = parts[1] if len(parts) > 1 else None

        if command == "w":
            self.save_file(arg)
            self.exit_command_mode()
        elif command == "q":
            if self.session.modified:
                self.show_message("No write since last change (use :q! to override)", True)
                self.exit_command_mode()
                return
            self.close()
        elif command == "wq":
            if self.save_file(arg):
                self.close()
            else:
                self.exit_command_mode()
        elif command == "q!":
            self.close()
        else:
            self.show_message(f"Not an editor command: {command}", True)
            self.exit_command_mode()

    def save_file(self, new_filename: Optional[str] = None) -> bool:
        """Save the buffer. Returns True on success."""
        target = new_filename or self.session.filename
        if not target:
            self.show_message("No file name. Use :w filename", True)
            return False

        content = self.session.buffer.to_text()
        try:
            self.storage.save(target, content)
        except (StorageError, OSError) as e:
            log_editor(self.logger, LogLevel.ERR, f"save of {target} failed: {e}")
            self.show_message(f'Error saving file "{target}": {e}', True)
            return False

        self.session.filename = target
        self.session.modified = False
        log_editor(self.logger, LogLevel.INFO, f"wrote {target} ({len(content)} characters)")
        self.show_message(f'"{target}" written, {len(content)} characters')
        return True

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def show_message(self, message: str, is_error: bool = False) -> None:
        self.session.message = message
        self.session.message_is_error = is_error

    def clear_message(self) -> None:
        self.session.message = ""
        self.session.message_is_error = False

    def title(self) -> str:
        title = self.session.filename or "New File"
        if self.session.modified:
            title += " [+]"
        return title

    def mode_label(self) -> str:
        if self.session.mode == EditorMode.COMMAND_LINE:
            return ""
        return f"-- {self.session.mode.name} --"

    def position_label(self) -> str:
        return f"{self.session.cursor.row + 1},{self.session.cursor.col + 1}"


def register_editor_commands(shell, editor: TextEditor) -> None:
    """Register edit and its vim/vi aliases."""

    def open_editor(args: List[str], shell) -> None:
        editor.open(args[0] if args else None)

    def complete_files(args: List[str], current_word: str, shell) -> List[str]:
        return editor.storage.list()

    shell.register_command("edit", "Open text editor", open_editor, complete_files)
    shell.register_command("vim", "Alias for edit", open_editor, complete_files)
    shell.register_command("vi", "Alias for edit", open_editor, complete_files)
