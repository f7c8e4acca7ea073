"""
Retro Micro-OS Terminal Front End
Drives the shell and the editor from a real terminal: decodes raw key
presses, redraws the prompt line and paints the full-screen editor.
Falls back to line-based input when the terminal has no raw mode.
"""

import codecs
import os
import sys
from typing import Callable, List, Optional

from bin.editor import EditorMode, TextEditor
from core.console import TranscriptLine


# Raw control characters and their key names
CONTROL_KEYS = {
    "\r": "Enter",
    "\n": "Enter",
    "\x7f": "Backspace",
    "\x08": "Backspace",
    "\t": "Tab",
    "\x03": "Ctrl+C",
    "\x04": "Ctrl+D",
    "\x01": "Home",
    "\x05": "End",
    "\x0c": "Ctrl+L",
}

# CSI sequences (after ESC [)
CSI_KEYS = {
    "A": "ArrowUp",
    "B": "ArrowDown",
    "C": "ArrowRight",
    "D": "ArrowLeft",
    "H": "Home",
    "F": "End",
}

# ESC [ <n> ~ sequences
TILDE_KEYS = {
    "1": "Home",
    "3": "Delete",
    "4": "End",
    "7": "Home",
    "8": "End",
}

# <Name> tokens accepted by parse_key_string
KEY_TOKENS = {
    "esc": "Escape",
    "escape": "Escape",
    "cr": "Enter",
    "enter": "Enter",
    "bs": "Backspace",
    "backspace": "Backspace",
    "tab": "Tab",
    "lt": "<",
}

STYLE_CODES = {
    "error": "\033[31m",
    "hint": "\033[2m",
    "command-echo": "\033[1m",
    "section-header": "\033[1m",
}

RESET = "\033[0m"
REVERSE = "\033[7m"


def utf8_reader(read_bytes: Callable[[int], bytes]) -> Callable[[int], str]:
    """Wrap a byte reader so read(n) returns n whole characters.

    Multi-byte UTF-8 keys arrive one byte at a time in raw mode; bytes are
    fed to an incremental decoder until it yields a complete character.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def read(n: int) -> str:
        chars = ""
        while len(chars) < n:
            data = read_bytes(1)
            if not data:
                chars += decoder.decode(b"", final=True)
                break
            chars += decoder.decode(data)
        return chars

    return read


def decode_key(read: Callable[[int], str], pending: Callable[[], bool] = lambda: False) -> str:
    """Read one key press and return its name.

    read(n) returns up to n characters; pending() reports whether more input
    is immediately available, which separates a lone Escape from an escape
    sequence. CSI sequences are consumed up to their final byte, so modified
    keys such as Ctrl+Right (ESC [ 1 ; 5 C) leave nothing behind.
    """
    char = read(1)
    if char == "":
        return "Ctrl+D"
    if char in CONTROL_KEYS:
        return CONTROL_KEYS[char]
    if char != "\x1b":
        return char

    if not pending():
        return "Escape"
    second = read(1)
    if second == "O":
        return CSI_KEYS.get(read(1), "Escape")
    if second != "[":
        return "Escape"

    params = ""
    while True:
        final = read(1)
        if not final:
            return "Escape"
        if "@" <= final <= "~":
            break
        params += final

    if final == "~":
        return TILDE_KEYS.get(params.split(";")[0], "Escape")
    return CSI_KEYS.get(final, "Escape")


def parse_key_string(text: str) -> List[str]:
    """Turn 'ihello<Esc>:wq<CR>' into key names."""
    keys = []
    i = 0
    while i < len(text):
        if text[i] == "<":
            end = text.find(">", i)
            if end != -1:
                token = text[i + 1:end].lower()
                if token in KEY_TOKENS:
                    keys.append(KEY_TOKENS[token])
                    i = end + 1
                    continue
        keys.append(text[i])
        i += 1
    return keys


def render_editor(editor: TextEditor, width: int = 80, height: int = 24) -> List[str]:
    """Paint the editor as a list of screen rows (ANSI attributes included)."""
    session = editor.session
    rows = []

    rows.append(f"{REVERSE}{editor.title():^{width}}{RESET}")

    content_height = max(1, height - 3)
    top = max(0, session.cursor.row - content_height + 1)
    for row in range(top, top + content_height):
        if row >= session.buffer.line_count():
            rows.append("~")
            continue
        line = session.buffer.line(row)[:width]
        if row == session.cursor.row:
            col = session.cursor.col
            under = line[col] if col < len(line) else " "
            rows.append(f"{line[:col]}{REVERSE}{under}{RESET}{line[col + 1:]}")
        else:
            rows.append(line)

    if session.mode == EditorMode.COMMAND_LINE:
        rows.append(f":{session.command_text}")
    else:
        message = session.message
        if message and session.message_is_error:
            message = f"{STYLE_CODES['error']}{message}{RESET}"
        rows.append(message)

    position = editor.position_label()
    label = editor.mode_label()
    rows.append(f"{label}{' ' * max(1, width - len(label) - len(position))}{position}")
    return rows


def style_line(line: TranscriptLine) -> str:
    code = STYLE_CODES.get(line.style or "")
    if code:
        return f"{code}{line.text}{RESET}"
    return line.text


class TerminalFrontend:
    """Connects a shell and its editor to stdin/stdout."""

    def __init__(self, shell, editor: Optional[TextEditor] = None,
                 stdin=None, stdout=None, prompt: str = "> ",
                 interactive: bool = True):
        self.shell = shell
        self.editor = editor
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.prompt = prompt
        self.interactive = interactive
        self.raw = False
        self.running = False
        self._read: Optional[Callable[[int], str]] = None
        self._pending: Callable[[], bool] = lambda: False
        shell.transcript.add_listener(self._on_transcript)
        if editor is not None and interactive:
            editor.add_render_listener(self._on_editor_render)
            editor.add_close_listener(self._on_editor_close)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _newline(self) -> str:
        return "\r\n" if self.raw else "\n"

    def write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def _on_transcript(self, line: Optional[TranscriptLine]) -> None:
        if self.editor is not None and self.editor.active:
            return
        if line is None:
            self.write("\033[2J\033[H")
            return
        # Echo lines replace the prompt line that produced them
        if self.raw:
            self.write("\r\033[2K")
        self.write(style_line(line) + self._newline())

    def _on_editor_render(self, editor: TextEditor) -> None:
        size = self._terminal_size()
        rows = render_editor(editor, size.columns, size.lines)
        self.write("\033[?1049h\033[H\033[2J" + "\r\n".join(rows))

    def _on_editor_close(self, editor: TextEditor) -> None:
        self.write("\033[?1049l")
        self.redraw_prompt()

    def _terminal_size(self):
        import shutil
        return shutil.get_terminal_size((80, 24))

    def redraw_prompt(self) -> None:
        """Redraw the prompt line with the caret in place."""
        if not self.raw:
            return
        line = self.shell.input_line
        self.write("\r\033[2K" + self.prompt + line.text)
        back = len(line.text) - line.caret
        if back > 0:
            self.write(f"\033[{back}D")

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> None:
        """Route one key to the editor (if open) or the shell."""
        if self.editor is not None and self.editor.active:
            self.editor.handle_key(key)
            return

        shell = self.shell
        line = shell.input_line
        if not line.enabled:
            return

        if key == "Enter":
            shell.submit()
            if self.editor is not None and self.editor.active:
                return
        elif key == "ArrowUp":
            shell.history_previous()
        elif key == "ArrowDown":
            shell.history_next()
        elif key == "Tab":
            shell.complete()
        elif key == "Backspace":
            line.backspace()
        elif key == "ArrowLeft":
            line.move_caret(-1)
        elif key == "ArrowRight":
            line.move_caret(1)
        elif key == "Home":
            line.set_text(line.text, 0)
        elif key == "End":
            line.set_text(line.text)
        elif key == "Ctrl+C":
            self.write("^C" + self._newline())
            line.clear()
        elif key == "Ctrl+D":
            if not line.text:
                self.running = False
                return
        elif key == "Ctrl+L":
            shell.clear()
        elif len(key) == 1 and key.isprintable():
            line.insert(key)
        self.redraw_prompt()

    def ask(self, question: str) -> bool:
        """Yes/no question, answered with a single key in raw mode."""
        if self.raw and self._read is not None:
            self.write(f"\r\n{question} (y/n) ")
            answer = decode_key(self._read, self._pending)
            self.write(answer + "\r\n")
            return answer.lower() == "y"
        try:
            return input(f"{question} (y/n) ").strip().lower() == "y"
        except EOFError:
            return False

    def feed_line(self, text: str) -> None:
        """Line-mode input: a shell command, or key names while editing."""
        if self.editor is not None and self.editor.active:
            self.editor.feed_keys(parse_key_string(text))
            return
        self.shell.input_line.set_text(text)
        self.shell.submit()

    def run(self) -> None:
        """Run interactively, in raw mode when the terminal allows it."""
        self.running = True
        if self.supports_raw_mode():
            self._run_raw()
        else:
            self._run_lines()

    def supports_raw_mode(self) -> bool:
        if os.name != "posix":
            return False
        try:
            import termios  # noqa: F401
            return self.stdin.isatty()
        except (ImportError, AttributeError, ValueError):
            return False

    def _run_raw(self) -> None:
        import select
        import termios
        import tty

        fd = self.stdin.fileno()
        old_settings = termios.tcgetattr(fd)

        read = utf8_reader(lambda n: os.read(fd, n))

        def pending() -> bool:
            ready, _, _ = select.select([fd], [], [], 0.05)
            return bool(ready)

        try:
            tty.setraw(fd)
            self.raw = True
            self._read, self._pending = read, pending
            self.redraw_prompt()
            while self.running:
                self.handle_key(decode_key(read, pending))
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
            self.raw = False
            self._read = None
            self.write("\n")

    def _run_lines(self) -> None:
        while self.running:
            try:
                prompt = ":" if self.editor is not None and self.editor.active else self.prompt
                self.feed_line(input(prompt))
            except KeyboardInterrupt:
                self.write("\n")
                continue
            except EOFError:
                self.write("\n")
                self.running = False
