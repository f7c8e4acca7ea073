"""
Retro Micro-OS Shell
Command interpreter: parsing, dispatch, history and tab completion.
"""

import asyncio
import inspect
import threading
from typing import List, Optional, Callable

from core.config import ConsoleConfig
from core.console import InputLine, Transcript
from core.errors import HandlerFault, UserInputError
from core.logging import LogLevel, SystemLogger, log_shell
from core.storage import FileStorage
from shell.completion import CompletionResult, TabCompleter, format_columns
from shell.history import HistoryLog
from shell.registry import CommandEntry, CommandRegistry, CommandHandler, CompletionProvider


# Status codes returned by submit()/execute()
STATUS_OK = 0
STATUS_FAULT = 1
STATUS_USAGE = 2
STATUS_NOT_FOUND = 127


class Shell:
    """Main shell interpreter."""

    def __init__(self, storage=None, transcript: Optional[Transcript] = None,
                 input_line: Optional[InputLine] = None,
                 registry: Optional[CommandRegistry] = None,
                 config: Optional[ConsoleConfig] = None,
                 logger: Optional[SystemLogger] = None,
                 confirm: Optional[Callable[[str], bool]] = None,
                 man_registry=None,
                 register_builtins: bool = True):
        self.config = config or ConsoleConfig(persist=False)
        self.storage = storage if storage is not None else FileStorage()
        self.transcript = transcript if transcript is not None else Transcript()
        self.input_line = input_line if input_line is not None else InputLine()
        self.registry = registry if registry is not None else CommandRegistry()
        self.logger = logger
        self.confirm = confirm
        self.man_registry = man_registry
        self.history = HistoryLog(limit=self.config.history_limit)
        self.completer = TabCompleter(self.registry, self)
        self.background_jobs: List[threading.Thread] = []
        self.last_status = STATUS_OK
        self.running = False
        if register_builtins:
            self._register_commands()

    def _register_commands(self) -> None:
        """Register all built-in commands."""
        from shell.builtins import register_core_commands
        from shell.filecommands import register_file_commands
        from shell.mancommand import register_man_command

        register_core_commands(self)
        register_file_commands(self, self.storage)
        if self.man_registry is not None:
            register_man_command(self, self.man_registry)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register_command(self, name: str, description: str, handler: CommandHandler,
                         completion: Optional[CompletionProvider] = None) -> CommandEntry:
        """Register a command. The last registration of a name wins."""
        return self.registry.register(name, description, handler, completion)

    def get_commands(self) -> List[CommandEntry]:
        return self.registry.entries()

    def get_history(self) -> List[str]:
        return list(self.history.entries)

    # ------------------------------------------------------------------
    # Output and input surfaces
    # ------------------------------------------------------------------

    def print_line(self, text: str = "", style: Optional[str] = None) -> None:
        self.transcript.append_line(text, style)

    def clear(self) -> None:
        self.transcript.clear()

    def disable_input(self) -> None:
        self.input_line.disable()

    def enable_input(self) -> None:
        self.input_line.enable()

    @property
    def input_enabled(self) -> bool:
        return self.input_line.enabled

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def parse_input(self, line: str):
        """Split a line into (command name, args). The name is lower-cased."""
        parts = line.split()
        if not parts:
            return "", []
        return parts[0].lower(), parts[1:]

    def submit(self) -> int:
        """Submit the current contents of the input field."""
        if not self.input_line.enabled:
            return STATUS_OK
        return self.execute(self.input_line.text)

    def execute(self, line: str) -> int:
        """Execute a raw input line and return a status code."""
        self.print_line(f"> {line}", "command-echo")

        stripped = line.strip()
        if stripped:
            self.history.append(stripped)

        command_name, args = self.parse_input(stripped)
        try:
            if not command_name:
                self.last_status = STATUS_OK
            else:
                self.last_status = self._dispatch(command_name, args)
        finally:
            self.input_line.clear()
        return self.last_status

    def _dispatch(self, command_name: str, args: List[str]) -> int:
        entry = self.registry.get(command_name)
        if entry is None:
            log_shell(self.logger, LogLevel.NOTICE, f"command not found: {command_name}")
            self.print_line(f"Command not found: {command_name}", "error")
            self.print_line('Type "help" for a list of available commands.', "hint")
            return STATUS_NOT_FOUND

        log_shell(self.logger, LogLevel.DEBUG, f"dispatch {entry.name} {args}")
        try:
            result = entry.handler(args, self)
        except UserInputError as e:
            self.print_line(str(e), "error")
            if e.hint:
                self.print_line(e.hint, "hint")
            return STATUS_USAGE
        except Exception as e:
            fault = HandlerFault(entry.name, e)
            log_shell(self.logger, LogLevel.ERR, f"handler fault in {fault}")
            self.print_line(f"Error executing command: {e}", "error")
            return STATUS_FAULT

        if inspect.iscoroutine(result):
            self.run_in_background(entry.name, result)
        return STATUS_OK

    def run_in_background(self, name: str, work) -> threading.Thread:
        """Run a callable or coroutine on a daemon thread. The shell does not wait."""

        def run_job():
            try:
                if inspect.iscoroutine(work):
                    asyncio.run(work)
                else:
                    work()
            except Exception as e:
                log_shell(self.logger, LogLevel.ERR, f"background job {name} failed: {e}")
                self.print_line(f"Error executing command: {e}", "error")

        thread = threading.Thread(target=run_job, name=f"job-{name}", daemon=True)
        self.background_jobs.append(thread)
        thread.start()
        return thread

    def wait_for_jobs(self, timeout: Optional[float] = None) -> None:
        """Block until background jobs finish."""
        for thread in list(self.background_jobs):
            thread.join(timeout)
        self.background_jobs = [t for t in self.background_jobs if t.is_alive()]

    # ------------------------------------------------------------------
    # History and completion
    # ------------------------------------------------------------------

    def history_previous(self) -> None:
        """Recall the next older history entry into the input field."""
        if not self.input_line.enabled:
            return
        text = self.history.previous()
        if text is not None:
            self.input_line.set_text(text)

    def history_next(self) -> None:
        """Recall the next newer history entry (empty past the newest)."""
        if not self.input_line.enabled:
            return
        text = self.history.next()
        if text is not None:
            self.input_line.set_text(text)

    def complete(self) -> Optional[CompletionResult]:
        """Run tab completion against the input field."""
        if not self.input_line.enabled:
            return None

        result = self.completer.complete(self.input_line.text, self.input_line.caret)
        if result.matches:
            self.input_line.set_text(result.text, result.caret)
        if result.show_matches:
            self.display_completions(result.matches)
        return result

    def display_completions(self, matches: List[str]) -> None:
        """Display completion matches in columns."""
        if not matches:
            return
        self.print_line("")
        for row in format_columns(matches, self.config.completion_columns,
                                  self.config.completion_width):
            self.print_line(row, "hint")
        self.print_line("")
