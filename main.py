#!/usr/bin/env python3
"""
Retro Micro-OS - a retro terminal console with a vim-like editor

Usage:
    python main.py [options]

Options:
    --help, -h          Show this help message
    --version, -v       Show version information
    --batch FILE        Execute commands from file and exit
    --no-persist        Keep files in memory only
    --state-dir DIR     Directory for saved files (default ~/.retroos)
    --log-file FILE     Append the system log to FILE

In batch files, lines are shell commands; while the editor is open they are
key strings instead, where <Esc>, <CR> and <BS> name special keys:

    edit notes.txt
    ihello world<Esc>
    :wq<CR>
"""

import sys
import time
from typing import List, Optional

from bin.editor import TextEditor, register_editor_commands
from core.config import ConsoleConfig
from core.errors import StorageError
from core.logging import SystemLogger
from core.manpages import default_registry
from core.storage import FileStorage, PersistentStorage
from shell.shell import Shell
from shell.terminal import TerminalFrontend


__version__ = "1.0.0"
__author__ = "Retro Micro-OS Team"


class RetroOS:
    """Wires storage, shell, editor and front end together."""

    def __init__(self, config: Optional[ConsoleConfig] = None):
        self.config = config or ConsoleConfig.from_env()
        self.logger = SystemLogger(log_level=self.config.log_level)
        self.storage = None
        self.shell = None
        self.editor = None
        self.frontend = None
        self.log_stream = None

    def initialize(self) -> bool:
        """Initialize the console."""
        try:
            if self.config.persist:
                self.storage = PersistentStorage(self.config.state_dir, self.logger)
            else:
                self.storage = FileStorage()
        except (OSError, StorageError) as e:
            print(f"Error initializing storage: {e}")
            return False

        if self.config.log_file:
            try:
                self.log_stream = open(self.config.log_file, "a", encoding="utf-8")
            except OSError as e:
                print(f"Error opening log file: {e}")
                return False
            self.logger.add_output(self.log_stream)

        self.shell = Shell(
            storage=self.storage,
            config=self.config,
            logger=self.logger,
            confirm=self._confirm,
            man_registry=default_registry(),
        )
        self.editor = TextEditor(self.shell, self.storage, self.logger)
        register_editor_commands(self.shell, self.editor)
        return True

    def _confirm(self, question: str) -> bool:
        if self.frontend is not None:
            return self.frontend.ask(question)
        try:
            return input(f"{question} (y/n) ").strip().lower() == "y"
        except EOFError:
            return False

    def display_welcome(self) -> None:
        shell = self.shell
        shell.print_line("")
        shell.print_line("+-----------------------------------------------------------+")
        shell.print_line("|               RETRO MICRO-OS v" + f"{__version__:<28}" + "|")
        shell.print_line("|     Welcome to the nostalgic terminal experience          |")
        shell.print_line("+-----------------------------------------------------------+")
        shell.print_line("")
        shell.print_line('Type "help" to see available commands.')
        shell.print_line("")
        shell.print_line("System initialized successfully.", "hint")
        shell.print_line("The current date and time is: " + time.strftime("%a %b %d %H:%M:%S %Z %Y"))
        shell.print_line("")

    def run(self) -> int:
        """Run the console interactively."""
        if not self.initialize():
            return 1

        self.frontend = TerminalFrontend(self.shell, self.editor)
        self.display_welcome()
        try:
            self.frontend.run()
        except KeyboardInterrupt:
            print()
        finally:
            self.shutdown()
        return 0

    def run_batch(self, filename: str) -> int:
        """Execute commands from a file."""
        if not self.initialize():
            return 1

        self.frontend = TerminalFrontend(self.shell, self.editor, interactive=False)
        # Nobody to ask in batch mode
        self.shell.confirm = None
        try:
            try:
                with open(filename, "r", encoding="utf-8") as f:
                    lines = f.read().split("\n")
            except FileNotFoundError:
                print(f"Error: File '{filename}' not found")
                return 1

            for line in lines:
                if not self.editor.active and (not line.strip() or line.startswith("#")):
                    continue
                self.frontend.feed_line(line)
            self.shell.wait_for_jobs()
        finally:
            self.shutdown()

        return 0 if self.shell.last_status == 0 else 1

    def shutdown(self) -> None:
        """Close the log file, if one was opened."""
        if self.log_stream is not None:
            self.logger.remove_output(self.log_stream)
            self.log_stream.close()
            self.log_stream = None


def show_help() -> None:
    """Show help message."""
    print(__doc__)


def show_version() -> None:
    """Show version information."""
    print(f"Retro Micro-OS version {__version__}")
    print(f"Running on Python {sys.version}")


def build_config(args: List[str]) -> ConsoleConfig:
    """Apply command-line overrides on top of the environment config."""
    config = ConsoleConfig.from_env()
    if "--no-persist" in args:
        config.persist = False
    if "--state-dir" in args:
        idx = args.index("--state-dir")
        if idx + 1 >= len(args):
            raise ValueError("--state-dir requires a directory")
        config.state_dir = args[idx + 1]
    if "--log-file" in args:
        idx = args.index("--log-file")
        if idx + 1 >= len(args):
            raise ValueError("--log-file requires a filename")
        config.log_file = args[idx + 1]
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = sys.argv[1:] if argv is None else argv

    if "--help" in args or "-h" in args:
        show_help()
        return 0

    if "--version" in args or "-v" in args:
        show_version()
        return 0

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if "--batch" in args:
        idx = args.index("--batch")
        if idx + 1 < len(args):
            return RetroOS(config).run_batch(args[idx + 1])
        print("Error: --batch requires a filename")
        return 1

    return RetroOS(config).run()


if __name__ == "__main__":
    sys.exit(main())
