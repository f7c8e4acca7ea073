"""
Retro Micro-OS Built-in Commands
help, clear, history, echo and boot.
"""

import time
from typing import Callable, List

from core.errors import UserInputError


LOGO = [
    "+-----------------------------------------------------------+",
    "|                                                           |",
    "|              ####  ##### ##### ####   ###                 |",
    "|              #   # #       #   #   # #   #                |",
    "|              ####  ####    #   ####  #   #                |",
    "|              #  #  #       #   #  #  #   #                |",
    "|              #   # #####   #   #   #  ###                 |",
    "|                                                           |",
    "|                    MICRO-OS v1.0.0                        |",
    "|                                                           |",
    "+-----------------------------------------------------------+",
]


def help_command(args: List[str], shell) -> None:
    """Display available commands."""
    if args:
        entry = shell.registry.get(args[0])
        if entry is None:
            raise UserInputError(f"help: no help topics match '{args[0]}'",
                                 'Type "help" for a list of available commands.')
        shell.print_line(entry.get_help())
        return

    shell.print_line("")
    shell.print_line("Available Commands:", "section-header")
    shell.print_line("==================", "section-header")
    shell.print_line("")
    for entry in shell.get_commands():
        shell.print_line(f"  {entry.name:<15}{entry.description}")
    shell.print_line("")


def complete_command_names(args: List[str], current_word: str, shell) -> List[str]:
    return [entry.name for entry in shell.get_commands()]


def clear_command(args: List[str], shell) -> None:
    shell.clear()


def history_command(args: List[str], shell) -> None:
    """Show command history, optionally only the last N entries."""
    history = shell.get_history()
    if not history:
        shell.print_line("No command history.", "hint")
        return

    count = len(history)
    if args:
        try:
            count = int(args[0])
        except ValueError:
            raise UserInputError(f"history: {args[0]}: invalid number")

    start = max(0, len(history) - count)
    shell.print_line("")
    shell.print_line("Command History:", "section-header")
    shell.print_line("================", "section-header")
    shell.print_line("")
    for i, cmd in enumerate(history[start:], start=start):
        shell.print_line(f"{i + 1:4d}  {cmd}")
    shell.print_line("")


def echo_command(args: List[str], shell) -> None:
    shell.print_line(" ".join(args))


def run_boot_sequence(shell, line_delay: float = 0.3, logo_delay: float = 0.1,
                      sleep: Callable[[float], None] = time.sleep) -> None:
    """Replay the startup sequence with delayed output.

    Shell input is disabled while the sequence runs.
    """
    shell.disable_input()
    try:
        shell.clear()

        # Memory test counter
        steps = 20
        for i in range(steps + 1):
            shell.clear()
            shell.print_line(f"Memory Test: {640 * i // steps}K OK")
            sleep(line_delay / 10)
        sleep(line_delay)

        for text in ("", "Initializing hardware...", "  CPU: 8086 @ 4.77 MHz",
                     "  RAM: 640K", "  Display: CRT Monochrome", "",
                     "Loading system...", "  [OK] Kernel loaded",
                     "  [OK] Command processor initialized",
                     "  [OK] File system mounted"):
            shell.print_line(text)
            sleep(line_delay)

        shell.print_line("")
        for text in LOGO:
            shell.print_line(text)
            sleep(logo_delay)

        shell.print_line("")
        shell.print_line("Welcome to Retro Micro-OS")
        shell.print_line('Type "help" for available commands.')
        shell.print_line("")
        shell.print_line("System ready.", "hint")
        shell.print_line("")
    finally:
        shell.enable_input()


def boot_command(args: List[str], shell) -> None:
    """Replay the boot sequence in the background."""
    config = shell.config
    shell.run_in_background(
        "boot",
        lambda: run_boot_sequence(shell, config.boot_line_delay, config.boot_logo_delay),
    )


def register_core_commands(shell) -> None:
    """Register core built-in commands."""
    shell.register_command("help", "Display available commands",
                           help_command, complete_command_names)
    shell.register_command("clear", "Clear the terminal screen", clear_command)
    shell.register_command("history", "Show command history", history_command)
    shell.register_command("echo", "Echo text to the terminal", echo_command)
    shell.register_command("boot", "Replay the boot sequence", boot_command)
