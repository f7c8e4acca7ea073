"""
Retro Micro-OS File Commands
ls, cat and rm over the virtual file storage.
"""

from typing import List

from core.errors import StorageError, UserInputError


def format_file_size(size: int) -> str:
    """Format a size in characters in human-readable form."""
    if size < 0:
        return "Unknown"
    if size == 0:
        return "0 bytes"
    if size == 1:
        return "1 byte"
    if size < 1024:
        return f"{size} bytes"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def register_file_commands(shell, storage) -> None:
    """Register file management commands bound to storage."""

    def complete_files(args: List[str], current_word: str, shell) -> List[str]:
        return storage.list()

    def ls_command(args: List[str], shell) -> None:
        long_format = "-l" in args
        files = storage.list()

        shell.print_line("")
        if files:
            shell.print_line("Files:", "section-header")
            for name in files:
                if long_format:
                    shell.print_line(f"  {name:<30}{format_file_size(storage.size(name))}")
                else:
                    shell.print_line(f"  {name}")
        else:
            shell.print_line("No files found.", "hint")
            shell.print_line("Create files using: edit <filename>", "hint")

        shell.print_line("")
        shell.print_line("Commands:", "section-header")
        shell.print_line('  Type "help" to see all available commands', "hint")
        shell.print_line('  Type "man <command>" for detailed help', "hint")
        shell.print_line("")

    def cat_command(args: List[str], shell) -> None:
        if not args:
            raise UserInputError("Usage: cat <filename>", "Display the contents of a file.")

        name = args[0]
        if not storage.exists(name):
            raise UserInputError(f"cat: {name}: No such file", 'Use "ls" to see available files.')

        content = storage.load(name)
        if not content:
            shell.print_line("[Empty file]", "hint")
            return

        shell.print_line("")
        for line in content.split("\n"):
            shell.print_line(line)
        shell.print_line("")

    def rm_command(args: List[str], shell) -> None:
        force = bool(args) and args[0] == "-f"
        name = (args[1] if len(args) > 1 else None) if force else (args[0] if args else None)
        if not name:
            raise UserInputError("Usage: rm [-f] <filename>",
                                 "Remove a file from the virtual file system.")

        if not storage.exists(name):
            raise UserInputError(f"rm: {name}: No such file", 'Use "ls" to see available files.')

        if not force and shell.confirm is not None:
            if not shell.confirm(f"Delete '{name}'?"):
                shell.print_line("Deletion cancelled.", "hint")
                return

        try:
            removed = storage.delete(name)
        except StorageError as e:
            shell.print_line(f"Failed to remove '{name}': {e}", "error")
            return

        if removed:
            shell.print_line(f"Removed '{name}'")
        else:
            shell.print_line(f"Failed to remove '{name}'", "error")

    shell.register_command("ls", "List files and commands", ls_command)
    shell.register_command("cat", "Display file contents", cat_command, complete_files)
    shell.register_command("rm", "Remove files", rm_command, complete_files)
