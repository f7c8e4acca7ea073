"""
Retro Micro-OS man Command
Displays pages from the documentation registry.
"""

import re
import textwrap
from typing import List

from core.errors import UserInputError
from core.manpages import ManPage, ManPageRegistry


def _wrap(text: str, indent: int = 4, width: int = 76) -> List[str]:
    prefix = " " * indent
    lines = []
    # Paragraphs are separated by blank lines; lines inside one are reflowed
    for i, paragraph in enumerate(re.split(r"\n\s*\n", text.strip())):
        if i:
            lines.append("")
        lines.extend(textwrap.wrap(" ".join(paragraph.split()), width=width - indent,
                                   initial_indent=prefix, subsequent_indent=prefix))
    return lines


def show_page_list(shell, registry: ManPageRegistry) -> None:
    pages = registry.pages()
    if not pages:
        shell.print_line("No manual pages available.", "hint")
        return

    shell.print_line("")
    shell.print_line("Available Manual Pages", "section-header")
    shell.print_line("======================", "section-header")
    shell.print_line("")
    shell.print_line("Usage: man <command>        Show brief help")
    shell.print_line("       man -v <command>     Show detailed help")
    shell.print_line("")
    for page in pages:
        shell.print_line(f"  {page.name:<20}{page.brief}")
    shell.print_line("")


def show_page(shell, page: ManPage, detailed: bool = False) -> None:
    """Print a man page, brief by default."""
    shell.print_line("")
    shell.print_line("NAME", "section-header")
    shell.print_line(f"    {page.name} - {page.brief}")
    shell.print_line("")
    shell.print_line("USAGE", "section-header")
    shell.print_line(f"    {page.usage}")
    shell.print_line("")
    shell.print_line("DESCRIPTION", "section-header")
    for line in _wrap(page.description):
        shell.print_line(line)
    shell.print_line("")

    if detailed and page.detailed:
        shell.print_line("DETAILS", "section-header")
        for line in _wrap(page.detailed):
            shell.print_line(line)
        shell.print_line("")

    if page.examples:
        shell.print_line("EXAMPLES", "section-header")
        for example in page.examples:
            shell.print_line(f"    {example}")
        shell.print_line("")

    if not detailed:
        shell.print_line(f"For more details, use: man -v {page.name}", "hint")
        shell.print_line("")


def register_man_command(shell, registry: ManPageRegistry) -> None:
    """Register the man command plugin."""

    def man_command(args: List[str], shell) -> None:
        if not args:
            show_page_list(shell, registry)
            return

        verbose = args[0] == "-v"
        name = (args[1] if len(args) > 1 else None) if verbose else args[0]
        if not name:
            raise UserInputError("Usage: man [-v] <command>",
                                 'Try "man" to list all available manual pages.')

        page = registry.lookup(name)
        if page is None:
            raise UserInputError(f"No manual entry for {name}",
                                 'Try "man" to see available manual pages.')
        show_page(shell, page, detailed=verbose)

    def complete_pages(args: List[str], current_word: str, shell) -> List[str]:
        return registry.command_names()

    shell.register_command("man", "Display manual pages for commands",
                           man_command, complete_pages)
