"""
Retro Micro-OS Manual Pages
Documentation registry and markdown man-page loader.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ManPage:
    """Documentation for a single command."""
    name: str
    brief: str
    usage: str
    description: str
    detailed: str = ""
    examples: List[str] = field(default_factory=list)


class ManPageRegistry:
    """Central repository for command documentation."""

    def __init__(self):
        self._pages: Dict[str, ManPage] = {}

    def register(self, page: ManPage) -> None:
        self._pages[page.name.lower()] = page

    def lookup(self, name: str) -> Optional[ManPage]:
        """Get a page by command name (case-insensitive)."""
        return self._pages.get(name.lower())

    def pages(self) -> List[ManPage]:
        """All pages, sorted by name."""
        return sorted(self._pages.values(), key=lambda p: p.name)

    def command_names(self) -> List[str]:
        return [page.name for page in self.pages()]

    def load_directory(self, path: str) -> int:
        """Load every *.md file in a directory. Returns the number loaded."""
        count = 0
        for entry in sorted(os.listdir(path)):
            if not entry.endswith(".md"):
                continue
            with open(os.path.join(path, entry), "r", encoding="utf-8") as f:
                page = load_markdown(f.read())
            if page.name:
                self.register(page)
                count += 1
        return count

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._pages


def load_markdown(content: str) -> ManPage:
    """Parse a markdown man page.

    The first ``# heading`` is the command name; ``## Brief``, ``## Usage``,
    ``## Description`` and ``## Detailed`` hold text; lines inside fenced
    code blocks under ``## Examples`` become examples.
    """
    name = ""
    sections: Dict[str, List[str]] = {}
    examples: List[str] = []
    current = ""
    in_code = False

    for line in content.split("\n"):
        if line.startswith("# ") and not name:
            name = line[2:].strip()
            continue
        if line.startswith("## ") and not in_code:
            current = line[3:].strip().upper()
            sections.setdefault(current, [])
            continue
        if line.strip().startswith("```"):
            in_code = not in_code
            continue
        if current == "EXAMPLES":
            if in_code and line.strip():
                examples.append(line.strip())
            continue
        if current:
            sections[current].append(line)

    def text(key: str) -> str:
        return "\n".join(sections.get(key, [])).strip()

    description = text("DESCRIPTION")
    brief = text("BRIEF") or (description.split("\n")[0] if description else "")

    return ManPage(
        name=name,
        brief=brief,
        usage=text("USAGE") or name,
        description=description,
        detailed=text("DETAILED"),
        examples=examples,
    )


# Markdown pages shipped with the console
PAGES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "man")


def default_registry() -> ManPageRegistry:
    """Registry pre-loaded with the pages in PAGES_DIR."""
    registry = ManPageRegistry()
    registry.load_directory(PAGES_DIR)
    return registry
