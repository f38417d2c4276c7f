# Terminal rendering of parser diagnostics: level tag, location, message, source line and caret.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.text import Text

from clint.parser import Diagnostic, DiagnosticLevel

logger = logging.getLogger(__name__)

LEVEL_STYLE = {
    DiagnosticLevel.FATAL: "bold red",
    DiagnosticLevel.ERROR: "bold red",
    DiagnosticLevel.WARNING: "bold yellow",
}

CARET = "^~~~"


def caret_padding(column: int, line: str) -> int:
    """Number of spaces before the caret: column clamped into [1, len(line) + 1]."""
    return min(max(column - 1, 0), len(line))


def source_line(lines: Sequence[str], line: int) -> Optional[str]:
    """The 1-based line, with lines below 1 clamped to the first; None past the end."""
    index = max(line - 1, 0)
    if index < len(lines):
        return lines[index]
    return None


class TerminalDiagnosticConsumer:
    """
    Print parser diagnostics to the terminal with the offending source line.

    Files are read again from disk; contents are cached per path for the
    duration of a single consume() call.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True, highlight=False)

    def consume(self, diagnostics: Sequence[Diagnostic]) -> None:
        cached_content: dict[str, Optional[str]] = {}

        for d in diagnostics:
            header = Text(f"{d.location} ")
            header.append(d.level.value, style=LEVEL_STYLE[d.level])
            header.append(f": {d.message}")
            self.console.print(header)

            path = d.location.path
            if path not in cached_content:
                cached_content[path] = self._read(path)
            content = cached_content[path]

            if content is not None:
                line = source_line(content.splitlines(), d.location.line)
                if line is not None:
                    self.console.print(Text(line))
                    pointer = Text(" " * caret_padding(d.location.column, line))
                    pointer.append(CARET, style="green")
                    self.console.print(pointer)

            self.console.print()

    @staticmethod
    def _read(path: str) -> Optional[str]:
        try:
            return Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Cannot show source for %s: %s", path, e)
            return None
