# Entry point for turning one input line into argv plus redirection targets

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from lexer import tokenize
from redirection import Stream, resolve_redirections


@dataclass
class ParsedLine:
    argv: List[str] = field(default_factory=list)
    stdout_file: str = ""
    stderr_file: str = ""
    stdout_append: bool = False
    stderr_append: bool = False

    @property
    def redirects(self) -> bool:
        return bool(self.stdout_file or self.stderr_file)


def parse_line(line: str) -> ParsedLine:
    """Parse a raw line. Raises ParseError when a redirection has no filename."""
    trimmed = line.strip()
    if not trimmed:
        return ParsedLine()

    command, specs = resolve_redirections(trimmed)
    parsed = ParsedLine(argv=tokenize(command))
    # a later operator for the same stream replaces the earlier one
    for spec in specs:
        if spec.target is Stream.STDOUT:
            parsed.stdout_file = spec.filename
            parsed.stdout_append = spec.append
        elif spec.target is Stream.STDERR:
            parsed.stderr_file = spec.filename
            parsed.stderr_append = spec.append
    return parsed
