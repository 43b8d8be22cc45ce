"""Detection of output redirection operators in a raw command line.

Supported operators: ``>``, ``>>``, ``1>``, ``1>>``, ``2>``, ``2>>``.
Operators inside quotes are literal. A descriptor digit only counts when it
stands alone (start of line or after whitespace), and a bare ``>`` glued to the
previous word is not a redirection at all: ``echo hello>>out.txt`` keeps
``hello>>out.txt`` as one argument.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from errors import ParseError
from lexer import QUOTE_CHARS, QuoteState


MISSING_FILENAME = "missing filename for redirection"


class Stream(Enum):
    NONE = "none"
    STDOUT = "stdout"
    STDERR = "stderr"


DESCRIPTORS = {'1': Stream.STDOUT, '2': Stream.STDERR}


@dataclass
class RedirectionSpec:
    target: Stream
    filename: str = ""
    append: bool = False

    @classmethod
    def none(cls) -> "RedirectionSpec":
        return cls(Stream.NONE)


@dataclass
class OperatorMatch:
    """Location of one operator; ``start`` includes a descriptor digit if present."""
    start: int
    end: int
    stream: Stream
    append: bool
    # digit was found by walking back over spaces ("ls 1 > out")
    spaced: bool = field(default=False, compare=False)

    def plain(self) -> "OperatorMatch":
        """The same operator without its spaced descriptor, as a bare stdout redirect."""
        op_start = self.end - (2 if self.append else 1)
        return OperatorMatch(op_start, self.end, Stream.STDOUT, self.append)


def _standalone(text: str, i: int) -> bool:
    return i == 0 or text[i - 1].isspace()


def find_operator(text: str) -> Optional[OperatorMatch]:
    """Return the leftmost unquoted redirection operator in ``text``, if any."""
    state = QuoteState.NONE
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        nxt = state.step(ch)
        if nxt is not state:
            state = nxt
            i += 1
            continue
        if state.active:
            i += 1
            continue

        # n> / n>> with the digit directly attached to the operator
        if ch in DESCRIPTORS and text.startswith('>', i + 1):
            if _standalone(text, i):
                append = text.startswith('>>', i + 1)
                return OperatorMatch(i, i + (3 if append else 2), DESCRIPTORS[ch], append)
            i += 1
            continue

        if ch == '>':
            append = text.startswith('>>', i)
            end = i + (2 if append else 1)
            if i == 0:
                return OperatorMatch(0, end, Stream.STDOUT, append)
            if text[i - 1].isspace():
                # "ls 1 > out": the descriptor may sit before the spaces
                j = i - 1
                while j >= 0 and text[j].isspace():
                    j -= 1
                if j >= 0 and text[j] in DESCRIPTORS and _standalone(text, j):
                    return OperatorMatch(j, end, DESCRIPTORS[text[j]], append, spaced=True)
                return OperatorMatch(i, end, Stream.STDOUT, append)
            # glued to the previous word: literal text
            i = end
            continue

        i += 1
    return None


def _clean_filename(text: str) -> str:
    name = text.strip()
    if len(name) >= 2 and name[0] in QUOTE_CHARS and name[-1] == name[0]:
        name = name[1:-1]
    return name


def split_redirection(line: str) -> Tuple[str, RedirectionSpec]:
    """Split ``line`` at its first redirection operator.

    Everything after the operator is the filename. Returns the command part
    and the RedirectionSpec (``RedirectionSpec.none()`` when no operator is present).
    """
    line = line.strip()
    match = find_operator(line)
    if match is None:
        return line, RedirectionSpec.none()
    filename = _clean_filename(line[match.end:])
    if not filename:
        raise ParseError(MISSING_FILENAME)
    return line[:match.start].strip(), RedirectionSpec(match.stream, filename, match.append)


def resolve_redirections(line: str) -> Tuple[str, List[RedirectionSpec]]:
    """Like split_redirection, but every later operator ends the previous filename.

    ``cmd > out 2> err`` -> ("cmd", [stdout->out, stderr->err]).
    """
    line = line.strip()
    match = find_operator(line)
    if match is None:
        return line, []

    command = line[:match.start].strip()
    specs: List[RedirectionSpec] = []
    rest = line[match.end:]
    while True:
        nxt = find_operator(rest)
        if nxt is not None and nxt.spaced and not _clean_filename(rest[:nxt.start]):
            # "2> 1 > out": the digit is the previous filename, not a descriptor
            nxt = nxt.plain()
        chunk = rest if nxt is None else rest[:nxt.start]
        filename = _clean_filename(chunk)
        if not filename:
            raise ParseError(MISSING_FILENAME)
        specs.append(RedirectionSpec(match.stream, filename, match.append))
        if nxt is None:
            break
        match = nxt
        rest = rest[nxt.end:]
    return command, specs
