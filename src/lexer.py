"""Quote-aware splitting of a command line into argv.

Rules:
- Whitespace outside quotes separates words; runs of whitespace collapse.
- A quote character (' or ") opens a quote of that kind and the same
  character closes it. The delimiters are dropped.
- Inside a quote everything else is literal, including the other quote kind.
- An opened quote always yields a word, so '' becomes an empty argument.
- Adjacent quoted/unquoted segments join into one word.
- A quote still open at end of input is closed implicitly.
"""
from __future__ import annotations

from enum import Enum
from typing import List


QUOTE_CHARS = ("'", '"')


class QuoteState(Enum):
    NONE = None
    SINGLE = "'"
    DOUBLE = '"'

    def step(self, ch: str) -> "QuoteState":
        """Return the state after reading ``ch``."""
        if self is QuoteState.NONE:
            if ch in QUOTE_CHARS:
                return QuoteState(ch)
            return self
        if ch == self.value:
            return QuoteState.NONE
        return self

    @property
    def active(self) -> bool:
        return self is not QuoteState.NONE


def tokenize(line: str) -> List[str]:
    words: List[str] = []
    buf: List[str] = []
    # True once the current word exists, even if it is still empty ('' case)
    have_word = False
    state = QuoteState.NONE

    for ch in line.strip():
        nxt = state.step(ch)
        if nxt is not state:
            # opening or closing delimiter, never part of the word
            state = nxt
            have_word = True
            continue
        if not state.active and ch.isspace():
            if have_word:
                words.append(''.join(buf))
                buf.clear()
                have_word = False
            continue
        buf.append(ch)
        have_word = True

    if have_word:
        words.append(''.join(buf))
    return words
