from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

from command import BuiltinRegistry, Dispatcher, find_command
from errors import ParseError, ShellIOError
from lineparser import parse_line
from streams import StreamManager


PARSE_ERROR_STATUS = 2


class ShellSession:
    """Holds the state that outlives a single line: streams, builtins, last status."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None,
                 stderr: Optional[TextIO] = None, finder: Optional[Callable[[str], str]] = None) -> None:
        self.stdin: TextIO = stdin if stdin is not None else sys.stdin
        self.stdout: TextIO = stdout if stdout is not None else sys.stdout
        self.stderr: TextIO = stderr if stderr is not None else sys.stderr
        self.builtins = BuiltinRegistry(finder or find_command)
        self.dispatcher = Dispatcher(self.builtins)
        self.streams = StreamManager(self.stdout, self.stderr)
        self.last_status: int = 0

    def report(self, message: str) -> None:
        self.stderr.write(message + '\n')
        self.stderr.flush()


def execute_line(line: str, session: ShellSession) -> int:
    """Run one turn: parse, open redirections, dispatch, restore streams.

    Returns the exit status of the turn and records it on the session.
    """
    try:
        parsed = parse_line(line)
    except ParseError as e:
        session.report(str(e))
        session.last_status = PARSE_ERROR_STATUS
        return PARSE_ERROR_STATUS

    if not parsed.argv:
        # "> out.txt" parses fine but there is nothing to run
        return session.last_status

    if not parsed.redirects:
        rc = session.dispatcher.dispatch(parsed.argv, session.stdin, session.stdout, session.stderr)
        session.last_status = rc
        return rc

    try:
        active = session.streams.begin(
            parsed.stdout_file,
            parsed.stderr_file,
            parsed.stdout_append,
            parsed.stderr_append,
        )
    except ShellIOError as e:
        session.report(str(e))
        session.last_status = 1
        return 1

    try:
        with active:
            rc = session.dispatcher.dispatch(parsed.argv, session.stdin, active.stdout, active.stderr)
    except ShellIOError as e:
        # dispatch reports its own errors; this is a redirect target failing on close
        session.report(str(e))
        rc = 1
    session.last_status = rc
    return rc
