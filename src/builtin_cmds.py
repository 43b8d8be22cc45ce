"""Bodies of the commands implemented inside the shell process.

Each handler takes ``(args, stdout, stderr)`` and returns an exit status.
Failures are raised as BuiltinError and reported by the dispatcher, so a
handler never writes its own error line.
"""
from __future__ import annotations

import os
from typing import Callable, List, TextIO

from errors import BuiltinError


def exit_cmd(args: List[str], stdout: TextIO, stderr: TextIO) -> int:
    if not args:
        raise SystemExit(0)
    try:
        code = int(args[0])
    except ValueError:
        raise BuiltinError(f"exit: invalid exit code: {args[0]}") from None
    # process statuses are one byte wide: -1 -> 255, 256 -> 0
    raise SystemExit(code % 256)


def echo_cmd(args: List[str], stdout: TextIO, stderr: TextIO) -> int:
    stdout.write(' '.join(args) + '\n')
    stdout.flush()
    return 0


def pwd_cmd(args: List[str], stdout: TextIO, stderr: TextIO) -> int:
    try:
        cwd = os.getcwd()
    except OSError as e:
        raise BuiltinError(f"pwd: {e.strerror or e}") from e
    stdout.write(cwd + '\n')
    stdout.flush()
    return 0


def cd_cmd(args: List[str], stdout: TextIO, stderr: TextIO) -> int:
    if not args:
        raise BuiltinError("cd: missing argument")
    target = args[0]
    if target == '~':
        target = os.path.expanduser('~')
    try:
        os.chdir(target)
    except OSError as e:
        raise BuiltinError(f"cd: {args[0]}: {e.strerror or e}") from e
    # keep children's $PWD in step with the real working directory
    os.environ['PWD'] = os.getcwd()
    return 0


def type_cmd(args: List[str], stdout: TextIO, stderr: TextIO, *,
             is_builtin: Callable[[str], bool], finder: Callable[[str], str]) -> int:
    if not args:
        raise BuiltinError("type: missing argument")
    name = args[0]
    if is_builtin(name):
        stdout.write(f"{name} is a shell builtin\n")
        rc = 0
    else:
        found = finder(name)
        if found:
            stdout.write(f"{name} is {found}\n")
            rc = 0
        else:
            stdout.write(f"{name}: not found\n")
            rc = 1
    stdout.flush()
    return rc
