# module for command lookup and execution

from __future__ import annotations

import os
import shutil
import subprocess
from typing import Any, Callable, Dict, List, Optional, TextIO

from builtin_cmds import cd_cmd, echo_cmd, exit_cmd, pwd_cmd, type_cmd
from errors import CommandFailedError, CommandNotFoundError, ShellError

BuiltinHandler = Callable[[List[str], TextIO, TextIO], Optional[int]]
Launcher = Callable[[str, List[str], Optional[TextIO], TextIO, TextIO], int]

NOT_FOUND_STATUS = 127

# exit status of a reported ShellError, by kind; anything else is 1
STATUS_BY_KIND = {
    CommandNotFoundError.kind: NOT_FOUND_STATUS,
}


def find_command(name: str, path: Optional[str] = None) -> str:
    """Return the executable that PATH resolves ``name`` to, or "" when there is none."""
    if not name:
        return ""
    if path is None:
        path = os.environ.get('PATH', '')
    return shutil.which(name, mode=os.F_OK | os.X_OK, path=path) or ""


def _fileno(stream: Any) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _flush(stream: Any) -> None:
    flush = getattr(stream, 'flush', None)
    if callable(flush):
        flush()


def run_external(name: str, args: List[str], stdin: Optional[TextIO], stdout: TextIO, stderr: TextIO,
                 finder: Callable[[str], str] = find_command) -> int:
    """Run ``name`` from PATH with the given streams and wait for it.

    Streams backed by a real file descriptor go straight to the child; others
    (e.g. StringIO in tests) are fed and collected through pipes. A non-zero
    exit status is returned, not raised.
    """
    path = finder(name)
    if not path:
        raise CommandNotFoundError(name)

    out_fd = _fileno(stdout)
    err_fd = _fileno(stderr)
    kwargs: Dict[str, Any] = {}
    if stdin is None:
        kwargs['stdin'] = None
    else:
        in_fd = _fileno(stdin)
        if in_fd is not None:
            kwargs['stdin'] = in_fd
        else:
            kwargs['input'] = stdin.read()

    # anything we buffered must land before the child writes to the same fd
    _flush(stdout)
    _flush(stderr)
    try:
        completed = subprocess.run(
            [name, *args],
            executable=path,
            stdout=out_fd if out_fd is not None else subprocess.PIPE,
            stderr=err_fd if err_fd is not None else subprocess.PIPE,
            text=True,
            errors='replace',
            **kwargs,
        )
    except OSError as e:
        raise CommandFailedError(name, f"command failed to start: {e.strerror or e}") from e

    if completed.stdout:
        stdout.write(completed.stdout)
        stdout.flush()
    if completed.stderr:
        stderr.write(completed.stderr)
        stderr.flush()
    return completed.returncode


class BuiltinRegistry:
    """Name -> handler table for in-process commands."""

    def __init__(self, finder: Callable[[str], str] = find_command) -> None:
        self._commands: Dict[str, BuiltinHandler] = {}
        self.command_finder: Callable[[str], str] = finder
        self._register_defaults()

    def _register_defaults(self) -> None:
        self.register('exit', exit_cmd)
        self.register('echo', echo_cmd)
        self.register('pwd', pwd_cmd)
        self.register('cd', cd_cmd)
        self.register('type', self._type)

    def _type(self, args: List[str], stdout: TextIO, stderr: TextIO) -> int:
        return type_cmd(args, stdout, stderr, is_builtin=self.is_builtin, finder=self.command_finder)

    def set_command_finder(self, finder: Callable[[str], str]) -> None:
        self.command_finder = finder

    def register(self, name: str, handler: BuiltinHandler) -> None:
        self._commands[name] = handler

    def is_builtin(self, name: str) -> bool:
        return name in self._commands

    def execute(self, name: str, args: List[str], stdout: TextIO, stderr: TextIO) -> int:
        handler = self._commands.get(name)
        if handler is None:
            raise CommandNotFoundError(name)
        rc = handler(args, stdout, stderr)
        return 0 if rc is None else rc


class Dispatcher:
    """Route argv to a builtin or to the external launcher.

    Shell errors end up on the active stderr as a single line; only
    SystemExit (from ``exit``) leaves this boundary.
    """

    def __init__(self, registry: BuiltinRegistry, launcher: Optional[Launcher] = None) -> None:
        self.registry = registry
        self.launcher: Launcher = launcher or self._launch_external

    def _launch_external(self, name: str, args: List[str], stdin: Optional[TextIO],
                         stdout: TextIO, stderr: TextIO) -> int:
        return run_external(name, args, stdin, stdout, stderr, finder=self.registry.command_finder)

    def dispatch(self, argv: List[str], stdin: Optional[TextIO], stdout: TextIO, stderr: TextIO) -> int:
        if not argv:
            return 0
        name, args = argv[0], list(argv[1:])
        try:
            if self.registry.is_builtin(name):
                return self.registry.execute(name, args, stdout, stderr)
            return self.launcher(name, args, stdin, stdout, stderr)
        except ShellError as e:
            _report(stderr, e)
            return STATUS_BY_KIND.get(e.kind, 1)


def _report(stream: TextIO, err: ShellError) -> None:
    stream.write(f"{err}\n")
    stream.flush()
