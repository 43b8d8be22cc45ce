"""Per-turn stdout/stderr substitution for redirection targets."""
from __future__ import annotations

import sys
from typing import Any, List, Optional, TextIO, Tuple

from errors import ShellIOError


class StreamSession:
    """Streams active for one turn plus the handles this turn opened.

    ``release()`` puts the manager back on its original streams and closes the
    opened handles. It only acts the first time it is called, and ``with``
    blocks call it on every exit path.
    """

    def __init__(self, manager: "StreamManager", stdout: TextIO, stderr: TextIO, opened: List[TextIO]) -> None:
        self._manager = manager
        self.stdout = stdout
        self.stderr = stderr
        self._opened = opened
        self._released = False

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._manager._restore()
        failure: Optional[ShellIOError] = None
        for handle in self._opened:
            try:
                handle.close()
            except OSError as e:
                if failure is None:
                    failure = ShellIOError("closing", getattr(handle, 'name', '?'), e.strerror or str(e))
        self._opened = []
        if failure is not None:
            raise failure

    def __enter__(self) -> "StreamSession":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.release()


class StreamManager:
    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> None:
        self.original_stdout: TextIO = stdout if stdout is not None else sys.stdout
        self.original_stderr: TextIO = stderr if stderr is not None else sys.stderr
        self._current_stdout = self.original_stdout
        self._current_stderr = self.original_stderr

    def current_streams(self) -> Tuple[TextIO, TextIO]:
        return self._current_stdout, self._current_stderr

    def _restore(self) -> None:
        self._current_stdout = self.original_stdout
        self._current_stderr = self.original_stderr

    @staticmethod
    def _open_target(path: str, append: bool) -> TextIO:
        mode = 'a' if append else 'w'
        try:
            return open(path, mode, encoding='utf-8', buffering=1)
        except OSError as e:
            raise ShellIOError("opening", path, e.strerror or str(e)) from e

    def begin(self, output_file: str = "", error_file: str = "",
              output_append: bool = False, error_append: bool = False) -> StreamSession:
        """Open the requested targets and make them the current streams.

        If any open fails, handles already opened here are closed and the
        original streams restored before the ShellIOError propagates.
        """
        session = StreamSession(self, self.original_stdout, self.original_stderr, [])
        try:
            if output_file:
                session.stdout = self._open_target(output_file, output_append)
                session._opened.append(session.stdout)
                self._current_stdout = session.stdout
            if error_file:
                session.stderr = self._open_target(error_file, error_append)
                session._opened.append(session.stderr)
                self._current_stderr = session.stderr
        except ShellIOError:
            session.release()
            raise
        return session
