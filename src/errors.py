"""Error types raised while parsing and running a line in tinysh.

Every error derives from ShellError and carries a short ``kind`` tag so
callers can tell the categories apart without isinstance ladders.
"""
from __future__ import annotations


class ShellError(Exception):
    """Base class for all shell-level failures."""

    kind = "shell_error"


class ParseError(ShellError):
    kind = "parse_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"parse error: {self.message}"


class ShellIOError(ShellError):
    """A file could not be opened or read (named to avoid the builtin IOError alias)."""

    kind = "io_error"

    def __init__(self, operation: str, target: str, reason: str) -> None:
        super().__init__(operation, target, reason)
        self.operation = operation
        self.target = target
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.operation} {self.target}: {self.reason}"


class CommandNotFoundError(ShellError):
    kind = "command_not_found"

    def __init__(self, command: str) -> None:
        super().__init__(command)
        self.command = command

    def __str__(self) -> str:
        return f"{self.command}: command not found"


class CommandFailedError(ShellError):
    """An external command could not be started at all."""

    kind = "command_failed"

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(command, reason)
        self.command = command
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.command}: {self.reason}"


class BuiltinError(ShellError):
    """Failure reported by a builtin; the message is printed as-is."""

    kind = "builtin_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message
