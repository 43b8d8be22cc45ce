#!/usr/bin/env python3

# Entry of tinysh

from __future__ import annotations

import argparse
import os
import sys
from typing import Optional

try:
    import readline  # type: ignore
except Exception:  # pragma: no cover - fallback when readline unavailable
    readline = None

READLINE_ACTIVE = bool(readline)

PROMPT = "$ "
INTERRUPTED_STATUS = 130

from ops import ShellSession, execute_line  # local module in the same folder


def setup_readline() -> None:
    if not READLINE_ACTIVE:
        return
    try:
        readline.parse_and_bind("set editing-mode emacs")
        readline.parse_and_bind("Control-l: clear-screen")
    except Exception:
        pass


def repl(session: Optional[ShellSession] = None, prompt: str = PROMPT) -> int:
    """Read lines until EOF, running each one as a turn.

    Returns the status of the last turn, which becomes the process exit code.
    """
    if session is None:
        session = ShellSession()
    setup_readline()

    while True:
        try:
            line = input(prompt)
        except EOFError:
            # Ctrl-D -> behave like an explicit exit
            session.stdout.write("exit\n")
            session.stdout.flush()
            break
        except KeyboardInterrupt:
            # Ctrl-C at prompt -> new line and continue
            session.stdout.write("\n")
            session.stdout.flush()
            continue

        if line.strip() == "":
            continue

        try:
            execute_line(line, session)
        except KeyboardInterrupt:
            session.stdout.write("\n")
            session.stdout.flush()
            session.last_status = INTERRUPTED_STATUS
        except Exception as e:
            session.report(f"tinysh: error: {e}")
            session.last_status = 1

    return session.last_status


def parse_args(args=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="tinysh - a small interactive command interpreter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tinysh                          # interactive prompt
  tinysh -c 'echo hi > out.txt'   # run one line and exit with its status
  tinysh --prompt '> '            # custom prompt (or set TINYSH_PROMPT)
"""
    )

    parser.add_argument(
        "--command", "-c",
        metavar="LINE",
        help="Run a single command line and exit with its status"
    )
    parser.add_argument(
        "--prompt",
        default=os.environ.get("TINYSH_PROMPT", PROMPT),
        help="Prompt shown before each line (default: %(default)r)"
    )

    return parser.parse_args(args)


def main(args=None) -> None:
    opts = parse_args(args)
    session = ShellSession()
    if opts.command is not None:
        sys.exit(execute_line(opts.command, session))
    sys.exit(repl(session, prompt=opts.prompt))


if __name__ == "__main__":
    main()
