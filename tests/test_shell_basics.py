import io
import os
from pathlib import Path
from unittest import mock

import pytest  # type: ignore

from ops import ShellSession, execute_line


def run_line(line: str, session: ShellSession) -> int:
    return execute_line(line, session)


def out_of(session: ShellSession) -> str:
    return session.stdout.getvalue()


def err_of(session: ShellSession) -> str:
    return session.stderr.getvalue()


def assert_streams_restored(session: ShellSession) -> None:
    assert session.streams.current_streams() == (session.stdout, session.stderr)


def test_echo_builtin(session):
    assert run_line("echo hello world", session) == 0
    assert out_of(session) == "hello world\n"
    assert err_of(session) == ""


def test_quoted_arguments(session):
    run_line("echo 'a b' \"c d\" e", session)
    assert out_of(session) == "a b c d e\n"


def test_empty_line_does_nothing(session):
    assert run_line("", session) == 0
    assert run_line("    ", session) == 0
    assert out_of(session) == ""
    assert err_of(session) == ""


class TestRedirection:
    """Redirected turns write to files and leave the session streams intact."""

    def test_stdout_to_file(self, session, tmp_path):
        assert run_line("echo hello > out.txt", session) == 0
        assert (tmp_path / "out.txt").read_text() == "hello\n"
        assert out_of(session) == ""
        assert_streams_restored(session)

    def test_truncate_then_append(self, session, tmp_path):
        run_line("echo one > out.txt", session)
        run_line("echo two > out.txt", session)
        run_line("echo three >> out.txt", session)
        run_line("echo four 1>> out.txt", session)
        assert (tmp_path / "out.txt").read_text() == "two\nthree\nfour\n"

    def test_glued_operator_is_an_argument(self, session, tmp_path):
        run_line("echo hello>>out.txt", session)
        assert out_of(session) == "hello>>out.txt\n"
        assert not (tmp_path / "out.txt").exists()

    def test_quoted_operator_is_an_argument(self, session, tmp_path):
        run_line("echo \"hello > world\" foo", session)
        assert out_of(session) == "hello > world foo\n"
        assert not (tmp_path / "world").exists()

    def test_quoted_filename_with_spaces(self, session, tmp_path):
        run_line("echo data > 'my file.txt'", session)
        assert (tmp_path / "my file.txt").read_text() == "data\n"

    def test_command_not_found_goes_to_redirected_stderr(self, session, tmp_path):
        rc = run_line("nosuch-command-xyz 2> err.txt", session)
        assert rc == 127
        assert (tmp_path / "err.txt").read_text() == "nosuch-command-xyz: command not found\n"
        assert err_of(session) == ""

    def test_builtin_error_appends_to_stderr_file(self, session, tmp_path):
        run_line("cd 2>> err.txt", session)
        run_line("cd /nonexistent-dir-xyz 2>> err.txt", session)
        assert (tmp_path / "err.txt").read_text() == (
            "cd: missing argument\n"
            "cd: /nonexistent-dir-xyz: No such file or directory\n"
        )

    def test_stdout_and_stderr_on_one_line(self, session, tmp_path):
        rc = run_line("sh -c 'echo out; echo err >&2' > out.txt 2> err.txt", session)
        assert rc == 0
        assert (tmp_path / "out.txt").read_text() == "out\n"
        assert (tmp_path / "err.txt").read_text() == "err\n"
        assert out_of(session) == ""
        assert err_of(session) == ""

    def test_external_listing(self, session, tmp_path):
        (tmp_path / "marker.txt").write_text("x")
        assert run_line("ls > listing.txt", session) == 0
        assert "marker.txt" in (tmp_path / "listing.txt").read_text()

    def test_plain_line_opens_no_stream_session(self, session):
        with mock.patch.object(session.streams, "begin", wraps=session.streams.begin) as begin:
            run_line("echo plain", session)
            run_line("echo routed > out.txt", session)
        assert begin.call_count == 1
        assert out_of(session) == "plain\n"

    def test_only_redirection_runs_nothing(self, session, tmp_path):
        assert run_line("> out.txt", session) == 0
        assert out_of(session) == ""
        assert err_of(session) == ""
        assert not (tmp_path / "out.txt").exists()


class TestFailures:
    """Each failing turn writes exactly one stderr line and the shell carries on."""

    def test_missing_filename(self, session):
        assert run_line("echo hello >", session) == 2
        assert err_of(session) == "parse error: missing filename for redirection\n"
        assert out_of(session) == ""
        assert session.last_status == 2

    def test_unopenable_target(self, session):
        rc = run_line("echo hi > missing/dir/out.txt", session)
        assert rc == 1
        assert err_of(session) == "opening missing/dir/out.txt: No such file or directory\n"
        assert out_of(session) == ""
        assert_streams_restored(session)

    def test_second_target_fails_first_is_released(self, session, tmp_path):
        rc = run_line("echo hi > out.txt 2> missing/err.txt", session)
        assert rc == 1
        assert err_of(session) == "opening missing/err.txt: No such file or directory\n"
        # the stdout target was opened (and truncated) but nothing ran
        assert (tmp_path / "out.txt").read_text() == ""
        assert_streams_restored(session)

    def test_command_not_found(self, session):
        assert run_line("nosuch-command-xyz arg", session) == 127
        assert err_of(session) == "nosuch-command-xyz: command not found\n"

    def test_nonzero_exit_is_not_an_error(self, session):
        assert run_line("sh -c 'exit 4'", session) == 4
        assert err_of(session) == ""
        assert session.last_status == 4

    def test_exit_invalid_code_keeps_running(self, session):
        assert run_line("exit abc", session) == 1
        assert err_of(session) == "exit: invalid exit code: abc\n"
        assert run_line("echo still here", session) == 0

    def test_exit_terminates(self, session):
        with pytest.raises(SystemExit) as exc:
            run_line("exit 3", session)
        assert exc.value.code == 3

    def test_exit_inside_redirection_releases_streams(self, session, tmp_path):
        with pytest.raises(SystemExit):
            run_line("exit 0 > out.txt", session)
        assert_streams_restored(session)

    def test_handler_exception_still_releases(self, session, tmp_path):
        opened = []

        def boom(args, stdout, stderr):
            opened.append(stdout)
            raise RuntimeError("handler blew up")

        session.builtins.register("boom", boom)
        with pytest.raises(RuntimeError):
            run_line("boom > out.txt", session)
        assert opened[0].closed
        assert_streams_restored(session)


class TestBuiltinsThroughTurns:
    def test_cd_then_pwd(self, session, tmp_path):
        (tmp_path / "a").mkdir()
        assert run_line("cd a", session) == 0
        assert run_line("pwd > pwd.txt", session) == 0
        assert (tmp_path / "a" / "pwd.txt").read_text().strip() == os.getcwd()
        assert Path(os.getcwd()).name == "a"

    def test_cd_home(self, session, tmp_path):
        (tmp_path / "a").mkdir()
        run_line("cd a", session)
        run_line("cd ~", session)
        assert os.getcwd() == os.path.realpath(tmp_path)

    def test_type(self, session):
        run_line("type echo", session)
        run_line("type sh", session)
        run_line("type nosuch-command-xyz", session)
        lines = out_of(session).splitlines()
        assert lines[0] == "echo is a shell builtin"
        assert lines[1].startswith("sh is /")
        assert lines[2] == "nosuch-command-xyz: not found"

    def test_custom_finder_on_session(self, sandbox):
        session = ShellSession(stdin=io.StringIO(), stdout=io.StringIO(), stderr=io.StringIO(),
                               finder=lambda name: "")
        assert execute_line("sh -c true", session) == 127
        assert session.stderr.getvalue() == "sh: command not found\n"
