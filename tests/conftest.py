import io
import os
import sys
from pathlib import Path
import pytest

# Ensure we can import modules from src/ (collection imports happen before fixtures run)
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture()
def sandbox(tmp_path, monkeypatch):
    # Work in an isolated temp directory
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("PATH", os.environ.get("PATH", "/usr/bin:/bin"))
    # cd rewrites PWD; let monkeypatch put it back
    monkeypatch.setenv("PWD", str(tmp_path))
    monkeypatch.delenv("TINYSH_PROMPT", raising=False)
    return tmp_path


@pytest.fixture()
def session(sandbox):
    from ops import ShellSession
    return ShellSession(stdin=io.StringIO(""), stdout=io.StringIO(), stderr=io.StringIO())
