import os
import sys
from pathlib import Path

import pytest

from pybnd_build.append import build
from pybnd_core.protocol import SELF_ENV, TMPDIR_ENV

REPO = Path(__file__).resolve().parents[1]

# Opaque bytes standing in for a launcher executable.
FAKE_STUB = b"#!/bin/sh\necho stub\nexit 0\n" + bytes(range(256)) * 40


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Every test gets its own scratch directory and no inherited stub path."""
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setenv(TMPDIR_ENV, str(scratch))
    monkeypatch.delenv(SELF_ENV, raising=False)
    return scratch


@pytest.fixture
def scratch(tmp_path):
    return tmp_path / "scratch"


@pytest.fixture
def fake_stub(tmp_path):
    p = tmp_path / "stub.bin"
    p.write_bytes(FAKE_STUB)
    return p


@pytest.fixture
def write_script(tmp_path):
    def _write(name: str, body: str) -> Path:
        p = tmp_path / name
        p.write_text(body, encoding="utf-8")
        return p
    return _write


@pytest.fixture
def hello_script(write_script):
    return write_script("hello.py", 'print("hello from payload")\n')


@pytest.fixture
def built_image(tmp_path, fake_stub, hello_script):
    out = tmp_path / "hello.bin"
    build(hello_script, out, stub_path=fake_stub)
    return out


@pytest.fixture
def subprocess_env(tmp_path):
    env = dict(os.environ)
    src = str(REPO / "src")
    env["PYTHONPATH"] = src + (os.pathsep + env["PYTHONPATH"] if env.get("PYTHONPATH") else "")
    env[TMPDIR_ENV] = str(tmp_path / "scratch")
    env.pop(SELF_ENV, None)
    return env


posix_only = pytest.mark.skipif(sys.platform == "win32", reason="launcher stubs are POSIX shell scripts")
