import os
import sys

import pytest

from pybnd_core import locator
from pybnd_core.errors import LocatorError
from pybnd_core.protocol import SELF_ENV


def test_stub_env_resolves_to_real_file(monkeypatch, fake_stub):
    monkeypatch.setenv(SELF_ENV, str(fake_stub))
    assert locator.resolve_self_path() == fake_stub.resolve()


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks")
def test_symlink_is_followed(monkeypatch, tmp_path, fake_stub):
    link = tmp_path / "link"
    link.symlink_to(fake_stub)
    monkeypatch.setenv(SELF_ENV, str(link))
    assert locator.resolve_self_path() == fake_stub.resolve()


def test_relative_env_path(monkeypatch, fake_stub):
    monkeypatch.chdir(fake_stub.parent)
    monkeypatch.setenv(SELF_ENV, fake_stub.name)
    assert locator.resolve_self_path() == fake_stub.resolve()


def test_deleted_binary(monkeypatch, tmp_path):
    monkeypatch.setenv(SELF_ENV, str(tmp_path / "gone"))
    with pytest.raises(LocatorError) as exc:
        locator.resolve_self_path()
    assert exc.value.exit_code == 2


def test_directory_is_not_an_image(monkeypatch, tmp_path):
    monkeypatch.setenv(SELF_ENV, str(tmp_path))
    with pytest.raises(LocatorError):
        locator.resolve_self_path()


def test_plain_interpreter_has_no_image(monkeypatch):
    monkeypatch.delattr(sys, "frozen", raising=False)
    with pytest.raises(LocatorError) as exc:
        locator.resolve_self_path()
    assert SELF_ENV in str(exc.value)


def test_frozen_uses_executable(monkeypatch, fake_stub):
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "platform", "darwin")
    monkeypatch.setattr(sys, "executable", str(fake_stub))
    assert locator.resolve_self_path() == fake_stub.resolve()


@pytest.mark.skipif(not os.path.exists("/proc/self/exe"), reason="needs procfs")
def test_frozen_on_linux_reads_proc(monkeypatch):
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "platform", "linux")
    assert locator.resolve_self_path() == locator.Path(os.readlink("/proc/self/exe")).resolve()


def test_frozen_deleted_image(monkeypatch):
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setattr(locator.os.path, "lexists", lambda p: True)
    monkeypatch.setattr(locator.os, "readlink", lambda p: "/opt/app/bin (deleted)")
    with pytest.raises(LocatorError) as exc:
        locator.resolve_self_path()
    assert "deleted" in str(exc.value)
