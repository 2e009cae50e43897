import subprocess
import sys
from pathlib import Path

from conftest import posix_only

pytestmark = posix_only


def run(cmd, cwd, env):
    return subprocess.run(cmd, cwd=cwd, env=env, check=False, capture_output=True, text=True)


def make_stub(tmp_path, env) -> Path:
    stub = tmp_path / "pybnd-stub"
    r = run([sys.executable, "-m", "pybnd_build.cli", str(stub)], cwd=tmp_path, env=env)
    assert r.returncode == 0, r.stderr + r.stdout
    return stub


def test_build_and_run(tmp_path, subprocess_env, hello_script):
    stub = make_stub(tmp_path, subprocess_env)
    out = tmp_path / "hello"

    r = run([str(stub), "--build", str(hello_script), str(out)], cwd=tmp_path, env=subprocess_env)
    assert r.returncode == 0, r.stderr + r.stdout
    assert "Built" in r.stdout

    r = run([str(out)], cwd=tmp_path, env=subprocess_env)
    assert r.returncode == 0, r.stderr
    assert r.stdout == "hello from payload\n"
    assert list((tmp_path / "scratch").iterdir()) == []


def test_bare_stub_has_no_payload(tmp_path, subprocess_env):
    stub = make_stub(tmp_path, subprocess_env)
    r = run([str(stub)], cwd=tmp_path, env=subprocess_env)
    assert r.returncode == 6
    assert "No embedded payload found in binary" in r.stderr
    assert "--build" in r.stderr


def test_exit_status_passes_through(tmp_path, subprocess_env, write_script):
    stub = make_stub(tmp_path, subprocess_env)
    script = write_script("quit.py", "import sys\nprint('bye')\nsys.exit(4)\n")
    out = tmp_path / "quit"

    assert run([str(stub), "--build", str(script), str(out)], cwd=tmp_path, env=subprocess_env).returncode == 0
    r = run([str(out)], cwd=tmp_path, env=subprocess_env)
    assert r.returncode == 4
    assert r.stdout == "bye\n"


def test_syntax_error_keeps_prior_build(tmp_path, subprocess_env, hello_script, write_script):
    stub = make_stub(tmp_path, subprocess_env)
    out = tmp_path / "hello"
    assert run([str(stub), "--build", str(hello_script), str(out)], cwd=tmp_path, env=subprocess_env).returncode == 0
    before = out.read_bytes()

    bad = write_script("bad.py", "print('unterminated\n")
    r = run([str(stub), "--build", str(bad), str(out)], cwd=tmp_path, env=subprocess_env)
    assert r.returncode == 10
    assert "SyntaxError" in r.stderr
    assert out.read_bytes() == before

    r = run([str(out)], cwd=tmp_path, env=subprocess_env)
    assert r.stdout == "hello from payload\n"


def test_built_image_refuses_to_build(tmp_path, subprocess_env, hello_script):
    stub = make_stub(tmp_path, subprocess_env)
    out = tmp_path / "hello"
    assert run([str(stub), "--build", str(hello_script), str(out)], cwd=tmp_path, env=subprocess_env).returncode == 0

    r = run([str(out), "--build", str(hello_script), str(tmp_path / "nested")], cwd=tmp_path, env=subprocess_env)
    assert r.returncode == 13
    assert not (tmp_path / "nested").exists()


def test_wrong_arity(tmp_path, subprocess_env):
    stub = make_stub(tmp_path, subprocess_env)
    r = run([str(stub), "--build", "only.py"], cwd=tmp_path, env=subprocess_env)
    assert r.returncode == 1
    assert "Usage" in r.stderr
