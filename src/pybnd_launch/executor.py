"""Executor adapter: load a ``.pyc`` unit and run it as ``__main__``.

The header length is read off the unit's own version tag instead of being
guessed, and the code only runs when that tag matches this interpreter.
"""
from __future__ import annotations

import builtins
import importlib.util
import marshal
import sys
import traceback
import types
from contextlib import contextmanager
from pathlib import Path

from pybnd_core.errors import ExecError

# Pyc header layouts, keyed by the version number in the first two magic bytes:
#   3.7+  (PEP 552): magic(4) | flags(4) | mtime(4) size(4)  or  source hash(8)
#   3.3-3.6:         magic(4) | mtime(4) | size(4)
#   older:           magic(4) | mtime(4)
PEP552_VERSION = 3390
SOURCE_SIZE_VERSION = 3210
PY3_VERSION_END = 20000  # Python 2 magics sit above this

KNOWN_FLAGS = 0b11  # hash-based, check_source


def header_length(magic: bytes) -> int:
    """Header size declared by a pyc magic number."""
    if len(magic) != 4 or magic[2:] != b"\r\n":
        raise ExecError(detail=f"not a pyc version tag: {magic.hex()}")
    version = int.from_bytes(magic[:2], "little")
    if PEP552_VERSION <= version < PY3_VERSION_END:
        return 16
    if SOURCE_SIZE_VERSION <= version < PY3_VERSION_END:
        return 12
    return 8


def load_code(data: bytes) -> types.CodeType:
    """Unmarshal the code object from a pyc image."""
    magic = data[:4]
    hlen = header_length(magic)
    if magic != importlib.util.MAGIC_NUMBER:
        raise ExecError(
            detail=f"payload built for another interpreter (magic {magic.hex()}, "
            f"this is {importlib.util.MAGIC_NUMBER.hex()})"
        )
    if len(data) < hlen:
        raise ExecError(detail=f"truncated pyc header ({len(data)} of {hlen} bytes)")

    flags = int.from_bytes(data[4:8], "little")
    if flags & ~KNOWN_FLAGS:
        raise ExecError(detail=f"unknown pyc flags {flags:#x}")

    try:
        code = marshal.loads(data[hlen:])
    except (EOFError, ValueError, TypeError) as e:
        raise ExecError(detail=f"cannot unmarshal payload: {e}") from e
    if not isinstance(code, types.CodeType):
        raise ExecError(detail=f"payload holds {type(code).__name__}, not code")
    return code


@contextmanager
def fresh_main(argv0: str):
    """Install a blank ``__main__`` module and argv for the duration of a run."""
    module = types.ModuleType("__main__")
    module.__dict__.update(
        __builtins__=builtins,
        __file__=argv0,
        __loader__=None,
        __spec__=None,
        __package__=None,
    )
    saved_main = sys.modules.get("__main__")
    saved_argv = sys.argv[:]
    sys.modules["__main__"] = module
    sys.argv[:] = [argv0]
    try:
        yield module.__dict__
    finally:
        for stream in (sys.stdout, sys.stderr):
            if stream is not None and not stream.closed:
                stream.flush()
        sys.argv[:] = saved_argv
        if saved_main is None:
            sys.modules.pop("__main__", None)
        else:
            sys.modules["__main__"] = saved_main


def exit_status(code: object) -> int:
    """Map a ``SystemExit`` code to a process status the way the interpreter does."""
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    print(code, file=sys.stderr)
    return 1


def run_pyc(pyc_path: Path, argv0: str) -> int:
    """Run the unit at ``pyc_path`` and return its exit status.

    ``sys.exit`` inside the unit is a normal outcome. Any other exception is
    reported with its traceback and raised as :class:`ExecError`.
    """
    try:
        data = Path(pyc_path).read_bytes()
    except OSError as e:
        raise ExecError(detail=f"{pyc_path}: {e}") from e

    code = load_code(data)
    with fresh_main(argv0) as namespace:
        try:
            exec(code, namespace)
        except SystemExit as e:
            return exit_status(e.code)
        except Exception as e:
            # Drop this frame so the traceback starts in the payload.
            traceback.print_exception(type(e), e, e.__traceback__.tb_next)
            raise ExecError(detail=f"{type(e).__name__}: {e}") from e
    return 0
