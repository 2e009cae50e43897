"""Compiler adapter: Python source to a loadable ``.pyc`` unit."""
from __future__ import annotations

import py_compile
from pathlib import Path

from pybnd_core.errors import CompileError


def compile_script(script_path: Path, cfile: Path) -> Path:
    """Compile ``script_path`` into ``cfile`` and return ``cfile``.

    Unchecked-hash pycs carry no source timestamp, so the same script always
    yields the same payload bytes. Compiler diagnostics are passed through
    verbatim.
    """
    script_path = Path(script_path)
    try:
        py_compile.compile(
            str(script_path),
            cfile=str(cfile),
            dfile=script_path.name,
            doraise=True,
            invalidation_mode=py_compile.PycInvalidationMode.UNCHECKED_HASH,
        )
    except py_compile.PyCompileError as e:
        raise CompileError(detail=e.msg.strip()) from e
    except OSError as e:
        raise CompileError(detail=f"{script_path}: {e}") from e
    return Path(cfile)
