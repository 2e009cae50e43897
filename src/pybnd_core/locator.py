"""Resolve the file backing the running program.

The builder clones these bytes, and the launcher reads its payload from them,
so the result must name the actual image on disk with symlinks resolved.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

from .errors import LocatorError
from .protocol import SELF_ENV

_PROC_SELF_EXE = "/proc/self/exe"


def _frozen_image() -> str:
    if sys.platform.startswith("linux") and os.path.lexists(_PROC_SELF_EXE):
        try:
            target = os.readlink(_PROC_SELF_EXE)
        except OSError as e:
            raise LocatorError(detail=f"{_PROC_SELF_EXE}: {e}") from e
        # The kernel keeps the link alive after unlink and tags it.
        if target.endswith(" (deleted)"):
            raise LocatorError(detail=f"executable was deleted: {target[:-10]}")
        return target
    if not sys.executable:
        raise LocatorError(detail="interpreter did not report its executable")
    return sys.executable


def resolve_self_path() -> Path:
    """Return the absolute path of the running executable image.

    Launcher stubs export their own path in ``PYBND_SELF``; frozen
    executables are the interpreter binary itself. A plain ``python -m pybnd``
    run has no image to clone or read, which is a :class:`LocatorError`.
    """
    raw = os.environ.get(SELF_ENV)
    if not raw:
        if not getattr(sys, "frozen", False):
            raise LocatorError(
                detail=f"not running from a launcher stub ({SELF_ENV} unset) or a frozen executable"
            )
        raw = _frozen_image()

    try:
        path = Path(raw).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise LocatorError(detail=f"{raw}: {e}") from e

    if not path.is_file():
        raise LocatorError(detail=f"{path} is not a regular file")
    return path
