"""Launcher stub writer.

A launcher stub is a POSIX shell preamble that hands control to the ``pybnd``
dispatcher, exporting its own path so the dispatcher can find the image. The
shell replaces itself on ``exec`` before reading past the preamble, so payload
bytes appended after it are never interpreted.
"""
from __future__ import annotations

import os
import shlex
import sys
from pathlib import Path

from pybnd_core.errors import BundleIOError
from pybnd_core.protocol import OUTPUT_MODE, SELF_ENV

STUB_TEMPLATE = """#!/bin/sh
{env}="$0"
export {env}
exec {python} -m pybnd "$@"
exit 127
"""


def render_stub(python: str | None = None) -> bytes:
    python = python or sys.executable
    return STUB_TEMPLATE.format(env=SELF_ENV, python=shlex.quote(str(python))).encode("utf-8")


def write_stub(output_path: Path, python: str | None = None) -> Path:
    """Write a bare stub for ``python`` (default: this interpreter)."""
    output_path = Path(output_path)
    try:
        output_path.write_bytes(render_stub(python))
        os.chmod(output_path, OUTPUT_MODE)
    except OSError as e:
        raise BundleIOError("E_APPEND", f"{output_path}: {e}") from e
    return output_path
