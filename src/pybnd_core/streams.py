"""Bounded-buffer stream copies and scratch file management."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import BinaryIO
from warnings import warn

from .errors import BundleIOError
from .protocol import CHUNK_SIZE, SCRATCH_SUFFIX, TMPDIR_ENV


class SourceReadError(OSError):
    """Reading the source side of a stream copy failed."""


def copy_stream(
    src: BinaryIO,
    dst: BinaryIO,
    length: int | None = None,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    """Copy ``src`` into ``dst`` and return the number of bytes moved.

    With ``length`` set, exactly that many bytes are copied and a short source
    raises :class:`EOFError`. Otherwise the copy runs to end of stream.
    Read failures surface as :class:`SourceReadError` so callers can tell
    them apart from write failures on ``dst``.
    Never holds more than ``chunk_size`` bytes in memory.
    """
    copied = 0
    while length is None or copied < length:
        want = chunk_size if length is None else min(chunk_size, length - copied)
        try:
            chunk = src.read(want)
        except OSError as e:
            raise SourceReadError(f"read failed after {copied} bytes: {e}") from e
        if not chunk:
            if length is not None:
                raise EOFError(f"stream ended after {copied} of {length} bytes")
            break
        dst.write(chunk)
        copied += len(chunk)
    return copied


def scratch_dir() -> Path:
    """Directory for scratch payload files (``PYBND_TMPDIR`` wins)."""
    override = os.environ.get(TMPDIR_ENV)
    if override:
        return Path(override)
    return Path(tempfile.gettempdir())


def create_scratch_file(prefix: str, directory: Path | None = None) -> tuple[BinaryIO, Path]:
    """Create and open a uniquely named scratch file.

    The name carries the pid plus a random component and the file is created
    exclusively, so concurrent invocations never share one.
    """
    directory = Path(directory) if directory is not None else scratch_dir()
    try:
        fd, name = tempfile.mkstemp(prefix=f"{prefix}{os.getpid()}-", suffix=SCRATCH_SUFFIX, dir=directory)
    except OSError as e:
        raise BundleIOError("E_SCRATCH_CREATE", f"{directory}: {e}") from e
    return os.fdopen(fd, "wb"), Path(name)


def remove_quietly(path: Path) -> bool:
    """Best-effort unlink; a failure is reported as a warning, never raised."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        return True
    except OSError as e:
        warn(f"Could not remove scratch file {path}: {e}")
        return False
    return True
