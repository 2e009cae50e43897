"""Launcher mode: find the payload appended to our own image and run it."""
from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pybnd_core.errors import BundleIOError
from pybnd_core.footer import PayloadSpan, span_from_file
from pybnd_core.locator import resolve_self_path
from pybnd_core.protocol import SCRATCH_PAYLOAD_PREFIX
from pybnd_core.streams import SourceReadError, copy_stream, create_scratch_file, remove_quietly

from .executor import run_pyc


def extract_payload(image: BinaryIO, span: PayloadSpan, scratch: Path | None = None) -> Path:
    """Copy the payload bytes of ``image`` into a fresh scratch file."""
    handle, scratch_path = create_scratch_file(SCRATCH_PAYLOAD_PREFIX, scratch)
    try:
        with handle:
            try:
                image.seek(span.payload_start)
            except OSError as e:
                raise SourceReadError(f"seek to {span.payload_start} failed: {e}") from e
            copy_stream(image, handle, length=span.payload_size)
    except SourceReadError as e:
        remove_quietly(scratch_path)
        raise BundleIOError("E_SELF_UNREADABLE", str(e)) from e
    except EOFError as e:
        remove_quietly(scratch_path)
        raise BundleIOError("E_SELF_UNREADABLE", f"image shrank while reading: {e}") from e
    except OSError as e:
        remove_quietly(scratch_path)
        raise BundleIOError("E_SCRATCH_CREATE", f"{scratch_path}: {e}") from e
    return scratch_path


def extract_and_run(self_path: Path | None = None, scratch: Path | None = None) -> int:
    """Extract the embedded payload of ``self_path`` and execute it.

    ``self_path`` defaults to the running executable. Returns the payload's
    exit status. The scratch copy is removed afterwards whatever the outcome.
    """
    if self_path is None:
        self_path = resolve_self_path()
    self_path = Path(self_path)

    try:
        image = open(self_path, "rb")
    except OSError as e:
        raise BundleIOError("E_SELF_UNREADABLE", f"{self_path}: {e}") from e
    with image:
        span = span_from_file(image, str(self_path))
        scratch_path = extract_payload(image, span, scratch)

    try:
        return run_pyc(scratch_path, argv0=str(self_path))
    finally:
        remove_quietly(scratch_path)
