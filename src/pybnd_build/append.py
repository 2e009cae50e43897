"""Builder mode: clone the running stub and append a compiled payload."""
from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

import click

from pybnd_core.errors import BundleIOError, FormatError
from pybnd_core.footer import encode_footer, has_payload
from pybnd_core.locator import resolve_self_path
from pybnd_core.protocol import OUTPUT_MODE, SCRATCH_BUILD_PREFIX
from pybnd_core.streams import SourceReadError, copy_stream, create_scratch_file, remove_quietly

from .compiler import compile_script


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of a successful build.

    :ivar output_path: The written image.
    :ivar stub_size: Bytes cloned from the stub.
    :ivar payload_size: Bytes of compiled payload, as recorded in the footer.
    """

    output_path: Path
    stub_size: int
    payload_size: int


def append_payload(stub_path: Path, payload_path: Path, output_path: Path) -> BuildResult:
    """Write ``stub ++ payload ++ footer`` to ``output_path``.

    The image is assembled in a sibling temporary file and renamed into place
    only once complete, so ``output_path`` never holds a partial image. The
    stub is copied as opaque bytes.
    """
    output_path = Path(output_path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".part", dir=output_path.parent
        )
    except OSError as e:
        raise BundleIOError("E_APPEND", f"{output_path}: {e}") from e
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "wb") as out:
            try:
                stub = open(stub_path, "rb")
            except OSError as e:
                raise BundleIOError("E_SELF_UNREADABLE", f"{stub_path}: {e}") from e
            with stub:
                try:
                    stub_size = copy_stream(stub, out)
                except SourceReadError as e:
                    raise BundleIOError("E_SELF_UNREADABLE", f"{stub_path}: {e}") from e

            with open(payload_path, "rb") as payload:
                payload_size = copy_stream(payload, out)
            if payload_size == 0:
                raise FormatError("E_EMPTY_PAYLOAD", str(payload_path))

            # Footer goes last; its presence marks the image as complete.
            out.write(encode_footer(payload_size))
            out.flush()
            os.fsync(out.fileno())

        os.chmod(tmp_path, OUTPUT_MODE)
        os.replace(tmp_path, output_path)
    except OSError as e:
        remove_quietly(tmp_path)
        raise BundleIOError("E_APPEND", f"{output_path}: {e}") from e
    except BaseException:
        remove_quietly(tmp_path)
        raise

    return BuildResult(output_path=output_path, stub_size=stub_size, payload_size=payload_size)


def build(
    script_path: Path,
    output_path: Path,
    stub_path: Path | None = None,
    scratch: Path | None = None,
) -> BuildResult:
    """Compile ``script_path`` and produce a runnable image at ``output_path``.

    ``stub_path`` defaults to the running executable. A stub that already
    carries a payload is refused: cloning it would bury the old payload and
    footer inside the new image.
    """
    if stub_path is None:
        stub_path = resolve_self_path()
    stub_path = Path(stub_path)

    if has_payload(stub_path):
        raise FormatError("E_NESTED_BUILD", str(stub_path))

    handle, payload_path = create_scratch_file(SCRATCH_BUILD_PREFIX, scratch)
    handle.close()
    try:
        click.echo(f"[*] Compiling {script_path} -> {payload_path}")
        compile_script(Path(script_path), payload_path)

        click.echo(f"[*] Appending payload to stub and creating {output_path}")
        result = append_payload(stub_path, payload_path, Path(output_path))
    finally:
        remove_quietly(payload_path)

    click.echo(f"[+] Built {result.output_path} successfully")
    click.echo(f"  Stub: {result.stub_size} bytes")
    click.echo(f"  Payload: {result.payload_size} bytes")
    return result
