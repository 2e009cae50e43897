"""pybnd - launcher stub generator."""
from __future__ import annotations

from pathlib import Path

import click

from pybnd_core.errors import BundleError

from .stub import write_stub


@click.command()
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--python",
    "python",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Interpreter the stub execs (default: the current one)",
)
def main(out: Path, python: Path | None) -> None:
    """Write a bare launcher stub to OUT."""
    try:
        path = write_stub(out, str(python) if python else None)
    except BundleError as e:
        click.echo(f"FATAL: {e}", err=True)
        raise SystemExit(e.exit_code)
    click.echo(f"PASS: Stub written at {path}")
    click.echo(f"  Build with: {path} --build <script.py> <out_binary>")


if __name__ == "__main__":
    main()
