"""pybnd - single entry point for builder and launcher modes.

    prog --build <script.py> <out_binary>   compile and append to a copy of prog
    prog                                    run the payload appended to prog
"""
from __future__ import annotations

import os
from pathlib import Path

import click

from pybnd_build.append import build
from pybnd_core.const import EXIT_CODES
from pybnd_core.errors import BundleError
from pybnd_core.locator import resolve_self_path
from pybnd_core.protocol import SELF_ENV
from pybnd_launch.extract import extract_and_run

USAGE = "Usage to build: {prog} --build <script.py> <out_binary>"


def _prog_name() -> str:
    stub = os.environ.get(SELF_ENV)
    return os.path.basename(stub) if stub else "pybnd"


def _fatal(err: BundleError) -> int:
    # Single-line reason; no stack traces in build pipelines.
    click.echo(f"FATAL: {err}", err=True)
    return err.exit_code


def _launch(prog: str) -> int:
    try:
        self_path = resolve_self_path()
        # The payload should not inherit stub plumbing.
        os.environ.pop(SELF_ENV, None)
        return extract_and_run(self_path)
    except BundleError as e:
        code = _fatal(e)
        click.echo(f"Bootloader: no embedded payload or run failed (code {code})", err=True)
        click.echo(USAGE.format(prog=prog), err=True)
        return code


@click.command(add_help_option=False)
@click.option(
    "--build",
    "build_args",
    nargs=2,
    multiple=True,
    type=click.Path(dir_okay=False, path_type=Path),
    metavar="SCRIPT OUTPUT",
    help="Compile SCRIPT and write a self-contained executable to OUTPUT",
)
@click.pass_context
def cli(ctx: click.Context, build_args: tuple[tuple[Path, Path], ...]) -> int:
    """Build a self-extracting executable, or run the one appended to this file."""
    prog = ctx.find_root().info_name or "pybnd"
    if not build_args:
        return _launch(prog)
    if len(build_args) > 1:
        raise click.UsageError("--build may be given only once", ctx=ctx)

    script, output = build_args[0]
    try:
        build(script, output)
    except BundleError as e:
        return _fatal(e)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the dispatcher and return the process exit status.

    Click usage errors are folded into the stable ``E_USAGE`` code instead of
    click's own exit status.
    """
    prog = _prog_name()
    try:
        rv = cli.main(args=argv, prog_name=prog, standalone_mode=False)
    except click.UsageError as e:
        click.echo(f"Error: {e.format_message()}", err=True)
        click.echo(USAGE.format(prog=prog), err=True)
        return EXIT_CODES["E_USAGE"]
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 130
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
