import json
from pathlib import Path
import click
from .logic import exit_code_for, inspect_image

@click.group()
def main():
    pass

@main.command("image")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def image_cmd(path: Path):
    """Report the footer and payload layout of a built image."""
    result = inspect_image(path)
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    code = exit_code_for(result)
    if code:
        raise SystemExit(code)

if __name__ == "__main__":
    main()
