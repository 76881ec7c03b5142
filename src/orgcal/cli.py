"""orgcal CLI - export outlines to iCalendar."""

import logging
import sys
from pathlib import Path

import click

from .adapters.json_outline import OutlineLoadError
from .config import CONFIG_FILE, load_config
from .workflows import export_combined, export_file, load_restriction


@click.group()
@click.version_option(package_name="orgcal")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Config file (default: {CONFIG_FILE})",
)
@click.pass_context
def main(ctx, debug: bool, config_path: Path | None):
    """orgcal - outline documents to iCalendar."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )
    ctx.obj = load_config(config_path)


@main.command("export")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write to file")
@click.pass_obj
def export_cmd(config, file: Path, output: Path | None):
    """Export one outline file."""
    try:
        text = export_file(config, file, output=output)
    except OutlineLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output:
        click.echo(f"Wrote {output}")
    else:
        click.echo(text, nl=False)


@main.command("combine")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write to file")
@click.option(
    "--restrict",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON mapping of document name to entry positions to include",
)
@click.option("--jobs", type=click.IntRange(min=1), default=None, help="Files transcoded in parallel")
@click.pass_obj
def combine_cmd(config, files: tuple[Path, ...], output: Path | None, restrict: Path | None, jobs: int | None):
    """Combine several outline files into one calendar."""
    try:
        restriction = load_restriction(restrict) if restrict else None
        text = export_combined(config, files, output=output, restriction=restriction, jobs=jobs)
    except OutlineLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output:
        click.echo(f"Wrote {output}")
    else:
        click.echo(text, nl=False)


if __name__ == "__main__":
    main()
