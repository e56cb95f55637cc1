"""jestrun CLI - jestrun command."""

import click

from jestrun import __version__
from jestrun.cli.locations import locations_command
from jestrun.cli.run import all_command, at_command, file_command, rerun_command
from jestrun.cli.utils import user_errors
from jestrun.config.loader import load_config
from jestrun.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="jestrun")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """jestrun - run jest on a file, a project or the test at point."""
    ctx.ensure_object(dict)
    with user_errors():
        config = load_config()
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(file_command, name="file")
cli.add_command(all_command, name="all")
cli.add_command(at_command, name="at")
cli.add_command(rerun_command, name="rerun")
cli.add_command(locations_command, name="locations")


if __name__ == "__main__":
    cli()
