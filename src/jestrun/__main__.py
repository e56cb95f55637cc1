"""Allow ``python -m jestrun``."""

from jestrun.cli.main import cli

cli()
