"""jacocogen CLI."""

import click

from jacocogen.cli.report import report_command
from jacocogen.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="jacocogen")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """jacocogen - JaCoCo XML coverage reports from Istanbul coverage data."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(report_command, name="report")


if __name__ == "__main__":
    cli()
