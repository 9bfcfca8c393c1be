"""Command line entry points for RecipeFinder utilities."""

from typer import Option, Typer

from ..configuration.cli import config_app
from ..logging_config import configure_logging
from .lookup import lookup_app
from .suggest import suggest_command
from .usage import usage_app


cli = Typer(help="RecipeFinder command line tools")


@cli.callback()
def main(
    verbose: bool = Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging("DEBUG" if verbose else None, force=verbose)


cli.add_typer(lookup_app, name="lookup")
cli.add_typer(usage_app, name="usage")
cli.add_typer(config_app, name="config")
cli.command("suggest")(suggest_command)

__all__ = ["cli", "lookup_app", "usage_app", "config_app", "suggest_command"]
