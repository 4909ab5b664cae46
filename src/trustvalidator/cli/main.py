"""TrustValidator CLI entry point."""

import logging
import os

import click


@click.group()
@click.option(
    "--log-level",
    default=lambda: os.environ.get("TRUSTVALIDATOR_LOG_LEVEL", "WARNING"),
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: $TRUSTVALIDATOR_LOG_LEVEL or WARNING).",
)
def cli(log_level: str):
    """TrustValidator: declarative form validation CLI."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommand groups
from trustvalidator.cli.forms_cmd import forms  # noqa: E402

cli.add_command(forms)
