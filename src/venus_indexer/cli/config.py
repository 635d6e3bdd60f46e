import json

import click
import tomlkit

from venus_indexer.cli import cli
from venus_indexer.config import CONFIG_FILE, settings


@cli.group()
def config() -> None:
    """
    Configuration commands
    """


@config.command("show")
@click.option(
    "--json",
    "output_format",
    flag_value="json",
    help="Show the configuration as JSON.",
)
@click.option(
    "--toml",
    "output_format",
    flag_value="toml",
    default=True,
    help="Show the configuration as TOML (default).",
)
def config_show(output_format: str) -> None:
    """
    Show the active configuration.
    """

    config_values = settings.model_dump(mode="json", exclude_none=True)
    if output_format == "json":
        click.echo(json.dumps(config_values, indent=2))
    else:
        click.echo(f"# {CONFIG_FILE}")
        click.echo(tomlkit.dumps(config_values))
