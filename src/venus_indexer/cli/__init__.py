import click


@click.group()
@click.version_option(package_name="venus-indexer")
def cli() -> None: ...


from . import config, database, network  # noqa: F401, E402
