import click

from venus_indexer.cli import cli
from venus_indexer.config import settings
from venus_indexer.database.operations import (
    backup_sqlite_database,
    compact_sqlite_database,
    create_new_sqlite_database,
    upgrade_existing_sqlite_database,
)
from venus_indexer.exceptions.database import BackupExists
from venus_indexer.version import __version__


@cli.group()
def database() -> None:
    """
    Database commands
    """


@database.command("backup")
def database_backup() -> None:
    """
    Back up the database.
    """

    try:
        backup_path = backup_sqlite_database(settings.database.path)
    except BackupExists as exc:
        if not click.confirm(
            f"An existing backup was found at {exc.path}. Do you want to remove it and continue?",
            default=False,
        ):
            raise click.Abort from None
        exc.path.unlink()
        backup_path = backup_sqlite_database(settings.database.path)

    click.echo(f"Backed up the database to {backup_path}.")


@database.command("reset")
def database_reset() -> None:
    """
    Remove and recreate the database.
    """

    if not click.confirm(
        f"The existing database at {settings.database.path} will be removed and a new, empty database will be created using the schema included in venus_indexer version {__version__}. Do you want to proceed?",  # noqa: E501
        default=False,
    ):
        raise click.Abort

    settings.database.path.unlink(missing_ok=True)
    create_new_sqlite_database(settings.database.path)
    click.echo(f"Created a new database at {settings.database.path}.")


@database.command("upgrade")
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def database_upgrade(*, force: bool) -> None:
    """
    Upgrade the database to the latest schema.
    """

    from venus_indexer.database.connection import (
        current_database_version,
        latest_database_version,
    )

    if current_database_version == latest_database_version:
        click.echo(f"The database is already at the latest version ({latest_database_version}).")
        return

    if force or click.confirm(
        f"The database at {settings.database.path} will be upgraded from version {current_database_version} to {latest_database_version}. Do you want to proceed?",  # noqa:E501
        default=False,
    ):
        upgrade_existing_sqlite_database()
    else:
        raise click.Abort


@database.command("compact")
def database_compact() -> None:
    """
    Compact the database.
    """
    compact_sqlite_database(settings.database.path)
