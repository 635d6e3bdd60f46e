"""
The shared database session for the configured SQLite file.

Importing this module opens the database and checks its schema revision against the latest
migration, so it is imported lazily by the commands that need it.
"""

from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from venus_indexer.config import settings
from venus_indexer.database.operations import get_alembic_config, get_scoped_sqlite_session
from venus_indexer.logging import logger
from venus_indexer.version import __version__

db_session = get_scoped_sqlite_session(database_path=settings.database.path)

with db_session() as session:
    current_database_version = MigrationContext.configure(
        connection=db_session.connection()
    ).get_current_revision()
latest_database_version = ScriptDirectory.from_config(
    config=get_alembic_config()
).get_current_head()


if current_database_version is not None and current_database_version != latest_database_version:
    logger.warning(
        f"The current database revision ({current_database_version}) does not match the latest "
        f"({latest_database_version}) for venus_indexer version {__version__}!"
        "\n"
        "Database-related features may raise exceptions if you continue. Perform database "
        "migrations with 'venus-indexer database upgrade'."
    )
