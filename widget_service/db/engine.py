"""
Database engine construction from resolved configuration.

**Conceptual**: AppConfig carries the host, port, user and password; this
module turns them into a SQLAlchemy URL and a pooled Engine. Nothing here
reads the environment: callers pass the AppConfig they resolved at startup.

**Connection conventions**:
  - Driver: PostgreSQL via psycopg2.
  - Every new pooled connection runs SET TIME ZONE 'UTC' so timestamps
    round-trip without local-time surprises.
  - Transactions are explicit (see transactions.py); the engine never
    autocommits.
  - pool_pre_ping discards connections the server has closed.
"""

from sqlalchemy import URL, create_engine, event
from sqlalchemy.engine import Engine

from widget_service.config.settings import AppConfig

DATABASE_NAME = "ktor-demo"
DRIVER_NAME = "postgresql+psycopg2"
CONNECTION_INIT_SQL = "SET TIME ZONE 'UTC'"


def database_url(config: AppConfig, database: str = DATABASE_NAME) -> URL:
    """
    Build the connection URL for the configured database.

    URL.create escapes the password, so characters like '@' or '/' are safe.

    Args:
        config: Resolved configuration (db_ip, db_port, db_user, db_password).
        database: Database name on the server.

    Returns:
        sqlalchemy.URL for DRIVER_NAME.
    """
    return URL.create(
        DRIVER_NAME,
        username=config.db_user,
        password=config.db_password,
        host=config.db_ip,
        port=config.db_port,
        database=database,
    )


def build_engine(config: AppConfig, database: str = DATABASE_NAME, **engine_kwargs) -> Engine:
    """
    Create a pooled Engine for the configured database.

    Connections are opened lazily, so this succeeds even when the database
    is not reachable yet.

    Args:
        config: Resolved configuration.
        database: Database name on the server.
        **engine_kwargs: Extra create_engine() options (pool_size, echo, ...).

    Returns:
        Engine with the UTC connect hook installed.
    """
    engine_kwargs.setdefault("pool_pre_ping", True)
    engine = create_engine(database_url(config, database), **engine_kwargs)
    event.listen(engine, "connect", _init_connection)
    return engine


def _init_connection(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute(CONNECTION_INIT_SQL)
    finally:
        cursor.close()
    # psycopg2 opens a transaction for the SET; end it before the pool hands the connection out
    dbapi_connection.commit()
