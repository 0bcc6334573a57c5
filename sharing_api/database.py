from sqlalchemy import Engine, create_engine, event, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from sharing_api.config import settings


def create_db_engine(url: str) -> Engine:
    """Create an engine for ``url``.

    SQLite engines take over transaction control from pysqlite, which
    otherwise defers BEGIN and breaks SAVEPOINT handling. An in-memory
    database only exists on its own connection, so it is pinned to a single
    shared connection; that setup is meant for the test suite.
    """
    db_url = make_url(url)
    if db_url.get_backend_name() != "sqlite":
        return create_engine(db_url)

    options = {"connect_args": {"check_same_thread": False}}
    if db_url.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    sqlite_engine = create_engine(db_url, **options)

    @event.listens_for(sqlite_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return sqlite_engine


engine = create_db_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine)


class Base(DeclarativeBase):
    pass
