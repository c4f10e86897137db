"""Engine, session and schema management shared by all storefront contexts."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from shared.config import load_settings

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    pass


_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None
_read_session_factory: sessionmaker[Session] | None = None


def _serialize_sqlite_writes(engine: Engine) -> None:
    """Start SQLite write transactions with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first write, so two transactions can both
    read a stock level before either takes the write lock. Taking the lock up
    front makes the read-check-write sequence of a checkout linearizable.
    Connections checked out with the ``read_only`` execution option begin a
    plain deferred transaction instead, and WAL journaling lets them read while
    a writer holds the lock.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn):
        if conn.get_execution_options().get("read_only"):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")


def configure(database_url: str | None = None, *, echo: bool | None = None) -> Engine:
    """Create the engine and session factory used by `session_scope`."""
    global _engine, _session_factory, _read_session_factory

    settings = load_settings()
    url = database_url or settings.database_url
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": 30}

    if _engine is not None:
        _engine.dispose()

    _engine = create_engine(
        url,
        echo=settings.echo_sql if echo is None else echo,
        connect_args=connect_args,
    )
    if _engine.dialect.name == "sqlite":
        _serialize_sqlite_writes(_engine)

    _session_factory = sessionmaker(_engine, expire_on_commit=False)
    _read_session_factory = sessionmaker(_engine.execution_options(read_only=True), expire_on_commit=False)
    logger.debug("Database configured", url=_engine.url.render_as_string(hide_password=True))
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        return configure()
    return _engine


@contextmanager
def session_scope(read_only: bool = False) -> Iterator[Session]:
    """Run the enclosed block as one transaction: commit on success, roll back on error.

    `read_only` scopes never take the SQLite write lock, so they do not queue
    behind checkouts or cart changes. Use them only for blocks that do not write.
    """
    if _session_factory is None:
        configure()
    factory = _read_session_factory if read_only else _session_factory
    with factory.begin() as session:
        yield session


def _load_models() -> None:
    # Importing the model modules registers their tables on Base.metadata
    import inventory.stock.product  # noqa: F401
    import ordering.cart.cart  # noqa: F401
    import ordering.order.order  # noqa: F401


def setup_db(engine: Engine | None = None) -> None:
    """Create all storefront tables."""
    _load_models()
    Base.metadata.create_all(engine or get_engine())


def drop_db(engine: Engine | None = None) -> None:
    """Drop all storefront tables."""
    _load_models()
    Base.metadata.drop_all(engine or get_engine())


def dispose() -> None:
    global _engine, _session_factory, _read_session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
    _read_session_factory = None
