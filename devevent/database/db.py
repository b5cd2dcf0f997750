"""Database engine lifecycle and session helpers.

The ``ConnectionManager`` owns the single SQLAlchemy engine of the
process. The engine is created lazily on the first ``connect()`` call;
concurrent first callers wait on the same lock and share the result of
one attempt instead of opening several engines.
"""

import enum
import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Generator, Optional

from sqlalchemy import Engine, StaticPool, create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from devevent.core.config import settings
from devevent.core.errors import ConfigurationError, ConnectionError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ConnectionState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _engine_args(url: str) -> dict:
    parsed = make_url(url)
    args = {"echo": settings.sql_echo}

    if parsed.get_backend_name() == "sqlite":
        args["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            args["poolclass"] = StaticPool
    else:
        args.update({
            "pool_size": 3,
            "max_overflow": 4,
            "pool_recycle": 1800,
            "pool_pre_ping": True,
        })
    return args


def open_engine(url: str) -> Engine:
    """Create an engine for ``url`` and verify it with a round trip."""
    engine = create_engine(url, **_engine_args(url))
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return engine


class ConnectionManager:
    """Lazily establishes and caches one engine per process."""

    def __init__(self, url: str, *, connect: Callable[[str], Engine] = open_engine):
        if not url:
            raise ConfigurationError(
                "Please define the DATABASE_URL environment variable"
            )
        self._url = url
        self._connect = connect
        self._lock = threading.Lock()
        self._engine: Optional[Engine] = None
        self._state = ConnectionState.UNINITIALIZED
        self._session_factory = sessionmaker(autocommit=False, autoflush=False)

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def session_factory(self) -> sessionmaker:
        self.connect()
        return self._session_factory

    def connect(self) -> Engine:
        """Return the active engine, creating it on first use.

        A failed attempt is not cached: the state moves to ``FAILED`` and
        the next call starts a fresh attempt.

        Raises:
            ConnectionError: If the database cannot be reached.
        """
        engine = self._engine
        if engine is not None:
            return engine

        with self._lock:
            if self._engine is not None:
                return self._engine

            self._state = ConnectionState.CONNECTING
            logger.info("Opening database connection")
            try:
                engine = self._connect(self._url)
            except Exception as e:
                self._state = ConnectionState.FAILED
                logger.error(f"Database connection failed: {e}")
                raise ConnectionError(f"Failed to connect to database: {e}") from e

            self._session_factory.configure(bind=engine)
            self._engine = engine
            self._state = ConnectionState.CONNECTED
            logger.info("Database connection established")
            return engine

    def init_db(self) -> None:
        """Create any missing tables."""
        # Registers the models on Base.metadata
        from devevent.models import bookings, events  # noqa: F401

        Base.metadata.create_all(bind=self.connect())

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Transactional scope: commit on success, roll back on error."""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._state = ConnectionState.UNINITIALIZED


# Built at import so a missing DATABASE_URL fails at startup, not on first query
connection_manager = ConnectionManager(settings.database_url)


def get_db() -> Generator[Session, None, None]:
    db = connection_manager.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def storage_errors(db: Session, action: str) -> Generator[None, None, None]:
    """Report an unreachable or failing database as ConnectionError."""
    try:
        yield
    except OperationalError as e:
        db.rollback()
        raise ConnectionError(f"Database error while {action}: {e}") from e
