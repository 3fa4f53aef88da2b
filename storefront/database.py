import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront.config import Settings

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()

LOCAL_HOSTS = ("localhost", "127.0.0.1")


class StoreUnavailableError(Exception):
    """Exception raised when data access is attempted while the store is not ready."""
    pass


def normalize_database_url(raw_url: str) -> URL:
    """
    Parse a connection string, accepting the ``postgres://`` scheme that
    hosting platforms hand out.
    """
    if raw_url.startswith("postgres://"):
        raw_url = "postgresql://" + raw_url[len("postgres://"):]
    return make_url(raw_url)


def uses_ssl(url: URL) -> bool:
    """SSL is required for every Postgres server that is not local."""
    if not url.get_backend_name() == "postgresql":
        return False
    return bool(url.host) and url.host not in LOCAL_HOSTS


def mask_url(raw_url: Optional[str]) -> str:
    """Short, credential-free preview of a connection string for logs."""
    if not raw_url:
        return "none"
    try:
        return normalize_database_url(raw_url).render_as_string(hide_password=True)
    except ArgumentError:
        return raw_url[:12] + "..."


def build_connect_args(url: URL, settings: Settings) -> dict:
    """
    DBAPI connect arguments for a server database.

    SSL is requested for remote Postgres hosts unless the URL already chooses
    an ``sslmode`` itself.
    """
    connect_args = {"connect_timeout": settings.DB_CONNECT_TIMEOUT}
    if uses_ssl(url) and "sslmode" not in url.query:
        # Managed databases use certificates we do not verify
        connect_args["sslmode"] = "require"
    return connect_args


def build_engine(raw_url: str, settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine (and its connection pool) for a connection string.

    Server databases get a bounded QueuePool: at most
    ``DB_POOL_SIZE + DB_MAX_OVERFLOW`` connections, with borrowers queued for
    up to ``DB_POOL_TIMEOUT`` seconds. QueuePool has no idle timeout;
    ``pool_pre_ping`` replaces connections the server closed while idle, and
    ``DB_POOL_RECYCLE`` bounds connection age. SQLite keeps SQLAlchemy's defaults.
    """
    url = normalize_database_url(raw_url)

    if url.get_backend_name() == "sqlite":
        return create_engine(url)

    connect_args = build_connect_args(url, settings)

    logger.info(
        f"Pool config: ssl={connect_args.get('sslmode', url.query.get('sslmode'))}, "
        f"max_connections={settings.DB_POOL_SIZE + settings.DB_MAX_OVERFLOW}"
    )

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


class StoreHandle:
    """
    Owns the connection pool and the readiness flag of the data store.

    The handle is built once at startup and handed to request handlers through
    ``get_store``. Until ``mark_ready`` is called every ``session()`` request
    fails fast with ``StoreUnavailableError`` instead of touching the pool.
    """

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine
        self._session_factory = (
            sessionmaker(autocommit=False, autoflush=False, bind=engine)
            if engine is not None else None
        )
        self._available = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoreHandle":
        """Build a handle from configuration; an unusable URL yields no engine."""
        logger.info(f"Database connection: {mask_url(settings.DATABASE_URL)}")

        if not settings.DATABASE_URL:
            return cls()

        try:
            engine = build_engine(settings.DATABASE_URL, settings)
        except (ArgumentError, ImportError) as e:
            logger.error(f"Failed to create database pool: {e}")
            return cls()

        return cls(engine)

    @property
    def configured(self) -> bool:
        return self.engine is not None

    @property
    def available(self) -> bool:
        return self._available

    def mark_ready(self) -> None:
        self._available = True

    def mark_unavailable(self) -> None:
        self._available = False

    def session(self) -> Session:
        """
        Open a new ORM session.

        Raises:
            StoreUnavailableError: If the store has not been initialized
        """
        if not self._available or self._session_factory is None:
            raise StoreUnavailableError("Database not available")
        return self._session_factory()

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def get_store(request: Request) -> StoreHandle:
    """Dependency returning the store handle attached to the application."""
    return request.app.state.store


def get_db(store: StoreHandle = Depends(get_store)):
    """
    Dependency to get database session.
    Yields a database session and closes it after use.
    """
    db = store.session()
    try:
        yield db
    finally:
        db.close()
