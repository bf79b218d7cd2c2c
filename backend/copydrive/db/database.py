"""Database connection and session management.

This module provides the SQLAlchemy engine, session factory and the
FastAPI dependency used by every endpoint that touches relational state.

Usage:
    from copydrive.db.database import get_db

    async def my_endpoint(db: Session = Depends(get_db)):
        result = db.execute(select(Workspace))
"""

from collections.abc import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from copydrive.settings import settings
from copydrive.utils import get_logger

logger = get_logger(__name__)


def _build_database_url() -> str:
    """Build database connection URL from settings.

    Returns:
        Database connection URL in SQLAlchemy format
    """
    url = settings.get_database_url_auto()

    if url.startswith("mysql://"):
        url = url.replace("mysql://", "mysql+pymysql://", 1)

    return url


def build_engine(database_url: str) -> Engine:
    """Create an engine with dialect-specific pooling.

    In-memory SQLite uses a StaticPool so every session (and every thread
    of the test client) sees the same database.
    """
    is_sqlite = database_url.startswith("sqlite")
    engine_kwargs: dict = {
        "echo": False,
    }

    if is_sqlite:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url:
            engine_kwargs["poolclass"] = StaticPool
        logger.info(f"Using SQLite database: {database_url}")
    else:
        engine_kwargs.update(
            {
                "pool_size": settings.mysql_pool_size,
                "max_overflow": settings.mysql_max_overflow,
                "pool_pre_ping": settings.mysql_pool_pre_ping,
                "pool_recycle": 3600,
            }
        )
        logger.info(f"Using database: {database_url.split('@')[1] if '@' in database_url else 'unknown'}")

    new_engine = create_engine(database_url, **engine_kwargs)

    if database_url.startswith("mysql"):

        @event.listens_for(new_engine, "connect")
        def set_connection_timeout(dbapi_connection, connection_record):
            """Set connection timeout for MySQL."""
            cursor = dbapi_connection.cursor()
            cursor.execute("SET SESSION wait_timeout = 28800")  # 8 hours
            cursor.close()

    return new_engine


engine: Engine = build_engine(_build_database_url())

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """Get database session for dependency injection.

    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_connection() -> bool:
    """Check if database connection is working."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False


def init_db() -> None:
    """Create tables if they do not exist.

    Called during application startup.
    """
    from copydrive.db.models import Base

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def close_db() -> None:
    """Close database connections on shutdown."""
    engine.dispose()
    logger.info("Database connections closed")
