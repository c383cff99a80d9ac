import structlog
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from app.config import settings
from app.core.exceptions import StoreException

logger = structlog.get_logger(__name__)

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    # SQLite-specific settings
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    **({} if _is_sqlite else {"pool_size": settings.DB_POOL_SIZE, "max_overflow": settings.DB_MAX_OVERFLOW}),
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.

    Usage:
        @app.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_raise(db: Session, action: str) -> None:
    """
    Commit the session, translating persistence failures.

    On failure the session is rolled back so it stays usable for the
    next statement.

    Raises:
        StoreException: If the commit fails (constraint violation, connectivity)
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("store_commit_failed", action=action, error=str(e))
        raise StoreException(f"Failed to {action}") from e


def flush_or_raise(db: Session, action: str) -> None:
    """
    Flush pending rows without committing, so generated ids are available
    to a later statement in the same transaction.

    Raises:
        StoreException: If the flush fails
    """
    try:
        db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("store_flush_failed", action=action, error=str(e))
        raise StoreException(f"Failed to {action}") from e
