"""
Database session management.
"""
import logging
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from tripsplit.core.config import settings
from tripsplit.db.base import Base
from tripsplit.core.exceptions import TripsplitError

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
    pool_recycle=3600
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Run a multi-row write as one unit.

    Commits on success; on any error rolls back so no partial rows remain,
    then re-raises. Domain errors are expected and are not logged here.

    Any transaction the request already opened (auth lookup, access check) is
    ended first, so the row lock taken inside is the first statement of a
    fresh transaction and every read after it sees rows committed before the
    lock was granted. Under MySQL's REPEATABLE READ an older snapshot would
    hide a concurrent writer's committed settlement.
    """
    if db.in_transaction():
        db.commit()
    try:
        yield db
        db.commit()
    except TripsplitError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception("Transaction rolled back")
        raise


def init_db():
    """Initialize database tables."""
    import tripsplit.models  # noqa: F401  register models on Base.metadata
    Base.metadata.create_all(bind=engine)
