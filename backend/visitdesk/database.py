"""Engine, session factory and transaction helpers."""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from visitdesk.config import settings
from visitdesk.exceptions import StorageError

logger = logging.getLogger(__name__)

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# pool_pre_ping: check connection is alive before use.
engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args,
    pool_pre_ping=True,
    pool_recycle=300,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run a block as a single transaction.

    Commits when the block exits cleanly. Any exception rolls the whole
    transaction back and is re-raised; driver-level failures are re-raised as
    ``StorageError`` so callers never see database internals.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Transaction rolled back after database error")
        raise StorageError("The operation could not be completed. Please try again later.") from exc
    except Exception:
        db.rollback()
        raise


def init_db(bind=None) -> None:
    """Create all tables. Idempotent; called once at process start."""
    # Models must be imported so they register with Base.metadata
    from visitdesk import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
