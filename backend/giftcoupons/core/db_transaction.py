from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from giftcoupons.core.database import SessionLocal
from giftcoupons.core.logging_config import get_logger

logger = get_logger("db_transaction")


@contextmanager
def db_transaction(db: Session = None):
    """Commit on exit, roll back and re-raise on error. Opens (and closes) a session when none is given."""
    owns_session = db is None
    if owns_session:
        db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Transaction rolled back: {type(e).__name__}: {e}")
        raise
    finally:
        if owns_session:
            db.close()


def safe_commit(db: Session, operation_name: str = "operation") -> bool:
    """Commit, or roll back and report False so the caller can retry with a clean session."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{operation_name} failed: {type(e).__name__}")
        return False
    return True
