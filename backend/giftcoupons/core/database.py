import os

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from giftcoupons.core.config import settings

# Seconds to wait on a locked SQLite file before failing the statement
SQLITE_BUSY_TIMEOUT = 20.0


def _ensure_sqlite_dir(url: str) -> None:
    if url.startswith("sqlite:///"):
        db_dir = os.path.dirname(url[len("sqlite:///"):])
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)


_ensure_sqlite_dir(settings.DATABASE_URL)

engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
    pool_pre_ping=True,
    echo=settings.DEBUG,
)


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Request-scoped session; committed when the endpoint returns cleanly."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
