"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets a session
from get_db().
"""

from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from bank_api.config import get_settings

settings = get_settings()


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def engine_options(database_url: str) -> dict:
    """Engine keyword arguments for a database URL."""
    options = {"pool_pre_ping": True}
    if database_url.startswith("sqlite"):
        # Sessions are handed to FastAPI's threadpool; the busy
        # timeout makes a second writer wait instead of failing.
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": 5,
        }
    return options


# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# which handles cases where the database restarted or a
# connection went stale.
engine = create_engine(
    settings.DATABASE_URL,
    **engine_options(settings.DATABASE_URL),
)

# --- Session Factory ---
# autocommit=False: the caller (or an atomic repository
# operation) decides when changes are committed.
# autoflush=False: SQL is only sent on explicit flush/commit.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
