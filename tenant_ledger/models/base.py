"""
Engine, session factory and declarative base.

Services receive a Session and never commit; the route that
created the session through get_db() owns the transaction.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from tenant_ledger.config import get_settings

settings = get_settings()

# SQLite connections are shared with FastAPI's worker threads
connect_args = (
    {"check_same_thread": False}
    if settings.DATABASE_URL.startswith("sqlite")
    else {}
)

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)

# Nothing reaches the database before an explicit flush, and
# nothing is saved before the route commits
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


def get_db():
    """One session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
