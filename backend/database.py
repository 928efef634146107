"""Database engine, session factory and the request-scoped session dependency."""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import DATABASE_URL, REQUEST_TIMEOUT_SECONDS


def _engine_kwargs(url: str) -> dict:
    """Bound every connection and statement by the request timeout."""
    if url.startswith("sqlite"):
        return {
            "connect_args": {
                "check_same_thread": False,
                "timeout": REQUEST_TIMEOUT_SECONDS,
            }
        }

    kwargs = {"pool_pre_ping": True, "pool_timeout": REQUEST_TIMEOUT_SECONDS}
    if url.startswith("postgresql"):
        kwargs["connect_args"] = {
            "connect_timeout": REQUEST_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={REQUEST_TIMEOUT_SECONDS * 1000}",
        }
    return kwargs


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a session for one request; uncommitted work is rolled back on close."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
