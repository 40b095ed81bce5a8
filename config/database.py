"""Database engine, session factory and the per-request session dependency."""
import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from config.settings import load_settings

logger = logging.getLogger(__name__)

settings = load_settings()


def _engine_kwargs() -> dict:
    if settings.is_sqlite:
        # SQLite connections are shared across the threadpool FastAPI runs sync work in
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }


engine = create_engine(settings.database_url, echo=settings.db_echo, **_engine_kwargs())
logger.info(f"Database engine configured for {engine.url.render_as_string(hide_password=True)}")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Yield a database session scoped to one request.

    The session is closed when the request finishes; nothing is committed
    implicitly, writers call commit() through their repository.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
