from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def build_engine(settings) -> Engine:
    """Create the store engine with bounded connection timeouts."""
    url = settings.DATABASE_URL
    if url.startswith("sqlite"):
        # SQLite has no server to select; only the file lock timeout applies
        return create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": settings.DB_CONNECT_TIMEOUT_SECONDS},
            pool_pre_ping=True,
        )

    return create_engine(
        url,
        connect_args={"connect_timeout": int(settings.DB_CONNECT_TIMEOUT_SECONDS)},
        pool_size=settings.DB_POOL_SIZE,
        pool_timeout=settings.DB_SERVER_SELECTION_TIMEOUT_SECONDS,
        pool_pre_ping=True,
    )


def init_db(engine: Engine) -> None:
    from .models import User  # noqa: F401  registers the users table on Base

    Base.metadata.create_all(bind=engine)
