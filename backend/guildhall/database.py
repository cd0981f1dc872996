import logging
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from guildhall.config import settings

logger = logging.getLogger(__name__)


_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

_engine_kwargs: dict = (
    {"connect_args": {"check_same_thread": False}}
    if _is_sqlite
    else {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}
)

# Process-wide engine, created once at import and reused by every request.
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create the document table if it does not exist yet.

    Safe to call on every startup; create_all skips existing tables.
    """
    # Imported for its side effect of registering the table on Base.metadata
    from guildhall.models import document  # noqa: F401

    logger.info("Ensuring document store schema on %s", engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=engine)
