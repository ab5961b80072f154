"""Database setup with SQLAlchemy for the local record cache."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from ims.config import get_settings


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def make_engine(database_url: str) -> Engine:
    """Create an engine, with SQLite tuned for use from the push threads."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty db
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


settings = get_settings()

engine = make_engine(settings.database_url)

SessionLocal = make_session_factory(engine)


def init_db(bind: Engine | None = None):
    """Create the cache tables if they do not exist."""
    import ims.models  # noqa: F401  registers the mappers on Base
    Base.metadata.create_all(bind=bind or engine)
