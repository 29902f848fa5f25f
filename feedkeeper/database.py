from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from feedkeeper.config import get_settings

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """
    Build the engine for the entry store.

    SQLite connections are shared between the API threadpool and the scheduler
    thread, and an in-memory database must live on a single connection.
    """
    kwargs = {"future": True, "echo": False}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(database_url, **kwargs)


# SQLAlchemy engine & session factory
engine = create_db_engine(get_settings().DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
)


def init_db(bind: Engine | None = None) -> None:
    """
    Import models and create tables if they don't exist.
    There are no migrations; the schema is created on startup.
    """
    from feedkeeper import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
