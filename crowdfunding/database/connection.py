"""Database connection and session management."""
from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from crowdfunding.config import get_settings
from crowdfunding.database.models import Base

# Global engine and session factory
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker[Session]] = None


def create_engine_from_url(database_url: str, echo: bool = False) -> Engine:
    """
    Build an engine for the given URL.

    Connection recycling only applies to server databases; SQLite gets the
    dialect defaults.
    """
    settings = get_settings()
    options: dict = {
        "echo": echo,
        "pool_pre_ping": settings.database_pool_pre_ping,
    }
    if not database_url.startswith("sqlite"):
        options["pool_recycle"] = 3600
    return create_engine(database_url, **options)


def get_engine() -> Engine:
    """
    Get or create the database engine.

    Returns:
        Engine: SQLAlchemy engine instance
    """
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_engine_from_url(settings.database_url, echo=settings.database_echo)
    return _engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        engine,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


def get_session_factory() -> sessionmaker[Session]:
    """
    Get or create the session factory.

    Returns:
        sessionmaker: SQLAlchemy session factory
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = make_session_factory(get_engine())
    return _session_factory


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Initialize database tables.

    Creates all tables defined in models if they don't exist.
    """
    Base.metadata.create_all(engine or get_engine())


def close_db() -> None:
    """Close database connections and dispose of the engine."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
