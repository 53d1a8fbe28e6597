from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from pulse.config.settings import get_settings
from pulse.db.models import Base
from pulse.exceptions import ConfigError

_engine: Engine | None = None


def create_store_engine(database_url: str) -> Engine:
    if not database_url:
        raise ConfigError("DATABASE_URL not set")
    return create_engine(database_url, future=True)


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        s = get_settings()
        _engine = create_store_engine(s.database_url)
    return _engine


def init_db(engine: Engine | None = None) -> None:
    """
    Create tables (idempotent) and verify connectivity.
    """
    engine = engine or get_engine()

    Base.metadata.create_all(engine)

    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
