"""Generate database session"""

from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from gambit.core.config import Settings, get_settings
from gambit.db.schema import Base


def build_engine(settings: Optional[Settings] = None) -> Engine:
    settings = settings or get_settings()
    return create_engine(settings.database_url, echo=settings.sql_echo)


def init_db(engine: Engine) -> sessionmaker[Session]:
    """Ensure all tables are created and hand back a session factory bound to the engine"""
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
