"""
Fixtures shared by the test modules (pytest picks this file up by itself).
Every database fixture talks to one in-memory SQLite database, built the way the application builds its own.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session

from gambit.db.database import get_db, init_db
from gambit.db.schema import Base

# StaticPool: a single connection, otherwise every session would see its own empty in-memory database
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Fresh tables for every test: repository tests do not see each other's games."""
    session_factory = init_db(engine)
    sessions = get_db(session_factory)
    try:
        yield next(sessions)
    finally:
        sessions.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session_shared() -> Generator[Session, None, None]:
    """Tables outlive the test, like several sessions of a running application connecting to one database."""
    sessions = get_db(init_db(engine))
    try:
        yield next(sessions)
    finally:
        sessions.close()
