"""
Shared fixtures. The persistence tests run against an in-memory SQLite database,
created fresh for every test.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base
from src.db.sql_repository import SQLGameRepository

# StaticPool: every session talks to the same in-memory database
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Tables are dropped again at teardown, so no test sees another test's games."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repo(db_session: Session) -> SQLGameRepository:
    return SQLGameRepository(db_session)
