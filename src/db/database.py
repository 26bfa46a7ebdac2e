"""Generate database session"""

from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import DATABASE_ECHO, DATABASE_URL
from src.db.schema import Base


def get_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Engine for the configured database. Ensures all tables are created."""
    engine = create_engine(
        url or DATABASE_URL, echo=DATABASE_ECHO if echo is None else echo
    )
    Base.metadata.create_all(bind=engine)
    return engine


def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine)


def get_db(engine: Engine) -> Generator[Session, None, None]:
    db = session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
