"""Generate database session"""

from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings
from src.db.schema import Base


def create_db_engine(settings: Settings) -> Engine:
    """Engine for the configured database, with all tables created"""
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    Base.metadata.create_all(bind=engine)
    return engine


def get_db(engine: Engine) -> Generator[Session, None, None]:
    session_local = sessionmaker(bind=engine)
    db = session_local()
    try:
        yield db
    finally:
        db.close()
