"""Generate database session for the local store"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.db.schema import Base


def create_store_engine(url: str) -> Engine:
    """Engine for the local store, with all tables created."""
    if url.startswith("sqlite") and ":memory:" in url:
        # One shared connection, otherwise every connection sees its own empty database
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    elif url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(url)

    Base.metadata.create_all(bind=engine)
    return engine


def open_store_session(engine: Engine) -> Session:
    return sessionmaker(bind=engine, autoflush=False)()
