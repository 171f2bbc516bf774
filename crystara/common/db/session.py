from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ..models.base import Base


engine: Optional[Engine] = None
SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False, future=True)


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite://"):
        if ":memory:" in database_url or database_url == "sqlite://":
            # one shared connection so every session sees the same in-memory database
            return create_engine(
                database_url,
                future=True,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        # Ensure sqlite file parent directory exists to avoid 'unable to open database file'
        db_path = database_url.split("sqlite:///")[-1]
        Path(db_path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
        return create_engine(database_url, future=True, connect_args={"check_same_thread": False})
    return create_engine(database_url, future=True, pool_pre_ping=True)


def configure(database_url: str) -> Engine:
    """Bind the module session factory to `database_url` and return the engine."""
    global engine
    engine = build_engine(database_url)
    SessionLocal.configure(bind=engine)
    return engine


def init_db(bind: Optional[Engine] = None) -> None:
    target = bind or engine
    if target is None:
        raise RuntimeError("database engine not configured")
    Base.metadata.create_all(target)


def make_session_scope(factory=SessionLocal):
    @contextmanager
    def scope():
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return scope


get_session = make_session_scope()
