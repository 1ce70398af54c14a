from typing import Iterator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from app.core_settings import get_settings
from app.domain.models import Base

def build_engine(url: str) -> Engine:
    """Engine for ``url``; SQLite connections are shared across FastAPI's worker threads."""
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One connection, otherwise every checkout sees a fresh empty database
            options["poolclass"] = StaticPool
        return create_engine(url, **options)
    return create_engine(url, pool_pre_ping=True)

DATABASE_URL = get_settings().database_url
engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

def get_db() -> Iterator[Session]:
    """One session per request, closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_models(bind: Engine = engine) -> None:
    Base.metadata.create_all(bind)
