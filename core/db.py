# core/db.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from core.config import DATABASE_URL


def make_engine(url: str):
    """Build an engine; SQLite connections are shared across Flet handler threads."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, connect_args=connect_args)


engine = make_engine(DATABASE_URL)

# expire_on_commit=False keeps orders readable after the session closes
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)

Base = declarative_base()


def get_db():
    """Yield a SQLAlchemy session (use: `for db in get_db():`)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
