# app/data/database.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.utils.settings import DATABASE_URL


def make_engine(url: str):
    # sqlite (testy/dev) nie lubi wspoldzielenia polaczenia miedzy watkami
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)
Base = declarative_base()


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Transaction boundary for multi-step writes.

    Commits when the block finishes, rolls back on any exception and re-raises it,
    so callers never observe half-applied state.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db() -> None:
    # import modeli rejestruje tabele w Base.metadata
    import app.data.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
