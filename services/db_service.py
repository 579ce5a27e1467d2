# services/db_service.py
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import DATABASE_URL

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False)
Base = declarative_base()


@contextmanager
def get_db():
    """Yield a session and always close it. Callers commit explicitly."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind=None):
    """Create tables if they do not exist yet."""
    # register models on Base.metadata
    import models.alert  # noqa: F401
    import models.notification  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
