import os

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from jobtracker.constants import DEFAULT_DATABASE_URL

DATABASE_URL = os.getenv("JOB_TRACKER_DATABASE_URL", DEFAULT_DATABASE_URL)

# SQLite needs check_same_thread off for FastAPI's threadpool
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency yielding a session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
