"""
Database engine and session setup.
SQLite by default; set DATABASE_URL for PostgreSQL.
"""
import logging
import os

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from image_archiver.constants import BACKUP_LOCK_ROW_ID, DEFAULT_DATABASE_URL

logger = logging.getLogger("image_archiver.database")

load_dotenv()

Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections are shared with scheduler threads"""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url, pool_pre_ping=True)


DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autoflush=False, bind=engine)


def get_db():
    """FastAPI dependency yielding a session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None) -> None:
    """Create tables and seed the singleton backup lock row"""
    from image_archiver.models import BackupLock

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    db = Session(bind=bind)
    try:
        if db.get(BackupLock, BACKUP_LOCK_ROW_ID) is None:
            db.add(BackupLock(id=BACKUP_LOCK_ROW_ID, is_running=False))
            db.commit()
            logger.info("Initialized backup lock row")
    finally:
        db.close()
