"""SQLAlchemy engine/session wiring for the history table."""
import os

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings
from .log import get_logger

log = get_logger("db")


def sqlite_file_path(url: str):
    """Filesystem path of a file-backed SQLite URL, else None (in-memory or other backends)."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return None
    database = parsed.database
    if not database or database == ":memory:" or database.startswith("file:"):
        return None
    return database


def ensure_sqlite_dir(url: str):
    path = sqlite_file_path(url)
    if path:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    return path


def create_db_engine(url: str):
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        log.info("[DB CONFIG] SQLite → %s", ensure_sqlite_dir(url) or ":memory:")
        return create_engine(url, pool_pre_ping=True, connect_args={"check_same_thread": False})
    log.info("[DB CONFIG] %s", backend)
    return create_engine(url, pool_pre_ping=True)


engine = create_db_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def db_healthcheck():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, None
    except Exception as e:
        return False, str(e)
