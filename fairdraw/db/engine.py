import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .utils import is_sqlite_memory_url, resolve_sqlite_url

load_dotenv()
# Repository root; relative SQLite paths in DB_URL are anchored here.
ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_SQLITE_URL = resolve_sqlite_url(
    os.getenv("DB_URL", "sqlite:///./dev.db"), ROOT_DIR
)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """Create the engine used by the lottery and its tooling.

    An in-memory SQLite URL gets a single shared connection so that every
    session, including those opened from worker threads, sees the same
    database.
    """

    url = database_url or DEFAULT_SQLITE_URL
    options = {}
    if is_sqlite_memory_url(url):
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
    engine = create_engine(url, echo=echo, future=True, **options)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def get_sessionmaker(engine: Engine) -> sessionmaker:
    # Snapshots are read after commit, so loaded state must survive it.
    return sessionmaker(bind=engine, expire_on_commit=False, future=True)
