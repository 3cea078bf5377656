from .engine import DEFAULT_SQLITE_URL, get_sessionmaker, make_engine
from .utils import is_sqlite_memory_url, resolve_sqlite_url

__all__ = [
    "DEFAULT_SQLITE_URL",
    "get_sessionmaker",
    "is_sqlite_memory_url",
    "make_engine",
    "resolve_sqlite_url",
]
