from pathlib import Path

from sqlalchemy.engine import make_url


def is_sqlite_memory_url(url: str) -> bool:
    """Return True for SQLite URLs that point at a private in-memory database."""
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (
        None,
        "",
        ":memory:",
    )


def resolve_sqlite_url(url: str, project_root: Path) -> str:
    """Anchor a relative SQLite database path at ``project_root``.

    ``sqlite:///./data/lottery.db`` and ``sqlite:///data/lottery.db`` both
    become an absolute ``sqlite:////...`` URL so the same ``.env`` works from
    any working directory. Absolute paths, in-memory databases and other
    backends are returned unchanged.
    """

    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite" or is_sqlite_memory_url(url):
        return url
    if Path(parsed.database).is_absolute():
        return url
    absolute = (project_root / parsed.database).resolve()
    return parsed.set(database=str(absolute)).render_as_string(hide_password=False)
