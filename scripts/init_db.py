from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from fairdraw.db.engine import make_engine

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def upgrade_db(target_revision: str = "head") -> None:
    """Apply Alembic migrations up to the requested revision."""
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def describe_schema() -> list[str]:
    """Return the lottery tables present in the configured database."""
    engine = make_engine()
    try:
        return sorted(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def main() -> None:
    upgrade_db()
    print("Lottery tables:", ", ".join(describe_schema()))


if __name__ == "__main__":
    main()
