"""Verify the configured lottery database matches the models and migrations.

Exit codes: 0 when the schema is current, 1 when it drifted or is behind the
newest migration, 2 when the check itself failed.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from alembic.autogenerate import compare_metadata
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from fairdraw.db.engine import make_engine
from fairdraw.models import Base

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def migration_head() -> Optional[str]:
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return ScriptDirectory.from_config(config).get_current_head()


def collect_problems(connection) -> list[str]:
    """Return human readable problems found on ``connection``; empty when clean."""
    context = MigrationContext.configure(
        connection=connection,
        opts={
            "compare_type": True,
            "compare_server_default": True,
            "render_as_batch": connection.dialect.name == "sqlite",
        },
    )
    problems = []
    current, head = context.get_current_revision(), migration_head()
    if current != head:
        problems.append(f"database revision {current or '<none>'} != migration head {head}")
    for diff in compare_metadata(context, Base.metadata):
        problems.append(f"model difference: {diff}")
    return problems


def main() -> int:
    engine = make_engine()
    url_display = engine.url.render_as_string(hide_password=True)
    try:
        with engine.connect() as connection:
            problems = collect_problems(connection)
    except Exception as exc:
        print(f"Schema drift check: ERROR for {url_display}: {exc}", file=sys.stderr)
        return 2
    finally:
        engine.dispose()

    if not problems:
        print(f"Schema drift check: OK for {url_display}.")
        return 0
    print(f"Schema drift check: FAILED for {url_display}.")
    for problem in problems:
        print(f"  - {problem}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
