"""Schema migrations for the registration tables.

Each `.sql` file under `src/db/migrations/` runs once, in filename order, inside its own
transaction. The names of applied files are kept in `schema_migrations`.

    python -m src.db.migrate            # apply pending migrations
    python -m src.db.migrate --status   # list pending migrations only
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import LiteralString, cast

import psycopg
from dotenv import load_dotenv

from src.config.logging import configure_logging
from src.db.connection import connect_utc, require_database_url

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

CREATE_MIGRATIONS_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS schema_migrations
    (
        filename   TEXT PRIMARY KEY,
        applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""

DROP_TABLES_SQL = """
    DROP TABLE IF EXISTS team;
    DROP TABLE IF EXISTS inschrijving;
    DROP TABLE IF EXISTS schema_migrations;
"""

logger = logging.getLogger(__name__)


def list_migration_files(directory: Path = MIGRATIONS_DIR) -> list[Path]:
    """Return the migration files of `directory` in the order they must run."""

    if not directory.is_dir():
        raise RuntimeError(f"Migrations directory does not exist: {directory}")

    files = sorted(directory.glob("*.sql"), key=lambda p: p.name)
    if not files:
        raise RuntimeError(f"No .sql migration files found in {directory}")
    return files


def pending_migrations(files: Iterable[Path], applied: set[str]) -> list[Path]:
    """Files of `files` whose name is not recorded as applied, order kept."""

    return [path for path in files if path.name not in applied]


def _applied_filenames(conn: psycopg.Connection) -> set[str]:
    conn.execute(CREATE_MIGRATIONS_TABLE_SQL, prepare=False)
    return {row[0] for row in conn.execute("SELECT filename FROM schema_migrations").fetchall()}


def _run_file(conn: psycopg.Connection, path: Path) -> None:
    with conn.transaction():
        conn.execute(cast(LiteralString, path.read_text(encoding="utf-8")), prepare=False)
        conn.execute("INSERT INTO schema_migrations (filename) VALUES (%s)", (path.name,))


def migrate(*, recreate: bool = False, dry_run: bool = False) -> list[str]:
    """Bring the database at `DATABASE_URL` up to date.

    Args:
        recreate: Drop the registration tables first (destructive).
        dry_run: Only report what would run; the `schema_migrations` bookkeeping table is still
            created when missing.

    Returns:
        Names of the migrations applied, or pending when `dry_run` is set.
    """

    load_dotenv(".env")
    files = list_migration_files()

    with connect_utc(require_database_url()) as conn:
        if recreate and not dry_run:
            logger.warning("recreate requested; dropping registration tables")
            conn.execute(DROP_TABLES_SQL, prepare=False)

        todo = pending_migrations(files, _applied_filenames(conn))
        if dry_run:
            for path in todo:
                logger.info("pending migration=%s", path.name)
            return [path.name for path in todo]

        for path in todo:
            _run_file(conn, path)
            logger.info("applied migration=%s", path.name)

    return [path.name for path in todo]


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply the registration schema migrations.")
    parser.add_argument(
        "--recreate",
        action="store_true",
        help="Drop the registration tables and re-apply all migrations (destructive).",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="List pending migrations without applying them.",
    )
    args = parser.parse_args()

    # Puts LOG_LEVEL from `.env` into os.environ.
    load_dotenv(".env")
    configure_logging()
    names = migrate(recreate=args.recreate, dry_run=args.status)
    if not names:
        logger.info("schema is up to date")


if __name__ == "__main__":
    main()
