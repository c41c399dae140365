"""
Additive column migrations for databases created by older releases.

Each step adds one column when it is missing. Steps run in their own
transaction and a failing step is logged and reported, never raised.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

APPLIED = "applied"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass(frozen=True)
class ColumnMigration:
    table: str
    column: str
    postgres_ddl: str
    sqlite_ddl: str

    def ddl_for(self, dialect: str) -> str:
        return self.sqlite_ddl if dialect == "sqlite" else self.postgres_ddl


@dataclass
class MigrationOutcome:
    table: str
    column: str
    status: str
    error: Optional[str] = None


# Columns introduced after the first schema, in the order they were added.
MIGRATIONS: List[ColumnMigration] = [
    ColumnMigration("ds_vehicle", "mileage", "INTEGER DEFAULT 0", "INTEGER DEFAULT 0"),
    ColumnMigration("ds_vehicle", "price", "DECIMAL(10,2) DEFAULT 0", "REAL DEFAULT 0"),
    ColumnMigration("ds_vehicle", "status", "VARCHAR(50) DEFAULT 'available'", "TEXT DEFAULT 'available'"),
    ColumnMigration(
        "ds_vehicle", "updated_at",
        "TIMESTAMP DEFAULT CURRENT_TIMESTAMP", "TEXT DEFAULT CURRENT_TIMESTAMP",
    ),
    ColumnMigration("ds_customer", "address", "TEXT", "TEXT"),
    ColumnMigration(
        "ds_customer", "updated_at",
        "TIMESTAMP DEFAULT CURRENT_TIMESTAMP", "TEXT DEFAULT CURRENT_TIMESTAMP",
    ),
    ColumnMigration("ds_contract", "tax_amount", "DECIMAL(10,2) NOT NULL DEFAULT 0", "REAL NOT NULL DEFAULT 0"),
]


def _sqlite_column_exists(conn, table: str, column: str) -> bool:
    return any(row[1] == column for row in conn.execute(text(f'PRAGMA table_info("{table}")')))


def _add_column_sqlite(conn, table: str, column: str, ddl: str) -> None:
    """Add a column to a SQLite table, handling timestamp defaults.

    SQLite refuses ``ADD COLUMN`` with a non-constant default, so such columns
    are added bare and backfilled.
    """
    qtable = f'"{table}"'
    qcol = f'"{column}"'
    if "DEFAULT CURRENT_TIMESTAMP" in ddl.upper():
        base_type = re.split(r"\s+DEFAULT\s+", ddl, flags=re.IGNORECASE)[0].strip()
        conn.execute(text(f"ALTER TABLE {qtable} ADD COLUMN {qcol} {base_type}"))
        conn.execute(text(f"UPDATE {qtable} SET {qcol} = CURRENT_TIMESTAMP WHERE {qcol} IS NULL"))
    else:
        conn.execute(text(f"ALTER TABLE {qtable} ADD COLUMN {qcol} {ddl}"))


def _apply_sqlite(conn, migration: ColumnMigration) -> str:
    if _sqlite_column_exists(conn, migration.table, migration.column):
        return SKIPPED
    _add_column_sqlite(conn, migration.table, migration.column, migration.sqlite_ddl)
    return APPLIED


def _postgres_column_exists(conn, table: str, column: str) -> bool:
    row = conn.execute(
        text(
            "SELECT 1 FROM information_schema.columns "
            "WHERE table_schema = current_schema() "
            "AND table_name = :table AND column_name = :column"
        ),
        {"table": table, "column": column},
    ).first()
    return row is not None


def _apply_postgres(conn, migration: ColumnMigration) -> str:
    if _postgres_column_exists(conn, migration.table, migration.column):
        return SKIPPED
    conn.execute(text(
        f'ALTER TABLE "{migration.table}" ADD COLUMN IF NOT EXISTS '
        f'"{migration.column}" {migration.postgres_ddl}'
    ))
    return APPLIED


async def run_migrations(
    engine: AsyncEngine, migrations: Iterable[ColumnMigration] = MIGRATIONS
) -> List[MigrationOutcome]:
    """Apply every migration step; return one outcome per step."""
    dialect = engine.dialect.name
    apply = _apply_sqlite if dialect == "sqlite" else _apply_postgres
    outcomes: List[MigrationOutcome] = []

    for migration in migrations:
        try:
            async with engine.begin() as conn:
                status = await conn.run_sync(apply, migration)
        except Exception as exc:
            outcome = MigrationOutcome(migration.table, migration.column, FAILED, str(exc))
            logger.warning(
                "Migration %s.%s failed: %s", migration.table, migration.column, exc
            )
        else:
            outcome = MigrationOutcome(migration.table, migration.column, status)
            if status == APPLIED:
                logger.info("Migration %s.%s applied", migration.table, migration.column)
            else:
                logger.debug("Migration %s.%s skipped", migration.table, migration.column)
        outcomes.append(outcome)

    failed = sum(1 for o in outcomes if o.status == FAILED)
    logger.info("Schema migrations finished: %d steps, %d failed", len(outcomes), failed)
    return outcomes
