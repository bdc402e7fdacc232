# app/core/persistence.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import psycopg

from app.core.db import db_conn
from app.core.errors import PersistenceError


@dataclass(frozen=True)
class TableSpec:
    name: str
    columns: Tuple[str, ...]
    # natural key for upserts; None means plain inserts only
    conflict_key: Optional[str] = None


@dataclass(frozen=True)
class StoredRow:
    id: int
    created_at: datetime


INTAKE_TABLES: Dict[str, TableSpec] = {
    spec.name: spec
    for spec in (
        TableSpec(
            "contact_submissions",
            ("name", "email", "phone", "message", "submission_type"),
        ),
        TableSpec(
            "appointment_requests",
            ("name", "email", "phone", "preferred_date", "preferred_time", "message"),
        ),
        TableSpec(
            "quote_requests",
            (
                "company_name", "contact_name", "email", "phone",
                "num_employees", "current_provider", "interested_in",
            ),
        ),
        TableSpec(
            "survey_submissions",
            ("survey_type", "survey_data", "email"),
        ),
        TableSpec(
            "newsletter_subscriptions",
            ("email", "name"),
            conflict_key="email",
        ),
    )
}


def _table(name: str) -> TableSpec:
    try:
        return INTAKE_TABLES[name]
    except KeyError:
        raise ValueError(f"unknown intake table: {name}") from None


def _columns(spec: TableSpec, fields: Mapping[str, Any]) -> Tuple[str, ...]:
    unknown = [c for c in fields if c not in spec.columns]
    if unknown:
        raise ValueError(f"{spec.name} has no column(s): {', '.join(unknown)}")
    if not fields:
        raise ValueError(f"no values given for {spec.name}")
    return tuple(fields)


def build_insert_sql(spec: TableSpec, columns: Tuple[str, ...]) -> str:
    placeholders = ", ".join(["%s"] * len(columns))
    return (
        f"INSERT INTO {spec.name} ({', '.join(columns)})\n"
        f"VALUES ({placeholders})\n"
        "RETURNING id, created_at"
    )


def build_upsert_sql(spec: TableSpec, columns: Tuple[str, ...]) -> str:
    if spec.conflict_key is None or spec.conflict_key not in columns:
        raise ValueError(f"{spec.name} cannot be upserted without its conflict key")
    placeholders = ", ".join(["%s"] * len(columns))
    assignments = [f"{c} = EXCLUDED.{c}" for c in columns if c != spec.conflict_key]
    assignments.append("created_at = CURRENT_TIMESTAMP")
    return (
        f"INSERT INTO {spec.name} ({', '.join(columns)})\n"
        f"VALUES ({placeholders})\n"
        f"ON CONFLICT ({spec.conflict_key}) DO UPDATE\n"
        f"SET {', '.join(assignments)}\n"
        "RETURNING id, created_at"
    )


class PersistenceGateway:
    """
    Parameterized writes into the intake tables.

    Table and column names come from INTAKE_TABLES only; values are always
    bound as positional parameters. Each call is one statement on one pooled
    connection, committed before the connection is handed back.
    """

    def __init__(self, connect: Callable = db_conn):
        self._connect = connect

    async def insert(self, table: str, fields: Mapping[str, Any]) -> StoredRow:
        spec = _table(table)
        columns = _columns(spec, fields)
        return await self._execute(spec, build_insert_sql(spec, columns), [fields[c] for c in columns])

    async def upsert(self, table: str, fields: Mapping[str, Any]) -> StoredRow:
        """Insert, or on a conflicting natural key update the other columns and reset created_at."""
        spec = _table(table)
        columns = _columns(spec, fields)
        return await self._execute(spec, build_upsert_sql(spec, columns), [fields[c] for c in columns])

    async def _execute(self, spec: TableSpec, query: str, params: list) -> StoredRow:
        try:
            async with self._connect() as (conn, cur):
                await cur.execute(query, params)
                row = await cur.fetchone()
                await conn.commit()
        except (psycopg.Error, OSError) as exc:
            raise PersistenceError(
                f"Could not write to {spec.name}",
                detail=f"{type(exc).__name__}: {exc}",
            ) from exc
        if not row:
            raise PersistenceError(f"Could not write to {spec.name}", detail="statement returned no row")
        return StoredRow(id=int(row[0]), created_at=row[1])
