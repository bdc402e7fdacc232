import logging
import os
from pathlib import Path
from typing import Optional

from app.core.db import db_conn

log = logging.getLogger("uvicorn.error")
_REPO_ROOT = Path(__file__).resolve().parents[3]
_DEFAULT_SQL_PATH = _REPO_ROOT / "db" / "init" / "01_intake_schema.sql"


def intake_schema_path() -> Optional[Path]:
    env_path = os.environ.get("INTAKE_SCHEMA_FILE")
    candidates = [Path(env_path)] if env_path else []
    candidates.append(_DEFAULT_SQL_PATH)

    for candidate in candidates:
        if candidate.exists():
            return candidate

    log.warning(
        "Intake schema file not found, tried %s",
        ", ".join(str(p) for p in candidates),
    )
    return None


async def ensure_intake_schema(connect=db_conn) -> bool:
    """Create any missing intake tables. Statements are IF NOT EXISTS, so reruns are harmless."""
    sql_path = intake_schema_path()
    if not sql_path:
        return False

    sql = sql_path.read_text()
    if not sql.strip():
        return False

    async with connect() as (conn, cur):
        log.info("Ensuring intake schema exists using %s", sql_path.name)
        await cur.execute(sql)
        await conn.commit()
    return True
