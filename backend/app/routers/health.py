# app/routers/health.py
import logging
from datetime import datetime, timezone

import psycopg
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.core.db import db_conn
from app.core.persistence import INTAKE_TABLES
from app.core.settings import settings

router = APIRouter(prefix="/api/health", tags=["health"])
log = logging.getLogger("uvicorn.error")


@router.get("")
async def health_root():
    return {
        "status": "healthy",
        "message": f"{settings.api_title} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }


@router.get("/db")
async def health_db():
    tables = sorted(INTAKE_TABLES)
    try:
        async with db_conn() as (conn, cur):
            await cur.execute("SELECT current_database(), current_user, version()")
            db_name, db_user, pg_version = await cur.fetchone()

            exists = {}
            for table in tables:
                await cur.execute("SELECT to_regclass(%s)", (f"public.{table}",))
                exists[table] = (await cur.fetchone())[0] is not None
    except (psycopg.Error, OSError) as exc:
        log.error("[health] database probe failed: %s", exc)
        return JSONResponse(status_code=503, content={"ok": False, "error": "Database unavailable"})

    return {
        "ok": all(exists.values()),
        "database": db_name,
        "user": db_user,
        "server_version": pg_version,
        "tables": exists,
    }
