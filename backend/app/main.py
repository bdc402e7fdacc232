# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.db import close_pool, db_conn
from app.core.errors import IntakeError
from app.core.mailer import NotificationDispatcher
from app.core.migrations import ensure_intake_schema
from app.core.persistence import PersistenceGateway
from app.core.settings import settings
from app.routers.health import router as health_router
from app.routers.intake import router as intake_router
from app.routers.site import router as site_router

log = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_schema:
        await ensure_intake_schema()
    log.info(f"[main] {settings.api_title} running on port {settings.port}")
    log.info(f"[main] health check available at: http://localhost:{settings.port}/api/health")
    yield
    log.info("[main] shutting down; closing database pool")
    await close_pool()


app = FastAPI(title=settings.api_title, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

# process-wide collaborators shared by every request
app.state.persistence = PersistenceGateway(db_conn)
app.state.notifier = NotificationDispatcher.from_settings(settings)

# Routers
app.include_router(health_router)
app.include_router(intake_router)
app.include_router(site_router)


@app.exception_handler(IntakeError)
async def intake_error_handler(request: Request, exc: IntakeError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    content = {"error": "Something went wrong!"}
    if settings.diagnostic_errors:
        content["message"] = str(exc)
    return JSONResponse(status_code=500, content=content)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
