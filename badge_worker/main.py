import logging

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from badge_worker.db.base import get_db
from badge_worker.core.config import settings
from badge_worker.core.logging import configure_logging
from badge_worker.routers import badge_worker as badge_worker_router
from badge_worker.routers import badges as badges_router
from badge_worker.services.rule_catalogue import validate_catalogue
from badge_worker.core.errors import (
    BadgeWorkerException,
    badge_worker_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# A broken rule catalogue must stop the process before it serves traffic.
validate_catalogue()

app = FastAPI(
    title="Badge Worker API",
    description=(
        "**Activity badge worker**\n\n"
        "Receives activity events from a push subscription, evaluates the "
        "badge rules for the event's domain and grants each badge at most "
        "once per user.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(BadgeWorkerException, badge_worker_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(badge_worker_router.router)
app.include_router(badges_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        logger.warning("Health check could not reach the database", exc_info=True)
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
