import logging

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from emotherm.db.base import get_db
from emotherm.core.config import settings
from emotherm.routers import analytics as analytics_router
from emotherm.routers import assessments as assessments_router
from emotherm.routers import catalog as catalog_router
from emotherm.routers import preferences as preferences_router
from emotherm.routers import transfer as transfer_router
from emotherm.core.errors import (
    EmothermException,
    emotherm_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Emotion Thermometer API",
    description=(
        "**Local emotional-journaling store and analytics**\n\n"
        "Records mood events against a fixed six-scale emotion catalog, keeps "
        "them in a bounded key-value slot, and derives streaks, weather and "
        "chart series from the stored history.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(EmothermException, emotherm_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(catalog_router.router)
app.include_router(assessments_router.router)
app.include_router(transfer_router.router)
app.include_router(analytics_router.router)
app.include_router(preferences_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
