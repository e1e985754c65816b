"""
REALSCAN FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse

from realscan.config import settings
from realscan.deps import get_manager
from realscan.kernel.errors import (
    CodeSpaceExhaustedError,
    EmptyCodeError,
    NotFoundError,
    StorageWriteError,
    ValidationError,
)
from realscan.models.code import ErrorResponse
from realscan.routes import codes as code_routes

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: configure logging and create the data file if missing.
    Shutdown: nothing to release, the store holds no open handles.
    """
    configure_logging()
    get_manager()
    logger.info("REALSCAN running on %s", settings.BASE_URL)
    logger.info("Admin panel: %s/admin.html", settings.BASE_URL)
    yield
    logger.info("REALSCAN stopped")


app = FastAPI(
    title="REALSCAN",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(code_routes.router)


# ── error mapping ──────────────────────────────────────────────────────────


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(EmptyCodeError)
async def empty_code_handler(request: Request, exc: EmptyCodeError):
    # The scanner reads `reason`, not `error`
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"ok": False, "reason": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _error(status.HTTP_400_BAD_REQUEST, "Request body must be a JSON object")


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(StorageWriteError)
async def storage_write_handler(request: Request, exc: StorageWriteError):
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Could not save codes")


@app.exception_handler(CodeSpaceExhaustedError)
async def exhausted_handler(request: Request, exc: CodeSpaceExhaustedError):
    logger.error("Code generation exhausted: %s", exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Could not generate a free code")


# ── pages ──────────────────────────────────────────────────────────────────


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}


@app.get("/")
async def root():
    return RedirectResponse(url="/admin.html")


if settings.PUBLIC_DIR.is_dir():

    @app.get("/admin.html")
    async def serve_admin():
        """Serve the admin page (create, list, revoke codes)."""
        return FileResponse(str(settings.PUBLIC_DIR / "admin.html"))

    @app.get("/scanner.html")
    async def serve_scanner():
        """Serve the scanner page (validate a code)."""
        return FileResponse(str(settings.PUBLIC_DIR / "scanner.html"))
