"""Main application entry point."""
import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shiftdesk import __version__
from shiftdesk.config import settings
from shiftdesk.database import init_db
from shiftdesk.api.auth import router as auth_router
from shiftdesk.api.shifts import router as shifts_router
from shiftdesk.exceptions import (
    EndpointNotFoundError,
    InternalError,
    InvalidInputError,
    ShiftDeskError,
    format_error_for_api,
)


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

app = FastAPI(
    title="ShiftDesk",
    description="Shift assignment and schedule viewing for employees and admins",
    version=__version__,
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "cross-origin",
}

app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(shifts_router, prefix=settings.api_prefix)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Attach hardening headers to every response."""
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@app.exception_handler(ShiftDeskError)
async def shiftdesk_error_handler(request: Request, exc: ShiftDeskError):
    """Render service errors with their status code and error body."""
    return JSONResponse(status_code=exc.status_code, content=format_error_for_api(exc))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Render routing errors (unknown path, wrong method) in the shared error body."""
    if exc.status_code == 404:
        error = EndpointNotFoundError(request.url.path)
        return JSONResponse(status_code=error.status_code, content=format_error_for_api(error))

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {"code": "HTTP_ERROR", "message": str(exc.detail), "details": {}}
        },
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report unparseable request bodies as invalid input."""
    error = InvalidInputError("Invalid request payload")
    return JSONResponse(status_code=error.status_code, content=format_error_for_api(error))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Log unexpected failures and return a generic error without internals."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalError("Something went wrong")
    return JSONResponse(status_code=error.status_code, content=format_error_for_api(error))


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info("Application starting up...")
    init_db()
    logger.info("Application startup complete")


@app.get(f"{settings.api_prefix}/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3)
    }


if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8000)),
        reload=settings.debug
    )
