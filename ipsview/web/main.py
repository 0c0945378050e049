"""
ipsview Web API - FastAPI Application

Exposes the crash report decoder over HTTP so a web page (or any other
client) can submit raw .ips text and get back sections or rendered output.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ipsview import __version__
from ipsview.errors import FormatError
from ipsview.web.routes import reports

logger = logging.getLogger("ipsview.web")


# Create FastAPI app
app = FastAPI(
    title="ipsview API",
    description="Decode and render Apple .ips crash reports",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)


# Exception handlers
@app.exception_handler(FormatError)
async def format_error_handler(request: Request, exc: FormatError):
    logger.warning(f"Rejected report ({exc.phase}): {exc}")
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "phase": exc.phase, "error": True}
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": True}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(), "error": True}
    )


# API routes
app.include_router(reports.router, prefix="/api/v1/reports", tags=["reports"])


@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return {
        "status": "ok",
        "service": "ipsview",
        "version": __version__
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ipsview.web.main:app",
        host="127.0.0.1",
        port=8000,
        log_level="info"
    )
