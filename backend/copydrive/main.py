"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from copydrive.api.v1.api import api_router
from copydrive.db.database import close_db, init_db
from copydrive.exceptions import CopyDriveError
from copydrive.settings import settings
from copydrive.utils.logging import setup_logging

setup_logging("copydrive")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings.validate_configuration()
    init_db()
    if not settings.is_ai_gateway_configured():
        logger.warning("AI_GATEWAY_API_KEY is not set; AI endpoints will fail upstream")
    logger.info(f"CopyDrive API started (environment={settings.environment}, instance={settings.instance_id})")
    yield
    close_db()
    logger.info("CopyDrive API stopped")


app = FastAPI(
    title="CopyDrive API",
    description="Python backend for the CopyDrive copywriting workspace",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CopyDriveError)
async def copydrive_error_handler(request: Request, exc: CopyDriveError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = sorted({".".join(str(part) for part in err["loc"] if part != "body") for err in exc.errors()})
    logger.warning(f"{request.method} {request.url.path} invalid request: {fields}")
    return JSONResponse(
        status_code=400,
        content={"error": "invalid_request", "message": "Invalid request body", "fields": fields},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "internal_error", "message": str(exc)})


app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Service banner."""
    return {"status": "ok", "service": "CopyDrive API", "version": "0.1.0"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "copydrive.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
