import logging
from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from remember.config import settings
from remember.core.middleware import ErrorEnvelopeMiddleware
from remember.db import init_db, close_db
from remember.errors import RememberError, StorageError
from remember.routers import router

# Logging setup
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("remember")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Remember API (%s)...", settings.APP_ENV)
    await init_db()
    yield
    # Shutdown
    logger.info("Shutting down Remember API...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title="Remember API",
    description="Photo and file library: uploads, EXIF metadata, tags, albums and search",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)


@app.exception_handler(RememberError)
async def remember_error_handler(request: Request, exc: RememberError):
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


app.include_router(router)

# Middleware setup
app.add_middleware(GZipMiddleware, minimum_size=1024)
app.add_middleware(ErrorEnvelopeMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "Content-Length", "x-request-id"],
    max_age=3600,
)


# Universal health endpoint (always present)
@app.get("/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


if __name__ == "__main__":
    uvicorn.run("remember.main:app", host="0.0.0.0", port=8000, reload=settings.APP_ENV == "development")
