"""
FastAPI application entry point
"""
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from backoffice.api.v1.api import api_router
from backoffice.core.config import settings
from backoffice.core.logger import logger
from backoffice.db.database import init_db
from backoffice.middleware.correlation import CorrelationMiddleware
from backoffice.utils.exceptions import StoreError

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(api_router, prefix="/api/v1")

# ── Local document files ──────────────────────────────────────────────────────
if settings.DOCUMENT_STORE_BACKEND == "local" and settings.PUBLIC_DOCUMENT_BASE_URL.startswith("/"):
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.PUBLIC_DOCUMENT_BASE_URL.rstrip("/"),
        StaticFiles(directory=settings.UPLOAD_DIR),
        name="documents",
    )

# ── Correlation ID middleware (must be added before CORS) ─────────────────────
app.add_middleware(CorrelationMiddleware)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)


# ── Errors ────────────────────────────────────────────────────────────────────
@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=503,
        content={"detail": f"Storage unavailable: {exc.message}"},
    )


@app.get("/")
def read_root():
    logger.info("Root endpoint accessed")
    return {"message": f"{settings.APP_NAME} API is running", "version": "1.0.0", "docs": "/docs"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


# ── Startup / Shutdown ────────────────────────────────────────────────────────

@app.on_event("startup")
def startup_event():
    if settings.AUTO_CREATE_TABLES:
        init_db()
    logger.info("%s API started", settings.APP_NAME)


@app.on_event("shutdown")
def shutdown_event():
    logger.info("%s API shutdown", settings.APP_NAME)
