"""
Inventory Tracker Service
Per-user inventory records with statistics and file exports
"""

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import subprocess
import os
import sys

# Add shared modules to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../../"))

from shared.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from app.api.routes import router as inventory_router
from app.application.errors import InventoryError
from app.auth_local import create_access_token
from app.core_settings import get_settings
from app.infrastructure.db import init_models, DATABASE_URL

# Service configuration
SERVICE_NAME = "inventory-service"
SERVICE_VERSION = os.getenv("SERVICE_VERSION", "1.0.0")
SERVICE_DESCRIPTION = "Inventory tracker: per-user records, statistics and exports"

settings = get_settings()

# Setup structured logging
setup_logging(
    service_name=SERVICE_NAME,
    level=settings.LOG_LEVEL,
    log_file=settings.LOG_FILE,
)

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    logger.info(f"Starting {SERVICE_NAME} version {SERVICE_VERSION}")

    # Startup
    try:
        logger.info("Running database migrations")
        result = subprocess.run(
            ["alembic", "upgrade", "head"],
            cwd=os.path.join(os.path.dirname(__file__), ".."),
            capture_output=True,
            text=True,
            check=False
        )
        if result.returncode != 0:
            logger.warning(f"Migration output: {result.stderr}")
        else:
            logger.info("Database migrations completed")
    except OSError as e:
        logger.error(f"Migration error: {e}")

    try:
        init_models()
        logger.info("Database models initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database models: {e}")
        raise

    logger.info(f"{SERVICE_NAME} started successfully")

    yield

    # Shutdown
    logger.info(f"Shutting down {SERVICE_NAME}")

# Create FastAPI application
app = FastAPI(
    title=SERVICE_NAME,
    description=SERVICE_DESCRIPTION,
    version=SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    """Translate core errors into the client envelope."""
    content = {"success": False, "message": exc.message}
    if exc.data is not None:
        content["data"] = exc.data
    logger.info(
        f"Request rejected: {exc.message}",
        extra={'extra_fields': {'status_code': exc.status_code, 'error': type(exc).__name__}}
    )
    return JSONResponse(status_code=exc.status_code, content=content)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed query strings or bodies, reported field by field."""
    errors = {}
    for error in exc.errors():
        field = str(error["loc"][-1]) if error.get("loc") else "request"
        errors.setdefault(field, error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": "Invalid request", "data": errors},
    )

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

# Initialize health checks
health_service = ServiceHealth(SERVICE_NAME, SERVICE_VERSION, database_url=DATABASE_URL)
health_router = health_service.create_health_router()
app.include_router(health_router)

# Include business logic routes
app.include_router(inventory_router)

@app.post("/auth/token", tags=["auth"])
async def issue_token(request: Request, username: str = Form(None)):
    """Issue a bearer token for ``username`` (development credential service)."""
    # Accept form field, JSON body, or query parameter for flexibility
    if username:
        chosen = username
    else:
        try:
            data = await request.json()
            chosen = data.get("username") if isinstance(data, dict) else None
        except ValueError:
            chosen = request.query_params.get("username")
    if not chosen:
        raise HTTPException(status_code=422, detail="username is required")
    return {"access_token": create_access_token(chosen), "token_type": "bearer"}

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "running",
        "docs": "/api/docs"
    }

@app.get("/info")
async def info():
    """Service information endpoint"""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": SERVICE_DESCRIPTION,
        "environment": os.getenv("ENVIRONMENT", "development"),
        "endpoints": {
            "inventory": "/inventory",
            "stats": "/inventory/stats",
            "export": "/inventory/export",
            "health": "/health",
            "ready": "/health/ready",
            "live": "/health/live",
            "metrics": "/metrics",
            "docs": "/api/docs"
        }
    }
