"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from datetime import datetime
from pathlib import Path
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import src.api.dependencies as dependencies_module
from src.api.endpoints.admin import admin_api
from src.api.endpoints.balances import balances_api
from src.api.endpoints.contracts import contracts_api
from src.api.endpoints.jobs import jobs_api
from src.api.endpoints.profiles import profiles_api
from src.database.seed import seed_demo_data
from src.error_handler import ErrorHandler
from src.services.errors import MarketplaceError
from src.utils.config_loader import load_marketplace_config

# Setup logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Marketplace API",
    description="Contracts, jobs, payments and deposits between clients and contractors",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

config_path = os.getenv("MARKETPLACE_CONFIG")
marketplace_config = load_marketplace_config(Path(config_path) if config_path else None)

# Use the SQL store when DATABASE_URL is set, else the in-memory stub
if os.getenv("DATABASE_URL"):
    from src.database.store_real import MarketplaceStore

    marketplace_store = MarketplaceStore(
        connection_string=os.environ["DATABASE_URL"],
        isolation_level=marketplace_config.database.isolation_level,
        pool_size=marketplace_config.database.pool_size,
        max_overflow=marketplace_config.database.max_overflow,
    )
else:
    from src.database.store import MarketplaceStore

    marketplace_store = MarketplaceStore()

dependencies_module.marketplace_store = marketplace_store
dependencies_module.marketplace_config = marketplace_config

error_handler = ErrorHandler()

app.include_router(contracts_api)
app.include_router(jobs_api)
app.include_router(balances_api)
app.include_router(profiles_api)
app.include_router(admin_api)


# ============================================================================
# ERROR HANDLING
# ============================================================================
@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    status_code, body = error_handler.render(exc)
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    status_code, body = error_handler.render_validation(exc.errors())
    logger.info("Request validation failed: path=%s %s", request.url.path, body["message"])
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    body = error_handler.handle_exception(exc, context={"path": request.url.path, "method": request.method})
    return JSONResponse(status_code=500, content=body)


# ============================================================================
# ENDPOINTS
# ============================================================================
@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {"service": "Marketplace API", "status": "healthy", "version": "1.0.0", "timestamp": datetime.now().isoformat()}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check (database)."""
    db = dependencies_module.get_db()
    ok = db.ping()
    return {
        "status": "healthy" if ok else "degraded",
        "database": {"backend": type(db).__module__, "connected": ok},
        "timestamp": datetime.now().isoformat(),
    }


# ============================================================================
# STARTUP/SHUTDOWN EVENTS
# ============================================================================
@app.on_event("startup")
async def startup_event():
    """Initialize on startup"""
    logger.info("Starting Marketplace API...")

    # Log sanitized DB target details (no credentials) for connectivity debugging.
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        try:
            parsed = urlparse(db_url)
            logger.info(
                "DATABASE_URL target: scheme=%s host=%s port=%s db=%s isolation=%s",
                parsed.scheme,
                parsed.hostname,
                parsed.port,
                (parsed.path or "").lstrip("/"),
                marketplace_config.database.isolation_level,
            )
        except Exception as e:
            logger.warning("Could not parse DATABASE_URL for startup logging: %s", e)
    else:
        logger.info("DATABASE_URL not set; using in-memory marketplace store")

    marketplace_store.create_tables()
    logger.info("Database tables initialized")

    if os.getenv("SEED_DEMO_DATA", "").lower() in ("1", "true", "yes"):
        if marketplace_store.list_profiles():
            logger.info("Store already has profiles; skipping demo seed")
        else:
            seed_demo_data(marketplace_store)


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Marketplace API...")
