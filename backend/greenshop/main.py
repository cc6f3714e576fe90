"""
GreenShop Backend - FastAPI Application

Serves the eco product catalog, records authenticated users' purchases and
exposes Algolia-backed trending recommendations.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlparse
import logging
import re

from .config import settings
from .context import AppContext, build_context
from .exceptions import ShopError
from .db.init_db import describe_database, initialize_database
from .api.products import router as products_router
from .api.purchases import router as purchases_router
from .api.recommendations import router as recommendations_router


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_origin_regex(origins: List[str]) -> str:
    """
    Regex matching each allowed origin's host and any of its subdomains,
    on any scheme and port.
    """
    hosts = []
    for origin in origins:
        host = urlparse(origin).hostname
        if host:
            hosts.append(re.escape(host))
    if not hosts:
        return r"^$"
    return r"^https?://([A-Za-z0-9-]+\.)*(" + "|".join(hosts) + r")(:\d+)?$"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: Build the application context (unless one was injected), create tables
    - Shutdown: Dispose the database engine
    """
    # Startup
    logger.info("Starting GreenShop backend server...")

    if getattr(app.state, "context", None) is None:
        app.state.context = build_context(settings)
    ctx: AppContext = app.state.context

    logger.info(f"Database: {describe_database(ctx.settings.database_url)}")
    try:
        await initialize_database(ctx.engine)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    logger.info(f"Allowed origins: {', '.join(ctx.settings.allowed_origin_list)}")
    logger.info("Server startup complete")

    yield

    # Shutdown
    logger.info("Shutting down GreenShop backend server...")
    await ctx.engine.dispose()


async def shop_error_handler(request: Request, exc: ShopError):
    """
    Handle GreenShop errors with the standard {"error", "error_code", "details"} body.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def general_error_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unexpected errors.

    Logs full exception for debugging but returns generic message to client.
    """
    logger.error(f"Unexpected error: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "An unexpected error occurred",
            "error_code": "internal_error",
        }
    )


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        context: Prebuilt context (tests); built from settings at startup when omitted
    """
    app = FastAPI(
        title="GreenShop API",
        description="Eco product catalog, purchase history and trending recommendations",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.context = context

    origins = (context.settings if context else settings).allowed_origin_list

    # Configured origins and their subdomains
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=build_origin_regex(origins),
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(ShopError, shop_error_handler)
    app.add_exception_handler(Exception, general_error_handler)

    @app.get("/api/health")
    async def health_check():
        """
        Health check endpoint for monitoring and load balancers.
        """
        return {
            "status": "UP",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": (app.state.context.settings if app.state.context else settings).environment,
        }

    app.include_router(products_router, prefix="/api", tags=["Products"])
    app.include_router(purchases_router, prefix="/api", tags=["Purchases"])
    app.include_router(recommendations_router, prefix="/api", tags=["Recommendations"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "greenshop.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
