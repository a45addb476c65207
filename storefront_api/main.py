"""
Storefront API

REST proxy for the Shopify Storefront API. Provides clean JSON
endpoints for products and cart operations, documented with Swagger.
"""

import os
import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from storefront.config import settings
from storefront.errors import StorefrontError, ConfigurationError

from . import dependencies
from .middleware import RequestLoggingMiddleware
from .routes import products_router, cart_router

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Storefront API starting up...")
    logger.info(f"Storefront endpoint: {settings.storefront_endpoint or 'not configured'}")
    logger.info(f"Swagger docs at http://localhost:{settings.api_port}/api/docs")

    yield

    logger.info("Storefront API shutting down...")
    if dependencies.storefront_client:
        await dependencies.storefront_client.close()
        dependencies.storefront_client = None


# Create FastAPI app
app = FastAPI(
    title="Storefront API",
    description="REST API proxy for the Shopify Storefront API. "
    "Provides clean JSON endpoints for products and cart operations.",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url=None,
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    """Upstream failures the routes do not map themselves"""
    status_code = 500 if isinstance(exc, ConfigurationError) else 502
    logger.error(f"API Error: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storefront_configured": bool(settings.storefront_endpoint),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
