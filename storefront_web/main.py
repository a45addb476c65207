"""
Web Storefront Application

Product catalog and shopping cart pages backed by the Shopify
Storefront API. Each visitor session owns one cart synchronizer.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from storefront.config import settings
from storefront.errors import StorefrontError, ConfigurationError

from . import dependencies
from .routes import cart_router, pages_router

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
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Storefront endpoint: {settings.storefront_endpoint or 'not configured'}")
    logger.info(f"Cart handles stored in {os.path.abspath(settings.handle_store_dir)}")

    yield

    logger.info(f"{settings.app_name} shutting down...")
    if dependencies.storefront_client:
        await dependencies.storefront_client.close()
        dependencies.storefront_client = None


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Headless storefront: product catalog and cart",
    version="1.0.0",
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

# Include routers
app.include_router(cart_router)
app.include_router(pages_router)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    """Catalog failures; cart failures are reported in the cart state instead"""
    status_code = 500 if isinstance(exc, ConfigurationError) else 502
    logger.error(f"Storefront error on {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "storefront-web",
        "storefront_configured": bool(settings.storefront_endpoint),
        "active_sessions": len(dependencies.session_manager.sessions) if dependencies.session_manager else 0,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront_web.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
