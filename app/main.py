"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import router
from .api.dependencies import get_store, get_translator
from .config import get_settings
from .store import MongoDocumentStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Suppress verbose logs
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    settings = get_settings()
    logger.info("Starting NL Mongo Search service...")

    store = get_store()
    if await store.ping():
        logger.info(f"Connected to MongoDB database: {settings.db_name}")
    else:
        logger.warning("MongoDB is not reachable; searches will fail until it is")

    translator = get_translator()
    if translator is None:
        logger.warning("OPENAI_API_KEY not set; every query will resolve to no-match")
    else:
        logger.info(f"Query translator ready: {translator!r}")

    logger.info("=" * 50)
    logger.info("🚀 SERVER READY - http://localhost:8000")
    logger.info("📚 API Docs: http://localhost:8000/docs")
    logger.info("=" * 50)

    yield

    # Shutdown
    logger.info("Shutting down NL Mongo Search service...")
    if translator is not None:
        await translator.close()
    await store.close()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Natural-language search over users, events and dating records in MongoDB",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(router, prefix="/api")

    # Custom validation error handler
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content={"detail": exc.errors()},
        )

    # Root-level health check for Kubernetes probes
    @app.get("/health")
    async def health(store: MongoDocumentStore = Depends(get_store)):
        healthy = await store.ping()
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "status": "healthy" if healthy else "unhealthy",
                "timestamp": time.time(),
                "database": "up" if healthy else "down",
            },
        )

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
