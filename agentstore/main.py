"""
agentstore Backend - FastAPI Application

Read-only HTTP surface over the open store trees of this process.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

from . import __version__
from .config import settings
from .exceptions import StoreError, StoreNotFoundError
from .services.store_directory import StoreDirectory
from .api.stores import router as stores_router


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(directory: Optional[StoreDirectory] = None) -> FastAPI:
    """
    Build the application.

    Args:
        directory: Store directory to serve (a new empty one by default).
            Every store in it is closed on shutdown.
    """
    store_directory = directory if directory is not None else StoreDirectory()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting agentstore server...")
        logger.info(f"Demo mode: {settings.demo_mode}")

        yield

        logger.info("Shutting down agentstore server...")
        store_directory.close_all()

    app = FastAPI(
        title="agentstore API",
        description="Offer catalogs and payment request capabilities of mounted stores",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.directory = store_directory

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        """
        Handle store errors with the standard error body.

        StoreNotFoundError maps to 404, every other StoreError to 400.
        """
        logger.warning(
            f"Store error: {exc.error_code} - {exc.message}",
            extra={"details": exc.details}
        )
        status_code = 404 if isinstance(exc, StoreNotFoundError) else 400
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        """Log unexpected errors; return a generic message."""
        logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error_code": "internal_error",
                "message": "An unexpected error occurred",
                "details": {"error_type": type(exc).__name__} if settings.demo_mode else {}
            }
        )

    @app.get("/api/health")
    async def health_check():
        """Server status, version and number of open stores."""
        return {
            "status": "healthy",
            "version": __version__,
            "demo_mode": settings.demo_mode,
            "open_stores": len(store_directory),
        }

    app.include_router(stores_router, prefix="/api/stores", tags=["Stores"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "agentstore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.demo_mode,
        log_level=settings.log_level.lower()
    )
