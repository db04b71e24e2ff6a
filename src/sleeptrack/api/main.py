"""FastAPI application factory."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import Response

from sleeptrack.api.routes import pages, sleep
from sleeptrack.store.sample_store import StorageError

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build and return the FastAPI app."""

    app = FastAPI(
        title="Sleep API",
        description="Sleep-stage ingest and nightly summary",
        version="0.1.0",
    )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return Response(status_code=503)

    app.include_router(sleep.router, prefix="/api", tags=["sleep"])
    app.include_router(pages.router, tags=["pages"])

    return app


# Module-level app instance for uvicorn
app = create_app()
