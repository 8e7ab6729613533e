"""FastAPI application factory.

Lifespan
--------
On startup the app checks that ``settings.tmp_dir`` exists.  The directory
is never created by the service; a missing one is logged so the first
failed conversion is not a surprise.

Routers
-------
    /capture   — render a remote page to PNG
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from pagecap import __version__
from pagecap.api.routers import capture as capture_router
from pagecap.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Warn at startup when the temp directory is missing."""
    if not settings.tmp_dir_ready():
        logger.warning(
            "[STARTUP] Temp directory %s does not exist; conversions will fail until it is created.",
            settings.tmp_dir.resolve(),
        )
    yield


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="pagecap",
        description=(
            "Renders a remote web page, or a tag-selected fragment of it, "
            "to a PNG image using wkhtmltoimage."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(capture_router.router, prefix="/capture", tags=["capture"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn pagecap.api.app:app --port 8080
app = create_app()
