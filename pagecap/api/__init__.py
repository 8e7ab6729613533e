"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from pagecap.api import app

    uvicorn pagecap.api:app --port 8080
"""

from pagecap.api.app import app

__all__ = ["app"]
