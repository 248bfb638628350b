"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from flamingbird.api import app

    uvicorn flamingbird.api:app --reload
"""

from flamingbird.api.app import app, create_app

__all__ = ["app", "create_app"]
