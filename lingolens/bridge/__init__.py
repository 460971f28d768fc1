"""HTTP translation bridge (FastAPI)."""

from .app import GENERIC_ERROR, create_app

__all__ = [
    "GENERIC_ERROR",
    "create_app",
]
