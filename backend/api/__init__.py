"""
Privacy Dashboard API package.

Provides the FastAPI application for the privacy dashboard's
authentication backend.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
