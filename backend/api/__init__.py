"""
Tavern admin API package.

Provides the FastAPI application for user administration.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
