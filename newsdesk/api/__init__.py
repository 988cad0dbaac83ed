"""HTTP API for topic searches."""

from .app import create_app

__all__ = ["create_app"]
