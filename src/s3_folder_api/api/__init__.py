"""HTTP API for folder and file operations."""

from .app import create_app

__all__ = ["create_app"]
