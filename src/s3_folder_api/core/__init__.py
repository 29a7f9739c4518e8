"""Core utilities and shared components for s3-folder-api."""

from .config import Settings, settings
from .exceptions import FolderAPIError, ValidationError
from .observability import (
    bind_request_context,
    clear_request_context,
    get_logger,
    get_tracer,
)

__all__ = [
    "Settings",
    "settings",
    "FolderAPIError",
    "ValidationError",
    "bind_request_context",
    "clear_request_context",
    "get_logger",
    "get_tracer",
]
