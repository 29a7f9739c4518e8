"""Object storage operations for S3-compatible services."""

from .bucket import ListingPage, ObjectStore
from .clients import S3ClientConfig, S3ClientManager
from .concurrency import FanOutResult, fan_out
from .files import FileOperations, FileUrl, FolderListing, UploadedFile
from .folders import FolderTransformEngine, FolderTransformResult, replace_prefix

__all__ = [
    "FanOutResult",
    "FileOperations",
    "FileUrl",
    "FolderListing",
    "FolderTransformEngine",
    "FolderTransformResult",
    "ListingPage",
    "ObjectStore",
    "S3ClientConfig",
    "S3ClientManager",
    "UploadedFile",
    "fan_out",
    "replace_prefix",
]
