"""A REST façade over an S3-compatible object store.

Folders are emulated with key prefixes. The package exposes JSON file CRUD,
bulk uploads, presigned download URLs and folder duplicate/rename/delete,
either over HTTP (``s3_folder_api.api``) or directly from Python:

    >>> from s3_folder_api import FolderTransformEngine, ObjectStore, S3ClientConfig
    >>> store = ObjectStore.from_config(S3ClientConfig(bucket_name="assets"))
    >>> FolderTransformEngine(store).duplicate("reports", "reports-2024")

Folder operations are not atomic; see ``s3_folder_api.objectstorage.folders``.
"""

__version__ = "0.1.0"

from .objectstorage import (
    FileOperations,
    FolderTransformEngine,
    FolderTransformResult,
    ObjectStore,
    S3ClientConfig,
    replace_prefix,
)

__all__ = [
    "FileOperations",
    "FolderTransformEngine",
    "FolderTransformResult",
    "ObjectStore",
    "S3ClientConfig",
    "replace_prefix",
]
