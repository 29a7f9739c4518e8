"""Exception hierarchy for s3-folder-api."""

from typing import Optional, Sequence


class FolderAPIError(Exception):
    """Base exception for all s3-folder-api errors."""

    pass


class ValidationError(FolderAPIError):
    """Raised when input or configuration validation fails."""

    pass


class NotFoundError(FolderAPIError):
    """Raised when an object does not exist."""

    pass


class FolderNotFoundError(NotFoundError):
    """Raised when no object exists under a folder prefix."""

    pass


class StorageOperationError(FolderAPIError):
    """Raised when a call to the object store fails."""

    pass


class FolderTransformError(StorageOperationError):
    """Raised when a folder duplicate or rename fails part way through.

    Objects listed in ``completed`` were fully processed before the failure
    and are left in place.
    """

    def __init__(
        self,
        message: str,
        completed: Sequence[str] = (),
        failed_key: Optional[str] = None,
    ):
        super().__init__(message)
        self.completed = list(completed)
        self.failed_key = failed_key
