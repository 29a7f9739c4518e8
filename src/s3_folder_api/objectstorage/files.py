"""File-level operations: JSON documents, uploads, listings and URLs."""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from s3_folder_api.core import get_logger
from s3_folder_api.core.exceptions import (
    NotFoundError,
    StorageOperationError,
    ValidationError,
)
from s3_folder_api.objectstorage.bucket import ObjectStore
from s3_folder_api.objectstorage.concurrency import fan_out
from s3_folder_api.objectstorage.folders import FolderTransformEngine

logger = get_logger(__name__)

WILDCARD = "*"
DEFAULT_UPLOAD_FOLDER = "uploads"


def object_key(folder: str, file_name: str) -> str:
    return f"{folder}/{file_name}"


def folder_prefix(folder: Optional[str]) -> str:
    """Listing prefix for ``folder``; the bucket root when no folder is given."""
    return f"{folder}/" if folder else ""


@dataclass(frozen=True)
class UploadedFile:
    """A file received in a multipart upload."""

    filename: str
    content: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class FileUrl:
    key: str
    url: str


@dataclass(frozen=True)
class FolderListing:
    """Keys directly under a folder and its immediate sub-folders."""

    files: list[str]
    folders: list[str]


class FileOperations:
    """File operations against one bucket.

    Wildcard deletes are delegated to the folder engine so that both share
    the same list-then-bulk-delete behaviour.
    """

    def __init__(
        self,
        store: ObjectStore,
        folders: FolderTransformEngine,
        max_upload_files: int = 50,
        default_expires: int = 3600,
    ):
        self.store = store
        self.folders = folders
        self.max_upload_files = max_upload_files
        self.default_expires = default_expires

    def create_file(self, folder: str, file_name: str, content: Any) -> str:
        key = object_key(folder, file_name)
        self.store.put_json(key, content)
        logger.info("File created", key=key)
        return key

    def update_file(self, folder: str, file_name: str, content: Any) -> str:
        """Overwrite a JSON file; the object is created if it is missing."""
        key = object_key(folder, file_name)
        self.store.put_json(key, content)
        logger.info("File updated", key=key)
        return key

    def read_file(self, folder: str, file_name: str) -> Any:
        return self.store.get_json(object_key(folder, file_name))

    def delete_file(self, folder: str, file_name: str) -> int:
        """Delete one file, or every file in ``folder`` when ``file_name`` is ``*``.

        Returns:
            Number of objects deleted

        Raises:
            NotFoundError: If the file does not exist
            FolderNotFoundError: If a wildcard delete matches nothing
        """
        if file_name == WILDCARD:
            return self.folders.delete_folder(folder)

        key = object_key(folder, file_name)
        try:
            self.store.head_object(key)
        except NotFoundError:
            raise NotFoundError("File not found")
        self.store.delete_object(key)
        logger.info("File deleted", key=key)
        return 1

    def list_files(self, folder: Optional[str] = None) -> FolderListing:
        page = self.store.list_page(
            folder_prefix(folder), delimiter="/", max_keys=self.folders.max_keys
        )
        return FolderListing(files=list(page.keys), folders=list(page.common_prefixes))

    def list_folders(self) -> list[str]:
        """List the top-level folders of the bucket."""
        page = self.store.list_page("", delimiter="/", max_keys=self.folders.max_keys)
        return list(page.common_prefixes)

    def upload_files(
        self, files: Sequence[UploadedFile], folder: Optional[str] = None
    ) -> list[str]:
        """Store uploaded files under ``folder`` (``uploads`` by default).

        Returns:
            The uploaded file names, in request order

        Raises:
            ValidationError: If no files or too many files are given
            StorageOperationError: If any upload fails
        """
        if not files:
            raise ValidationError("No files uploaded")
        if len(files) > self.max_upload_files:
            raise ValidationError(
                f"Too many files. Maximum {self.max_upload_files} files allowed."
            )

        folder = folder or DEFAULT_UPLOAD_FOLDER

        def put(upload: UploadedFile) -> str:
            key = object_key(folder, upload.filename)
            self.store.put_object(key, upload.content, upload.content_type)
            return key

        outcome = fan_out(list(files), put, self.folders.max_concurrency)
        if not outcome.ok:
            raise StorageOperationError(
                f"Failed to upload '{outcome.failed_item.filename}': {outcome.error}"
            ) from outcome.error

        logger.info("Files uploaded", folder=folder, file_count=len(files))
        return [upload.filename for upload in files]

    def get_file_urls(
        self, folder: Optional[str] = None, expires: Optional[int] = None
    ) -> list[FileUrl]:
        """Mint a presigned GET URL for every object under ``folder``.

        ``expires`` is in seconds; ``default_expires`` applies when omitted.
        """
        if expires is not None and expires <= 0:
            raise ValidationError(f"expires must be a positive integer, got {expires}")

        expires_in = expires or self.default_expires
        page = self.store.list_page(
            folder_prefix(folder), max_keys=self.folders.max_keys
        )
        urls = [
            FileUrl(key=key, url=self.store.presign_get(key, expires_in))
            for key in page.keys
        ]
        logger.info(
            "Presigned URLs generated",
            folder=folder,
            url_count=len(urls),
            expires_in=expires_in,
        )
        return urls
