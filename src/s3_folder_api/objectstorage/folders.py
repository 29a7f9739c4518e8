"""Folder duplicate, rename and delete on top of a flat key space.

Folders do not exist in the object store; a folder is the set of keys that
start with ``"<folder>/"``. Each operation therefore lists the folder (one
page), then acts on every listed key:

- duplicate: copy each key to its substituted key
- rename: copy each key, then delete the original
- delete: one bulk delete of all listed keys

None of these are atomic. A failure part way through a rename leaves some
objects migrated and others still at the source, and nothing is rolled back.
"""

from dataclasses import dataclass

from s3_folder_api.core import get_logger, get_tracer
from s3_folder_api.core.exceptions import FolderNotFoundError, FolderTransformError
from s3_folder_api.objectstorage.bucket import ObjectStore
from s3_folder_api.objectstorage.concurrency import fan_out

logger = get_logger(__name__)
tracer = get_tracer(__name__)


def replace_prefix(key: str, source: str, target: str) -> str:
    """Substitute the first occurrence of ``source`` in ``key`` with ``target``.

    Later occurrences are left alone, so ``replace_prefix("a/sub/a/f", "a", "b")``
    is ``"b/sub/a/f"``.
    """
    return key.replace(source, target, 1)


@dataclass(frozen=True)
class FolderTransformResult:
    """Outcome of a successful duplicate or rename.

    Attributes:
        source_folder: Folder the objects were read from
        target_folder: Folder the objects were written to
        object_count: Number of objects copied (duplicate) or moved (rename)
        moved_keys: (old_key, new_key) pairs in listing order
    """

    source_folder: str
    target_folder: str
    object_count: int
    moved_keys: tuple[tuple[str, str], ...]


class FolderTransformEngine:
    """Duplicates, renames and deletes folders in one bucket."""

    def __init__(
        self,
        store: ObjectStore,
        max_concurrency: int = 16,
        max_keys: int = 1000,
    ):
        self.store = store
        self.max_concurrency = max_concurrency
        self.max_keys = max_keys

    def _list_folder(self, folder: str, missing_message: str) -> tuple[str, ...]:
        page = self.store.list_page(f"{folder}/", max_keys=self.max_keys)
        if not page.keys:
            raise FolderNotFoundError(missing_message)
        return page.keys

    def duplicate(self, source_folder: str, target_folder: str) -> FolderTransformResult:
        """Copy every object under ``source_folder`` into ``target_folder``.

        Raises:
            FolderNotFoundError: If the source folder has no objects
            FolderTransformError: If any copy fails; finished copies are kept
        """
        with tracer.start_as_current_span(
            "folder.duplicate",
            attributes={"source_folder": source_folder, "target_folder": target_folder},
        ) as span:
            keys = self._list_folder(
                source_folder, "Source folder is empty or not found"
            )
            span.set_attribute("object_count", len(keys))
            logger.info(
                "Duplicating folder",
                source=source_folder,
                target=target_folder,
                object_count=len(keys),
            )

            def copy(key: str) -> str:
                new_key = replace_prefix(key, source_folder, target_folder)
                self.store.copy_object(key, new_key)
                return new_key

            outcome = fan_out(keys, copy, self.max_concurrency)
            if not outcome.ok:
                raise FolderTransformError(
                    f"Failed to duplicate folder '{source_folder}' to "
                    f"'{target_folder}': {outcome.error}",
                    completed=[key for key, _ in outcome.completed],
                    failed_key=outcome.failed_item,
                ) from outcome.error

            logger.info(
                "Folder duplicated",
                source=source_folder,
                target=target_folder,
                object_count=len(keys),
            )
            return FolderTransformResult(
                source_folder=source_folder,
                target_folder=target_folder,
                object_count=len(keys),
                moved_keys=tuple(outcome.completed),
            )

    def rename(self, source_folder: str, target_folder: str) -> FolderTransformResult:
        """Move every object under ``source_folder`` into ``target_folder``.

        Each object is copied and then its original deleted. Pairs for
        different objects run concurrently.

        Raises:
            FolderNotFoundError: If the source folder has no objects
            FolderTransformError: If any copy or delete fails; the folder is
                left in a mixed state and ``completed`` lists the moved keys
        """
        with tracer.start_as_current_span(
            "folder.rename",
            attributes={"source_folder": source_folder, "target_folder": target_folder},
        ) as span:
            keys = self._list_folder(
                source_folder, "Source folder is empty or not found"
            )
            span.set_attribute("object_count", len(keys))
            logger.info(
                "Renaming folder",
                source=source_folder,
                target=target_folder,
                object_count=len(keys),
            )

            def move(key: str) -> str:
                new_key = replace_prefix(key, source_folder, target_folder)
                self.store.copy_object(key, new_key)
                self.store.delete_object(key)
                return new_key

            outcome = fan_out(keys, move, self.max_concurrency)
            if not outcome.ok:
                logger.error(
                    "Folder rename left a mixed state",
                    source=source_folder,
                    target=target_folder,
                    migrated=len(outcome.completed),
                    not_started=len(outcome.skipped),
                    failed_key=outcome.failed_item,
                )
                raise FolderTransformError(
                    f"Failed to rename folder '{source_folder}' to "
                    f"'{target_folder}': {outcome.error}",
                    completed=[key for key, _ in outcome.completed],
                    failed_key=outcome.failed_item,
                ) from outcome.error

            logger.info(
                "Folder renamed",
                source=source_folder,
                target=target_folder,
                object_count=len(outcome.completed),
            )
            return FolderTransformResult(
                source_folder=source_folder,
                target_folder=target_folder,
                object_count=len(outcome.completed),
                moved_keys=tuple(outcome.completed),
            )

    def delete_folder(self, folder: str) -> int:
        """Delete every object under ``folder`` with one bulk request.

        Returns:
            Number of objects deleted

        Raises:
            FolderNotFoundError: If the folder has no objects
        """
        with tracer.start_as_current_span(
            "folder.delete", attributes={"folder": folder}
        ):
            keys = self._list_folder(folder, "No files found in the folder")
            deleted = self.store.delete_objects(keys)
            logger.info("Folder deleted", folder=folder, object_count=deleted)
            return deleted
