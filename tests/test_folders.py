"""Tests for folder duplicate, rename and delete."""

import pytest

from conftest import BUCKET, list_keys, put_objects
from s3_folder_api.core.exceptions import (
    FolderNotFoundError,
    FolderTransformError,
    StorageOperationError,
)
from s3_folder_api.objectstorage import (
    FolderTransformEngine,
    ObjectStore,
    replace_prefix,
)

DOCS = [
    "docs/a.json",
    "docs/b.json",
    "docs/c.json",
    "docs/d.json",
    "docs/e.json",
]


class FlakyStore(ObjectStore):
    """Object store that fails copies or deletes of chosen keys."""

    def __init__(self, client, bucket, fail_copy=(), fail_delete=()):
        super().__init__(client, bucket)
        self.fail_copy = set(fail_copy)
        self.fail_delete = set(fail_delete)

    def copy_object(self, source_key, target_key):
        if source_key in self.fail_copy:
            raise StorageOperationError(f"injected copy failure for {source_key}")
        super().copy_object(source_key, target_key)

    def delete_object(self, key):
        if key in self.fail_delete:
            raise StorageOperationError(f"injected delete failure for {key}")
        super().delete_object(key)


class TestReplacePrefix:
    """Test key substitution."""

    def test_replaces_leading_folder(self):
        assert replace_prefix("a/file.json", "a", "b") == "b/file.json"

    def test_only_first_occurrence_is_replaced(self):
        """Nested folders with the same name keep their name."""
        assert replace_prefix("a/sub/a/file", "a", "b") == "b/sub/a/file"

    def test_target_may_contain_slashes(self):
        assert replace_prefix("a/f", "a", "x/y") == "x/y/f"


class TestDuplicate:
    """Test folder duplication."""

    def test_duplicate_copies_every_object(self, s3_client, engine):
        """Target gets N objects, source is unchanged."""
        put_objects(s3_client, DOCS)

        result = engine.duplicate("docs", "backup")

        assert result.object_count == 5
        assert list_keys(s3_client, "backup/") == [
            k.replace("docs", "backup", 1) for k in DOCS
        ]
        assert list_keys(s3_client, "docs/") == DOCS

    def test_duplicate_preserves_content(self, s3_client, engine):
        s3_client.put_object(Bucket=BUCKET, Key="docs/a.json", Body=b'{"x": 1}')

        engine.duplicate("docs", "copy")

        body = s3_client.get_object(Bucket=BUCKET, Key="copy/a.json")["Body"].read()
        assert body == b'{"x": 1}'

    def test_duplicate_nested_same_name(self, s3_client, engine):
        put_objects(s3_client, ["a/sub/a/file"])

        engine.duplicate("a", "b")

        assert list_keys(s3_client, "b/") == ["b/sub/a/file"]

    def test_duplicate_missing_folder(self, s3_client, engine):
        """Nothing is created when the source has no objects."""
        with pytest.raises(FolderNotFoundError, match="empty or not found"):
            engine.duplicate("missing", "target")

        assert list_keys(s3_client, "target/") == []

    def test_duplicate_ignores_sibling_with_common_stem(self, s3_client, engine):
        """Listing uses 'folder/' so 'docs-old/' is not part of 'docs'."""
        put_objects(s3_client, ["docs/a.json", "docs-old/b.json"])

        result = engine.duplicate("docs", "copy")

        assert result.object_count == 1
        assert list_keys(s3_client, "copy/") == ["copy/a.json"]

    def test_duplicate_partial_failure_keeps_finished_copies(self, s3_client):
        put_objects(s3_client, DOCS)
        store = FlakyStore(s3_client, BUCKET, fail_copy={"docs/c.json"})
        engine = FolderTransformEngine(store, max_concurrency=1)

        with pytest.raises(FolderTransformError) as exc_info:
            engine.duplicate("docs", "copy")

        assert exc_info.value.failed_key == "docs/c.json"
        assert exc_info.value.completed == ["docs/a.json", "docs/b.json"]
        assert list_keys(s3_client, "copy/") == ["copy/a.json", "copy/b.json"]
        assert list_keys(s3_client, "docs/") == DOCS


class TestRename:
    """Test folder rename."""

    def test_rename_moves_every_object(self, s3_client, engine):
        """Target gets N objects, source ends empty."""
        put_objects(s3_client, DOCS)

        result = engine.rename("docs", "archive")

        assert result.object_count == 5
        assert len(result.moved_keys) == 5
        assert list_keys(s3_client, "archive/") == [
            k.replace("docs", "archive", 1) for k in DOCS
        ]
        assert list_keys(s3_client, "docs/") == []

    def test_rename_preserves_content(self, s3_client, engine):
        s3_client.put_object(Bucket=BUCKET, Key="docs/a.json", Body=b'{"y": 2}')

        engine.rename("docs", "moved")

        body = s3_client.get_object(Bucket=BUCKET, Key="moved/a.json")["Body"].read()
        assert body == b'{"y": 2}'

    def test_rename_only_first_occurrence(self, s3_client, engine):
        put_objects(s3_client, ["a/sub/a/file"])

        engine.rename("a", "b")

        assert list_keys(s3_client, "b/") == ["b/sub/a/file"]
        assert list_keys(s3_client, "a/") == []

    def test_rename_missing_folder(self, s3_client, engine):
        with pytest.raises(FolderNotFoundError):
            engine.rename("missing", "target")

        assert list_keys(s3_client, "target/") == []

    def test_rename_failure_leaves_mixed_state(self, s3_client):
        """Finished pairs stay migrated; the failed and later keys stay put."""
        put_objects(s3_client, DOCS)
        store = FlakyStore(s3_client, BUCKET, fail_copy={"docs/c.json"})
        engine = FolderTransformEngine(store, max_concurrency=1)

        with pytest.raises(FolderTransformError) as exc_info:
            engine.rename("docs", "archive")

        error = exc_info.value
        assert error.failed_key == "docs/c.json"
        assert error.completed == ["docs/a.json", "docs/b.json"]
        assert list_keys(s3_client, "archive/") == [
            "archive/a.json",
            "archive/b.json",
        ]
        assert list_keys(s3_client, "docs/") == [
            "docs/c.json",
            "docs/d.json",
            "docs/e.json",
        ]

    def test_rename_failure_with_concurrency(self, s3_client):
        """Every object is either fully migrated or still only at the source."""
        put_objects(s3_client, DOCS)
        store = FlakyStore(s3_client, BUCKET, fail_copy={"docs/b.json"})
        engine = FolderTransformEngine(store, max_concurrency=8)

        with pytest.raises(FolderTransformError) as exc_info:
            engine.rename("docs", "archive")

        completed = set(exc_info.value.completed)
        source = set(list_keys(s3_client, "docs/"))
        target = set(list_keys(s3_client, "archive/"))
        assert "docs/b.json" in source
        assert "archive/b.json" not in target
        for key in DOCS:
            moved = key.replace("docs", "archive", 1)
            if key in completed:
                assert moved in target and key not in source
            else:
                assert key in source

    def test_rename_delete_failure_leaves_object_at_both_keys(self, s3_client):
        put_objects(s3_client, ["docs/a.json"])
        store = FlakyStore(s3_client, BUCKET, fail_delete={"docs/a.json"})
        engine = FolderTransformEngine(store, max_concurrency=2)

        with pytest.raises(FolderTransformError, match="injected delete failure"):
            engine.rename("docs", "archive")

        assert list_keys(s3_client, "docs/") == ["docs/a.json"]
        assert list_keys(s3_client, "archive/") == ["archive/a.json"]


class TestDeleteFolder:
    """Test wildcard folder delete."""

    def test_delete_folder_removes_all(self, s3_client, engine):
        put_objects(s3_client, DOCS + ["other/keep.json"])

        deleted = engine.delete_folder("docs")

        assert deleted == 5
        assert list_keys(s3_client, "docs/") == []
        assert list_keys(s3_client, "other/") == ["other/keep.json"]

    def test_delete_empty_folder_reports_not_found(self, s3_client, engine):
        with pytest.raises(FolderNotFoundError, match="No files found"):
            engine.delete_folder("docs")


class TestListingLimit:
    """Test single-page listing."""

    def test_transform_acts_on_first_page_only(self, s3_client, store):
        put_objects(s3_client, DOCS)
        engine = FolderTransformEngine(store, max_concurrency=2, max_keys=2)

        result = engine.duplicate("docs", "copy")

        assert result.object_count == 2
        assert list_keys(s3_client, "copy/") == ["copy/a.json", "copy/b.json"]
