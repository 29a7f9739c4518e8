"""Bucket-scoped object store used by the folder and file operations.

Every call into boto3 goes through ``ObjectStore`` so that SDK failures are
translated into the package's exception hierarchy in one place:

- ``ClientError`` with a 404 / ``NoSuchKey`` / ``NotFound`` code becomes
  ``NotFoundError``
- any other ``ClientError`` or ``BotoCoreError`` becomes
  ``StorageOperationError``
"""

import json
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from s3_folder_api.core import get_logger
from s3_folder_api.core.exceptions import NotFoundError, StorageOperationError
from s3_folder_api.objectstorage.clients import S3ClientConfig, S3ClientManager

logger = get_logger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class ListingPage:
    """A single page returned by ``ListObjectsV2``.

    Attributes:
        prefix: Prefix the listing was made with
        keys: Object keys, in the order the provider returned them
        common_prefixes: Grouped prefixes when a delimiter was used
        is_truncated: True if the provider had more keys than one page holds
    """

    prefix: str
    keys: tuple[str, ...]
    common_prefixes: tuple[str, ...] = ()
    is_truncated: bool = False


class ObjectStore:
    """Thin wrapper around a boto3 S3 client bound to one bucket."""

    def __init__(self, client: Any, bucket: str):
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_config(cls, config: S3ClientConfig) -> "ObjectStore":
        """Create a store with a freshly built boto3 client."""
        manager = S3ClientManager(config)
        return cls(manager.client, config.bucket_name)

    @contextmanager
    def _translate_errors(self, action: str, key: str) -> Iterator[None]:
        try:
            yield
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                raise NotFoundError(f"Object not found: {key}") from e
            logger.error(
                "Storage call failed", action=action, key=key, code=code, error=str(e)
            )
            raise StorageOperationError(str(e)) from e
        except BotoCoreError as e:
            logger.error("Storage call failed", action=action, key=key, error=str(e))
            raise StorageOperationError(str(e)) from e

    def put_object(
        self, key: str, body: bytes, content_type: Optional[str] = None
    ) -> None:
        params: dict[str, Any] = {"Bucket": self.bucket, "Key": key, "Body": body}
        if content_type:
            params["ContentType"] = content_type
        with self._translate_errors("put_object", key):
            self.client.put_object(**params)
        logger.debug("Object stored", key=key, size=len(body))

    def put_json(self, key: str, content: Any) -> None:
        """Store ``content`` serialized as a JSON document."""
        self.put_object(key, json.dumps(content).encode("utf-8"), JSON_CONTENT_TYPE)

    def get_json(self, key: str) -> Any:
        """Fetch an object and parse it as JSON.

        Raises:
            NotFoundError: If the key does not exist
            StorageOperationError: If the call fails or the body is not JSON
        """
        with self._translate_errors("get_object", key):
            response = self.client.get_object(Bucket=self.bucket, Key=key)
            body = response["Body"].read()
        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageOperationError(f"Object '{key}' is not valid JSON: {e}")

    def head_object(self, key: str) -> dict[str, Any]:
        with self._translate_errors("head_object", key):
            return self.client.head_object(Bucket=self.bucket, Key=key)

    def delete_object(self, key: str) -> None:
        with self._translate_errors("delete_object", key):
            self.client.delete_object(Bucket=self.bucket, Key=key)

    def delete_objects(self, keys: Sequence[str]) -> int:
        """Delete ``keys`` with a single bulk request.

        Returns:
            Number of keys deleted

        Raises:
            StorageOperationError: If the request fails or any key is rejected
        """
        if not keys:
            return 0
        with self._translate_errors("delete_objects", keys[0]):
            response = self.client.delete_objects(
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": key} for key in keys]},
            )
        errors = response.get("Errors") or []
        if errors:
            first = errors[0]
            raise StorageOperationError(
                f"Failed to delete {len(errors)} of {len(keys)} objects "
                f"(first: {first.get('Key')}: {first.get('Message')})"
            )
        return len(keys)

    def copy_object(self, source_key: str, target_key: str) -> None:
        """Server-side copy of ``source_key`` to ``target_key`` in the bucket."""
        with self._translate_errors("copy_object", source_key):
            self.client.copy_object(
                Bucket=self.bucket,
                CopySource={"Bucket": self.bucket, "Key": source_key},
                Key=target_key,
            )

    def list_page(
        self,
        prefix: str = "",
        delimiter: Optional[str] = None,
        max_keys: int = 1000,
    ) -> ListingPage:
        """List a single page of keys under ``prefix``.

        Continuation tokens are never followed; keys beyond the first page
        are not returned.
        """
        params: dict[str, Any] = {
            "Bucket": self.bucket,
            "Prefix": prefix,
            "MaxKeys": max_keys,
        }
        if delimiter:
            params["Delimiter"] = delimiter

        with self._translate_errors("list_objects_v2", prefix):
            response = self.client.list_objects_v2(**params)

        page = ListingPage(
            prefix=prefix,
            keys=tuple(obj["Key"] for obj in response.get("Contents", [])),
            common_prefixes=tuple(
                p["Prefix"] for p in response.get("CommonPrefixes", [])
            ),
            is_truncated=bool(response.get("IsTruncated", False)),
        )
        if page.is_truncated:
            logger.warning(
                "Listing truncated to a single page",
                prefix=prefix,
                returned=len(page.keys),
            )
        return page

    def presign_get(self, key: str, expires_in: int) -> str:
        """Return a presigned GET URL for ``key`` valid for ``expires_in`` seconds."""
        with self._translate_errors("generate_presigned_url", key):
            return self.client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
