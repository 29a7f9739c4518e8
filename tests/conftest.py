"""Test configuration and fixtures for s3-folder-api."""

import boto3
import pytest
from moto import mock_aws

from s3_folder_api.core.config import Settings
from s3_folder_api.objectstorage import (
    FileOperations,
    FolderTransformEngine,
    ObjectStore,
)

BUCKET = "test-bucket"
REGION = "us-east-1"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Point boto3 at fake credentials so nothing reaches a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


@pytest.fixture
def s3_client():
    """A mocked S3 client with an empty test bucket."""
    with mock_aws():
        client = boto3.client("s3", region_name=REGION)
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def store(s3_client):
    return ObjectStore(s3_client, BUCKET)


@pytest.fixture
def engine(store):
    return FolderTransformEngine(store, max_concurrency=4)


@pytest.fixture
def file_ops(store, engine):
    return FileOperations(store, engine, max_upload_files=3, default_expires=600)


@pytest.fixture
def settings():
    return Settings(
        bucket_name=BUCKET,
        region_name=REGION,
        max_concurrency=4,
        max_upload_files=3,
        presign_default_expires=600,
    )


def put_objects(client, keys, body=b"{}"):
    """Store ``keys`` in the test bucket."""
    for key in keys:
        client.put_object(Bucket=BUCKET, Key=key, Body=body)


def list_keys(client, prefix):
    """All keys under ``prefix`` in the test bucket."""
    response = client.list_objects_v2(Bucket=BUCKET, Prefix=prefix)
    return sorted(obj["Key"] for obj in response.get("Contents", []))
