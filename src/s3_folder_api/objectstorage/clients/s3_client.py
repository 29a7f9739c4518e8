"""S3 client configuration and management.

This module provides S3 client configuration and construction for the
bucket that backs the folder API. The same code talks to AWS S3, Cloudflare
R2 and MinIO; only ``endpoint_url`` and ``region_name`` differ.

Authentication Methods Supported:
    1. Explicit credentials (access_key_id, secret_access_key)
    2. AWS CLI profiles (aws_profile)
    3. IAM roles / environment variables (no explicit credentials)

Clients are built once per application and handed to the code that needs
them; nothing in the package reaches for a process-wide client.
"""

from typing import Any, Dict, Optional

import boto3
from botocore.client import Config
from pydantic import BaseModel, ConfigDict, Field

from s3_folder_api.core import get_logger
from s3_folder_api.core.config import Settings
from s3_folder_api.core.exceptions import ValidationError

logger = get_logger(__name__)


class S3ClientConfig(BaseModel):
    """Configuration for the S3 client and the bucket it serves.

    Example:
        # Cloudflare R2
        config = S3ClientConfig(
            bucket_name="assets",
            endpoint_url="https://<account>.r2.cloudflarestorage.com",
            access_key_id="...",
            secret_access_key="...",
        )

        # MinIO
        config = S3ClientConfig(
            bucket_name="assets",
            endpoint_url="http://localhost:9000",
            region_name="us-east-1",
            access_key_id="minioadmin",
            secret_access_key="minioadmin",
        )
    """

    model_config = ConfigDict(extra="forbid")

    bucket_name: str = Field(..., min_length=1, description="Bucket holding folders")
    access_key_id: Optional[str] = Field(None, description="Access key ID")
    secret_access_key: Optional[str] = Field(None, description="Secret access key")
    session_token: Optional[str] = Field(
        None, description="Session token for temporary credentials"
    )
    region_name: str = Field("auto", description="Region name ('auto' for R2)")
    endpoint_url: Optional[str] = Field(
        None, description="Custom S3 endpoint URL for S3-compatible services"
    )
    aws_profile: Optional[str] = Field(
        None, description="AWS CLI profile name to use for credentials"
    )
    max_pool_connections: int = Field(
        16, ge=1, description="Size of the HTTP connection pool"
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ClientConfig":
        """Build a client configuration from application settings.

        Raises:
            ValidationError: If no bucket name is configured
        """
        if not settings.bucket_name:
            raise ValidationError(
                "Bucket name is not configured "
                "(set S3_FOLDER_API_BUCKET_NAME or R2_BUCKET_NAME)"
            )
        return cls(
            bucket_name=settings.bucket_name,
            access_key_id=settings.access_key_id,
            secret_access_key=settings.secret_access_key,
            region_name=settings.region_name,
            endpoint_url=settings.endpoint_url,
            max_pool_connections=settings.max_concurrency,
        )


class S3ClientManager:
    """Manages the S3 client connection."""

    def __init__(self, config: S3ClientConfig):
        """Initialize S3 client manager.

        Args:
            config: S3 client configuration
        """
        self.config = config
        self._client = None
        logger.info(
            "S3 client manager initialized",
            region=config.region_name,
            bucket=config.bucket_name,
        )

    @property
    def client(self):
        """Get or create S3 client instance."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        """Create boto3 S3 client with the configured settings."""
        kwargs: Dict[str, Any] = {
            "region_name": self.config.region_name,
            "config": Config(
                signature_version="s3v4",
                max_pool_connections=self.config.max_pool_connections,
            ),
        }

        if self.config.endpoint_url:
            kwargs["endpoint_url"] = self.config.endpoint_url

        if self.config.aws_profile:
            session = boto3.Session(profile_name=self.config.aws_profile)
            client = session.client("s3", **kwargs)  # type: ignore
            logger.info(
                "S3 client created with profile", profile=self.config.aws_profile
            )
        else:
            if self.config.access_key_id and self.config.secret_access_key:
                kwargs.update(
                    {
                        "aws_access_key_id": self.config.access_key_id,
                        "aws_secret_access_key": self.config.secret_access_key,
                    }
                )
                if self.config.session_token:
                    kwargs["aws_session_token"] = self.config.session_token
                logger.info("S3 client created with explicit credentials")
            else:
                logger.info("S3 client created with default credential chain")

            client = boto3.client("s3", **kwargs)  # type: ignore

        return client
