"""Configuration management for s3-folder-api."""

from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"
    otel_enabled: bool = False
    otel_service_name: str = "s3-folder-api"

    host: str = "0.0.0.0"
    port: int = Field(
        3000, validation_alias=AliasChoices("S3_FOLDER_API_PORT", "PORT")
    )
    cors_origins: str = "*"

    max_concurrency: int = Field(16, ge=1)
    max_upload_files: int = Field(50, ge=1)
    list_max_keys: int = Field(1000, ge=1, le=1000)
    presign_default_expires: int = Field(3600, ge=1)

    # Object storage, also readable from the R2/AWS variable names
    bucket_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("S3_FOLDER_API_BUCKET_NAME", "R2_BUCKET_NAME"),
    )
    endpoint_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("S3_FOLDER_API_ENDPOINT_URL", "R2_ENDPOINT")
    )
    region_name: str = "auto"
    access_key_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "S3_FOLDER_API_ACCESS_KEY_ID", "AWS_ACCESS_KEY_ID"
        ),
    )
    secret_access_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "S3_FOLDER_API_SECRET_ACCESS_KEY", "AWS_SECRET_ACCESS_KEY"
        ),
    )

    model_config = {
        "env_prefix": "S3_FOLDER_API_",
        "env_file": ".env",
        "extra": "ignore",
        "case_sensitive": False,
        "populate_by_name": True,
    }

    def origins(self) -> list[str]:
        """Return the configured CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
