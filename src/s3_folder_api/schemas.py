"""Request and response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FileWriteRequest(_CamelModel):
    """Body of create-file and update-file."""

    folder: str = Field(..., min_length=1, description="Folder holding the file")
    file_name: str = Field(..., alias="fileName", min_length=1)
    content: Any = Field(None, description="JSON content to store")


class FileDeleteRequest(_CamelModel):
    """Body of delete-file. A ``fileName`` of ``*`` deletes the whole folder."""

    folder: str = Field(..., min_length=1)
    file_name: str = Field(..., alias="fileName", min_length=1)


class FolderTransformRequest(_CamelModel):
    """Body of duplicate-folder and rename-folder."""

    source_folder: str = Field(..., alias="sourceFolder", min_length=1)
    target_folder: str = Field(..., alias="targetFolder", min_length=1)


class MessageResponse(BaseModel):
    message: str


class FolderTransformResponse(BaseModel):
    message: str
    count: int


class FileListResponse(BaseModel):
    files: list[str]
    folders: list[str]


class UploadResponse(_CamelModel):
    message: str
    file_names: list[str] = Field(..., alias="fileNames")


class FileUrlResponse(_CamelModel):
    file_key: str = Field(..., alias="fileKey")
    url: str


class HealthResponse(BaseModel):
    status: str
    bucket: str
