"""HTTP routes for files and folders.

Handlers are plain ``def`` functions: every storage call is a blocking boto3
call, so FastAPI runs them on its threadpool. Errors raised by the storage
layer are turned into responses by the handlers registered in ``app.py``.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from s3_folder_api.objectstorage import (
    FileOperations,
    FolderTransformEngine,
    UploadedFile,
)
from s3_folder_api.schemas import (
    FileDeleteRequest,
    FileListResponse,
    FileUrlResponse,
    FileWriteRequest,
    FolderTransformRequest,
    FolderTransformResponse,
    HealthResponse,
    MessageResponse,
    UploadResponse,
)

from .dependencies import get_file_operations, get_folder_engine

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(files: FileOperations = Depends(get_file_operations)):
    return HealthResponse(status="ok", bucket=files.store.bucket)


@router.post("/create-file", status_code=201, response_model=MessageResponse)
def create_file(
    body: FileWriteRequest, files: FileOperations = Depends(get_file_operations)
):
    files.create_file(body.folder, body.file_name, body.content)
    return MessageResponse(message="File created successfully")


@router.put("/update-file", response_model=MessageResponse)
def update_file(
    body: FileWriteRequest, files: FileOperations = Depends(get_file_operations)
):
    files.update_file(body.folder, body.file_name, body.content)
    return MessageResponse(message="File updated successfully")


@router.get("/read-file")
def read_file(
    folder: str = Query(...),
    file_name: str = Query(..., alias="fileName"),
    files: FileOperations = Depends(get_file_operations),
) -> Any:
    return files.read_file(folder, file_name)


@router.delete("/delete-file", response_model=MessageResponse)
def delete_file(
    body: FileDeleteRequest, files: FileOperations = Depends(get_file_operations)
):
    deleted = files.delete_file(body.folder, body.file_name)
    if body.file_name == "*":
        return MessageResponse(message=f"Deleted {deleted} files successfully")
    return MessageResponse(message="File deleted successfully")


@router.get("/list-files", response_model=FileListResponse)
def list_files(
    folder: Optional[str] = Query(None),
    files: FileOperations = Depends(get_file_operations),
):
    listing = files.list_files(folder)
    return FileListResponse(files=listing.files, folders=listing.folders)


@router.get("/list-folders", response_model=list[str])
def list_folders(files: FileOperations = Depends(get_file_operations)):
    return files.list_folders()


@router.post(
    "/duplicate-folder", status_code=201, response_model=FolderTransformResponse
)
def duplicate_folder(
    body: FolderTransformRequest,
    folders: FolderTransformEngine = Depends(get_folder_engine),
):
    result = folders.duplicate(body.source_folder, body.target_folder)
    return FolderTransformResponse(
        message="Folder duplicated successfully", count=result.object_count
    )


@router.put("/rename-folder", response_model=FolderTransformResponse)
def rename_folder(
    body: FolderTransformRequest,
    folders: FolderTransformEngine = Depends(get_folder_engine),
):
    result = folders.rename(body.source_folder, body.target_folder)
    return FolderTransformResponse(
        message="Folder renamed successfully", count=result.object_count
    )


@router.post("/upload-files", status_code=201, response_model=UploadResponse)
def upload_files(
    files: Optional[list[UploadFile]] = File(None),
    folder: Optional[str] = Form(None),
    operations: FileOperations = Depends(get_file_operations),
):
    uploads = [
        UploadedFile(
            filename=upload.filename or "",
            content=upload.file.read(),
            content_type=upload.content_type,
        )
        for upload in files or []
    ]
    names = operations.upload_files(uploads, folder)
    return UploadResponse(message="Files uploaded successfully", file_names=names)


@router.get("/get-file-urls", response_model=list[FileUrlResponse])
def get_file_urls(
    folder: Optional[str] = Query(None),
    expires: Optional[int] = Query(None, gt=0, description="Expiry in seconds"),
    files: FileOperations = Depends(get_file_operations),
):
    return [
        FileUrlResponse(file_key=item.key, url=item.url)
        for item in files.get_file_urls(folder, expires)
    ]
