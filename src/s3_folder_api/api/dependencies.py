"""FastAPI dependencies resolving the services built by ``create_app``."""

from fastapi import Request

from s3_folder_api.objectstorage import FileOperations, FolderTransformEngine


def get_folder_engine(request: Request) -> FolderTransformEngine:
    return request.app.state.folders


def get_file_operations(request: Request) -> FileOperations:
    return request.app.state.files
