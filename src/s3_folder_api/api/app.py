"""FastAPI application factory."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from s3_folder_api import __version__
from s3_folder_api.core import (
    bind_request_context,
    clear_request_context,
    get_logger,
)
from s3_folder_api.core.config import Settings
from s3_folder_api.core.config import settings as default_settings
from s3_folder_api.core.exceptions import (
    FolderAPIError,
    FolderTransformError,
    NotFoundError,
    ValidationError,
)
from s3_folder_api.core.observability import REQUEST_ID_HEADER
from s3_folder_api.objectstorage import (
    FileOperations,
    FolderTransformEngine,
    ObjectStore,
    S3ClientConfig,
)

from .routes import router

logger = get_logger(__name__)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"message": str(exc)})

    @app.exception_handler(ValidationError)
    async def validation_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(FolderTransformError)
    async def transform_handler(
        request: Request, exc: FolderTransformError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": str(exc), "completed": len(exc.completed)},
        )

    @app.exception_handler(FolderAPIError)
    async def api_error_handler(request: Request, exc: FolderAPIError) -> JSONResponse:
        logger.error("Request failed", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"error": str(exc)})


def _register_request_context(app: FastAPI) -> None:
    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = bind_request_context(
            request.method,
            request.url.path,
            request.headers.get(REQUEST_ID_HEADER),
        )
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ObjectStore] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use; the environment-loaded settings by default
        store: Object store to serve; built from ``settings`` when omitted

    Raises:
        ValidationError: If no store is given and no bucket is configured
    """
    settings = settings or default_settings
    if store is None:
        store = ObjectStore.from_config(S3ClientConfig.from_settings(settings))

    folders = FolderTransformEngine(
        store,
        max_concurrency=settings.max_concurrency,
        max_keys=settings.list_max_keys,
    )
    files = FileOperations(
        store,
        folders,
        max_upload_files=settings.max_upload_files,
        default_expires=settings.presign_default_expires,
    )

    app = FastAPI(title="s3-folder-api", version=__version__)
    app.state.settings = settings
    app.state.store = store
    app.state.folders = folders
    app.state.files = files

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)
    _register_request_context(app)
    app.include_router(router)

    logger.info(
        "Application created",
        bucket=store.bucket,
        max_concurrency=settings.max_concurrency,
    )
    return app
