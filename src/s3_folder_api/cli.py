"""Command-line interface for s3-folder-api.

Commands:
    - serve: Run the HTTP API with uvicorn
    - duplicate-folder / rename-folder / delete-folder: Folder operations
    - list-folders / list-files: Bucket listings
    - file-urls: Presigned download URLs for a folder

All commands use the bucket configured through the environment
(S3_FOLDER_API_BUCKET_NAME or R2_BUCKET_NAME, plus endpoint and credentials).
"""

from typing import Annotated, Optional

import typer

from . import __version__
from .core.config import settings
from .objectstorage import (
    FileOperations,
    FolderTransformEngine,
    ObjectStore,
    S3ClientConfig,
)

app = typer.Typer(
    name="s3-folder-api",
    help="Folders, files and presigned URLs on an S3-compatible bucket.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"s3-folder-api {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    S3 Folder API: REST façade and tools for folder-shaped object storage.
    """
    pass


def _build_operations() -> FileOperations:
    """Create file and folder operations for the configured bucket."""
    store = ObjectStore.from_config(S3ClientConfig.from_settings(settings))
    folders = FolderTransformEngine(
        store,
        max_concurrency=settings.max_concurrency,
        max_keys=settings.list_max_keys,
    )
    return FileOperations(
        store,
        folders,
        max_upload_files=settings.max_upload_files,
        default_expires=settings.presign_default_expires,
    )


@app.command("serve")
def serve_cmd(
    host: Annotated[
        Optional[str], typer.Option("--host", help="Interface to bind")
    ] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Port to bind")] = None,
    reload: Annotated[
        bool, typer.Option("--reload", help="Reload on code changes")
    ] = False,
) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "s3_folder_api.api:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@app.command("duplicate-folder")
def duplicate_folder_cmd(
    source: Annotated[str, typer.Argument(help="Folder to copy")],
    target: Annotated[str, typer.Argument(help="Destination folder")],
) -> None:
    """Copy every object of SOURCE into TARGET."""
    try:
        result = _build_operations().folders.duplicate(source, target)
        typer.echo(f"Duplicated {result.object_count} objects: {source} -> {target}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("rename-folder")
def rename_folder_cmd(
    source: Annotated[str, typer.Argument(help="Folder to rename")],
    target: Annotated[str, typer.Argument(help="New folder name")],
) -> None:
    """
    Move every object of SOURCE into TARGET.

    Not atomic: on failure some objects may already have moved.
    """
    try:
        result = _build_operations().folders.rename(source, target)
        typer.echo(f"Renamed {result.object_count} objects: {source} -> {target}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("delete-folder")
def delete_folder_cmd(
    folder: Annotated[str, typer.Argument(help="Folder to delete")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")
    ] = False,
) -> None:
    """Delete every object in FOLDER."""
    if not yes:
        typer.confirm(f"Delete all objects under '{folder}/'?", abort=True)
    try:
        deleted = _build_operations().folders.delete_folder(folder)
        typer.echo(f"Deleted {deleted} files")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("list-folders")
def list_folders_cmd() -> None:
    """List the top-level folders of the bucket."""
    try:
        folders = _build_operations().list_folders()
        if folders:
            for folder in folders:
                typer.echo(folder)
        else:
            typer.echo("No folders found.")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("list-files")
def list_files_cmd(
    folder: Annotated[
        Optional[str], typer.Argument(help="Folder to list (bucket root if omitted)")
    ] = None,
) -> None:
    """List files and sub-folders directly under FOLDER."""
    try:
        listing = _build_operations().list_files(folder)
        for prefix in listing.folders:
            typer.echo(f"  {prefix}")
        for key in listing.files:
            typer.echo(f"  {key}")
        typer.echo(f"{len(listing.files)} files, {len(listing.folders)} folders")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("file-urls")
def file_urls_cmd(
    folder: Annotated[
        Optional[str], typer.Argument(help="Folder (bucket root if omitted)")
    ] = None,
    expires: Annotated[
        Optional[int],
        typer.Option("--expires", min=1, help="URL lifetime in seconds"),
    ] = None,
) -> None:
    """Print a presigned download URL for every object under FOLDER."""
    try:
        for item in _build_operations().get_file_urls(folder, expires):
            typer.echo(f"{item.key}\t{item.url}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
