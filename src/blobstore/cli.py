"""CLI for the blobstore: cp, append, ls, rm."""

from __future__ import annotations

from typing import NoReturn, Optional

import httpx
import typer

from ._http import BASE_URL_ENVIRONMENT_VARIABLE
from .client import NOTHING_TO_APPEND, BlobStoreClient
from .config import BlobStoreConfig
from .errors import BlobStoreError
from .utils import parse_blob_arg

app = typer.Typer(
    name="blob",
    help="Download, upload or append data to the blobstore.",
    no_args_is_help=True,
    add_completion=False,
)


def _fail(ctx: typer.Context, message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    typer.echo(ctx.get_usage(), err=True)
    raise typer.Exit(1)


def _client(ctx: typer.Context) -> BlobStoreClient:
    try:
        config = BlobStoreConfig.from_env(base_url=ctx.obj["url"])
    except BlobStoreError as e:
        _fail(ctx, str(e))
    client = BlobStoreClient(config=config)
    ctx.call_on_close(client.close)
    return client


class _ReportErrors:
    """Turn client, transport and local I/O errors into exit status 1."""

    def __init__(self, ctx: typer.Context) -> None:
        self._ctx = ctx

    def __enter__(self) -> None:
        return None

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is not None and isinstance(exc, (BlobStoreError, httpx.HTTPError, OSError)):
            _fail(self._ctx, str(exc) or type(exc).__name__)
        return False


def _remote_path(ctx: typer.Context, arg: str, message: str) -> str:
    with _ReportErrors(ctx):
        parsed = parse_blob_arg(arg)
    if not parsed.is_remote:
        _fail(ctx, message)
    return parsed.path


@app.callback()
def main_callback(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(
        None,
        "--url",
        envvar=BASE_URL_ENVIRONMENT_VARIABLE,
        help="Base URL of the blobstore service",
    ),
) -> None:
    ctx.obj = {"url": url}


@app.command(help="Upload files to or download files from the blobstore.")
def cp(
    ctx: typer.Context,
    src: str = typer.Argument(..., help="<LocalPath> or blob:/<BlobPath>"),
    dst: Optional[str] = typer.Argument(None, help="<BlobPath> or <LocalPath>"),
    content_type: str = typer.Option("", "--type", "-t", help="Content type of uploaded file"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Force the copy if the destination already exists"
    ),
) -> None:
    if dst is None:
        path = _remote_path(ctx, src, "Must download files from blob:/")
        with _ReportErrors(ctx):
            _client(ctx).cat_file(path)
        return
    with _ReportErrors(ctx):
        _client(ctx).copy(src, dst, force=force, content_type=content_type)


@app.command(help="Append to an existing file in the blobstore.")
def append(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="blob:/<BlobPath>"),
    string: str = typer.Option("", "--string", "-s", help="String to append"),
) -> None:
    if not string:
        _fail(ctx, NOTHING_TO_APPEND)
    remote = _remote_path(ctx, path, "Cannot append to local file")
    with _ReportErrors(ctx):
        _client(ctx).append_string(remote, string)


@app.command(help="List existing files in the blobstore.")
def ls(
    ctx: typer.Context,
    path: Optional[str] = typer.Argument(None, help="blob:/<BlobPath>"),
    recursive: bool = typer.Option(
        False, "--recursive", "-r", help="List all files and folders recursively"
    ),
) -> None:
    prefix = ""
    if path is not None:
        prefix = _remote_path(ctx, path, "Must start remote ls path with blob:/")
    with _ReportErrors(ctx):
        files = _client(ctx).list_prefix(prefix, recursive)
    for name in files:
        typer.echo(name)


@app.command(help="Delete a file from the blobstore.")
def rm(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="blob:/<BlobPath>"),
) -> None:
    remote = _remote_path(ctx, path, "Cannot delete a local file")
    with _ReportErrors(ctx):
        _client(ctx).delete_file(remote)


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
