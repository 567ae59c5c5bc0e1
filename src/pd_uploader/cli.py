"""CLI for pd-uploader."""

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .api import build_uploader
from .config import UploaderConfig, load_config
from .env_manager import resolve_ledger_path, resolve_mode
from .errors import ConfigError, UploaderError
from .hashing import compute_file_digest
from .ledger import HashLedger
from .service_types import UploadOutcome, UploadRequest, UploadResult
from .storage.pixeldrain import PixelDrainClient
from .utils import humanize_size


app = typer.Typer(help="""\
Upload files and directories to PixelDrain, skipping content that was
already sent. Every upload is recorded in a CSV audit log.""")

console = Console()


class _ConsoleProgress:
    """Print one line per file of a directory batch."""

    def on_file_start(self, path: str, size: int) -> None:
        console.print(f"[dim]→ {path} ({humanize_size(size)})[/dim]")

    def on_file_complete(self, path: str, outcome: UploadOutcome) -> None:
        if outcome.skipped:
            console.print("  [yellow]⚠[/yellow] duplicate, skipped")
        elif outcome.success:
            console.print(f"  [green]✓[/green] {outcome.remote_url or outcome.remote_id}")
        else:
            console.print(f"  [red]✗[/red] HTTP {outcome.status_code}: {outcome.message or ''}")

    def on_file_error(self, path: str, error: str) -> None:
        console.print(f"  [red]✗[/red] {error}")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(ctx: typer.Context) -> UploaderConfig:
    try:
        return load_config(ctx.obj.get("config_path") if ctx.obj else None)
    except ConfigError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)


def _client(config: UploaderConfig) -> PixelDrainClient:
    """HTTP client for the remote-file commands; fs:// stores only accept uploads."""
    if config.api_url.startswith("fs://"):
        _fail(ConfigError(
            f"api_url {config.api_url} is a local fs:// store; "
            "this command needs a PixelDrain API URL"
        ))
    return PixelDrainClient(api_url=config.api_url, options=config.client_options())


def _fail(e: Exception) -> NoReturn:
    console.print(f"[red]✗[/red] {e}")
    raise typer.Exit(1)


def _print_result(result: UploadResult) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Status")
    table.add_column("HTTP", justify="right")
    table.add_column("URL / message")
    for outcome in result.outcomes:
        if outcome.skipped:
            status = "[yellow]skipped[/yellow]"
            detail = outcome.message or ""
        elif outcome.success:
            status = "[green]uploaded[/green]"
            detail = outcome.remote_url or ""
        else:
            status = "[red]rejected[/red]"
            detail = outcome.message or ""
        table.add_row(outcome.path or outcome.file_name, status, str(outcome.status_code), detail)
    console.print(table)
    console.print(f"[dim]{result.summary}[/dim]")


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml (default: .pd-uploader/config.yaml)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Global options."""
    _setup_logging(verbose)
    ctx.obj = {"config_path": config_path}


@app.command()
def upload(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="File or directory to upload"),
    anonymous: bool = typer.Option(False, "--anonymous", help="Upload without credentials"),
    env: Optional[str] = typer.Option(None, "--env", help="Ledger to use: test or prod (default: ENV_MODE)"),
):
    """Upload a file or a directory tree, skipping duplicates."""
    config = _load(ctx)
    progress = _ConsoleProgress() if path.is_dir() else None
    try:
        uploader = build_uploader(config, mode=env, progress=progress)
        result = uploader.upload(
            UploadRequest(path=str(path), anonymous=anonymous, auth=config.auth())
        )
    except (UploaderError, OSError, ValueError) as e:
        _fail(e)
    _print_result(result)


@app.command()
def check(
    ctx: typer.Context,
    files: List[Path] = typer.Argument(..., help="Files to check against the ledger"),
    env: Optional[str] = typer.Option(None, "--env", help="Ledger to use: test or prod"),
):
    """Report whether files were already uploaded (by content)."""
    config = _load(ctx)
    ledger = HashLedger(resolve_ledger_path(config, env))
    for file in files:
        try:
            duplicate = ledger.is_duplicate(file)
        except (UploaderError, OSError) as e:
            _fail(e)
        mark = "[yellow]already sent[/yellow]" if duplicate else "[green]new[/green]"
        console.print(f"{file}: {mark}")


@app.command("hash")
def hash_files(
    files: List[Path] = typer.Argument(..., help="Files to hash"),
):
    """Print the SHA-256 digest of each file."""
    for file in files:
        try:
            digest = compute_file_digest(file)
        except OSError as e:
            _fail(e)
        console.print(f"SHA-256 Hash of {file}: {digest}")


@app.command()
def ledger(
    ctx: typer.Context,
    env: Optional[str] = typer.Option(None, "--env", help="Ledger to use: test or prod"),
):
    """Show the hash ledger."""
    config = _load(ctx)
    store = HashLedger(resolve_ledger_path(config, env))
    try:
        entries = store.entries()
    except UploaderError as e:
        _fail(e)

    console.print(f"[bold]Ledger[/bold] {store.path} ([cyan]{resolve_mode(env)}[/cyan])")
    if not entries:
        console.print("[dim]No uploads recorded[/dim]")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Digest")
    for entry in entries:
        table.add_row(entry.path, entry.digest[:16] + "...")
    console.print(table)
    console.print(f"[dim]{len(entries)} entries, {len(store.digests())} distinct digests[/dim]")


@app.command()
def info(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="Remote file id"),
):
    """Show metadata of a remote file."""
    config = _load(ctx)
    try:
        rsp = _client(config).get_file_info(file_id, auth=config.auth())
    except UploaderError as e:
        _fail(e)
    if not rsp.success:
        _fail(UploaderError(f"HTTP {rsp.status_code}: {rsp.message or rsp.value}"))
    console.print(f"[bold]{rsp.name}[/bold] ({rsp.id})")
    console.print(f"  Size:     {humanize_size(rsp.size)}")
    console.print(f"  Type:     {rsp.mime_type}")
    console.print(f"  Uploaded: {rsp.date_upload}")
    console.print(f"  Views:    {rsp.views}")
    if rsp.hash_sha256:
        console.print(f"  SHA-256:  {rsp.hash_sha256}")


@app.command()
def download(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="Remote file id"),
    dest: Path = typer.Argument(..., help="Where to save the file"),
):
    """Download a remote file."""
    config = _load(ctx)
    try:
        rsp = _client(config).download(file_id, dest, auth=config.auth())
    except (UploaderError, OSError) as e:
        _fail(e)
    if not rsp.success:
        _fail(UploaderError(f"HTTP {rsp.status_code}: {rsp.message or rsp.value}"))
    console.print(f"[green]✓[/green] Saved {rsp.file_path} ({humanize_size(rsp.file_size)})")


@app.command()
def thumbnail(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="Remote file id"),
    dest: Path = typer.Argument(..., help="Where to save the thumbnail"),
    width: Optional[int] = typer.Option(None, "--width"),
    height: Optional[int] = typer.Option(None, "--height"),
):
    """Download the thumbnail of a remote file."""
    config = _load(ctx)
    try:
        rsp = _client(config).download_thumbnail(
            file_id, dest, width=width, height=height, auth=config.auth()
        )
    except (UploaderError, OSError) as e:
        _fail(e)
    if not rsp.success:
        _fail(UploaderError(f"HTTP {rsp.status_code}: {rsp.message or rsp.value}"))
    console.print(f"[green]✓[/green] Saved {rsp.file_path} ({humanize_size(rsp.file_size)})")


@app.command()
def delete(
    ctx: typer.Context,
    file_id: str = typer.Argument(..., help="Remote file id"),
):
    """Delete a remote file. The ledger is not modified."""
    config = _load(ctx)
    try:
        rsp = _client(config).delete(file_id, auth=config.auth())
    except UploaderError as e:
        _fail(e)
    if not rsp.success:
        _fail(UploaderError(f"HTTP {rsp.status_code}: {rsp.message or rsp.value}"))
    console.print(f"[green]✓[/green] Deleted {file_id}")


@app.command()
def user(ctx: typer.Context):
    """Show the account the API key belongs to."""
    config = _load(ctx)
    if not config.api_key:
        _fail(UploaderError("No API key configured (set PIXELDRAIN_API_KEY)"))
    try:
        rsp = _client(config).get_user(auth=config.auth())
    except UploaderError as e:
        _fail(e)
    if not rsp.success:
        _fail(UploaderError(f"HTTP {rsp.status_code}: {rsp.message or rsp.value}"))
    console.print(f"[bold]{rsp.username}[/bold] <{rsp.email}>")
    console.print(f"  Storage used: {humanize_size(rsp.storage_space_used)}")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
