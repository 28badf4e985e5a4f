"""CLI commands for StudyVault.

Commands:
- serve: Run the web API with uvicorn
- status: Show configuration and backend connection
- files list / files delete: Manage the local fallback file store
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from studyvault.config.app_config import CONFIG_FILE, load_app_config
from studyvault.core.uploads import format_file_size
from studyvault.storage.file_store import LocalFileStore
from studyvault.storage.object_urls import ObjectUrlRegistry

app = typer.Typer(
    name="studyvault",
    help="Digital library of PDF textbooks organized by semester and subject.",
    no_args_is_help=True,
)

files_app = typer.Typer(help="Manage the local file store.", no_args_is_help=True)
app.add_typer(files_app, name="files")

console = Console()


def _file_store() -> LocalFileStore:
    config = load_app_config()
    return LocalFileStore(Path(config.storage.local_db_path), ObjectUrlRegistry())


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the StudyVault web API."""
    import uvicorn

    console.print(f"[blue]Starting StudyVault on http://{host}:{port}[/blue]")
    uvicorn.run("studyvault.web.api:app", host=host, port=port, reload=reload)


@app.command()
def status() -> None:
    """Show configuration and whether a backend is connected."""
    config = load_app_config(force_reload=True)

    source = str(CONFIG_FILE) if CONFIG_FILE.exists() else "built-in defaults"
    console.print(f"[dim]config:[/dim]  {source}")

    if config.backend.is_configured:
        console.print(f"[green]✓ Supabase connected:[/green] {config.backend.url}")
        bucket = config.backend.books_bucket or "(none, local fallback)"
        console.print(f"  [dim]bucket:[/dim]  {bucket}")
    else:
        console.print("[yellow]⚠ Supabase not connected[/yellow]")
        console.print("  Set SUPABASE_URL and SUPABASE_ANON_KEY to connect.")

    console.print(f"  [dim]admin:[/dim]   {config.auth.admin_email}")
    console.print(f"  [dim]local db:[/dim] {config.storage.local_db_path}")
    console.print(
        f"  [dim]max upload:[/dim] {format_file_size(config.storage.max_upload_bytes)}"
    )


@files_app.command(name="list")
def list_files(
    filename: str | None = typer.Option(
        None, "--filename", "-n", help="Only files with this exact name"
    ),
) -> None:
    """List files held in the local file store."""
    store = _file_store()
    files = store.find_by_filename(filename) if filename else store.list()

    if not files:
        console.print("[yellow]No files in the local store[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", overflow="fold")
    table.add_column("Filename", no_wrap=True)
    table.add_column("Size", justify="right", no_wrap=True)
    table.add_column("Uploaded")

    for f in files:
        table.add_row(f.id, f.filename, format_file_size(f.size), f.uploaded_at[:10])

    console.print(table)
    console.print(f"\n[dim]{len(files)} file(s)[/dim]")


@files_app.command(name="delete")
def delete_file(
    file_id: str = typer.Argument(..., help="File ID (uploaded_...)"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a file from the local store."""
    if not force and not typer.confirm(f"Delete {file_id}?"):
        console.print("[dim]Cancelled[/dim]")
        raise typer.Exit(code=0)

    if _file_store().delete(file_id):
        console.print(f"[green]✓ Deleted {file_id}[/green]")
    else:
        console.print(f"[red]✗ File not found: {file_id}[/red]")
        raise typer.Exit(code=1)
