"""Database and server CLI commands."""

import typer
import uvicorn
from rich.console import Console
from rich.prompt import Confirm

from src.marketplace.core.services import DbManageService, DbSessionService
from src.marketplace.runtime.context import get_config
from src.marketplace.runtime.init_db import init_db

console = Console()

db_app = typer.Typer(help="Manage the marketplace database")


@db_app.command("init")
def init() -> None:
    """Create all tables in the configured database."""
    config = get_config()
    try:
        init_db()
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]✅ Database initialized ({config.database.backend})[/green]")


@db_app.command("drop")
def drop(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Drop all marketplace tables, deleting every user and product."""
    config = get_config()
    if not force and not Confirm.ask(f"Drop all tables in the {config.database.backend} database?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    db_service = DbSessionService(config.database, config.app.environment)
    try:
        DbManageService(db_service.engine).drop_all()
    finally:
        db_service.dispose()
    console.print("[green]✅ Tables dropped[/green]")


def serve(
    host: str = typer.Option(None, "--host", "-h", help="Bind address; defaults to app.host"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port; defaults to app.port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    config = get_config()
    host = host or config.app.host
    port = port or config.app.port
    console.print(f"[blue]Serving {config.app.name} on http://{host}:{port}[/blue]")
    uvicorn.run(
        "src.marketplace.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )
