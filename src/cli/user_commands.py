"""User management CLI commands operating directly on the database."""

import typer
from rich.console import Console
from rich.table import Table

from src.marketplace.core.errors import ServiceError
from src.marketplace.core.models import PaginationParams
from src.marketplace.core.services import AuthService, DbSessionService, UserService
from src.marketplace.entities.user import Role, UserRepository
from src.marketplace.runtime.context import get_config

console = Console()

users_app = typer.Typer(help="Manage marketplace users")


@users_app.command("create-admin")
def create_admin(
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Password"
    ),
) -> None:
    """Create a user with the admin role."""
    config = get_config()
    db_service = DbSessionService(config.database, config.app.environment)
    try:
        with db_service.session_scope() as session:
            service = UserService(
                UserRepository(session), AuthService(config.constants.auth), config.constants
            )
            user = service.register(name=name, email=email, password=password, role=Role.ADMIN)
    except ServiceError as e:
        console.print(f"[red]❌ Failed to create admin: {e.message}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        db_service.dispose()

    console.print(f"[green]✅ Created admin '{user.email}' with id {user.id}[/green]")


@users_app.command("list")
def list_users(
    page: int = typer.Option(1, "--page", help="Page number"),
    page_size: int = typer.Option(0, "--page-size", "-s", help="Users per page"),
) -> None:
    """List active users."""
    config = get_config()
    db_service = DbSessionService(config.database, config.app.environment)
    try:
        with db_service.session_scope() as session:
            service = UserService(
                UserRepository(session), AuthService(config.constants.auth), config.constants
            )
            result = service.list_users(pagination=PaginationParams(page=page, page_size=page_size))
    finally:
        db_service.dispose()

    if not result.data:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title=f"Users (page {result.page}/{result.total_pages})")
    table.add_column("ID", style="cyan")
    table.add_column("Email", style="blue")
    table.add_column("Name", style="green")
    table.add_column("Role", style="magenta")
    table.add_column("Created", style="yellow")

    for user in result.data:
        table.add_row(
            str(user.id),
            user.email,
            user.name,
            user.role.value,
            user.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)
    console.print(f"\n[green]Found {result.total} users[/green]")
