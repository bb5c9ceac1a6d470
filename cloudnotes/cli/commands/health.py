"""
Health Check Commands.

Commands for checking backend health and status.
"""

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cloudnotes.cli.client import get_api_client

app = typer.Typer(help="Health check commands")
console = Console()


@app.command()
def status() -> None:
    """
    Check backend readiness (requires running server).

    Examples:
        cli.py health status
    """
    asyncio.run(_status())


async def _status() -> None:
    """Async implementation of status command."""
    client = get_api_client()

    try:
        response = await client.get("/health/ready")

        if response.status_code == 200:
            _display_health(response.json())
        elif response.status_code == 503:
            # HTTPException detail is wrapped in the error envelope
            body = response.json()
            _display_health((body.get("error") or {}).get("details") or {"status": "unhealthy"})
            raise typer.Exit(1)
        else:
            console.print(f"[red]Unexpected response: {response.status_code}[/red]")
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except Exception as e:
        if "Connection refused" in str(e) or "ConnectError" in str(e):
            console.print("[red]Error: Cannot connect to backend[/red]")
            console.print("[dim]Is the server running? Start with: python run.py --action server[/dim]")
        else:
            console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    finally:
        await client.close()


def _display_health(data: dict) -> None:
    """Display health check results."""
    status = data.get("status", "unknown")
    status_color = "green" if status == "healthy" else "red" if status == "unhealthy" else "yellow"

    console.print(Panel(
        f"[{status_color}]{status.upper()}[/{status_color}]",
        title="Backend Status",
    ))

    checks = data.get("checks", {})
    if not checks:
        return

    table = Table(show_header=True)
    table.add_column("Component", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    for component, check_data in checks.items():
        check_status = check_data.get("status", "unknown")
        color = "green" if check_status == "healthy" else "red"

        details = []
        if "latency_ms" in check_data:
            details.append(f"latency: {check_data['latency_ms']}ms")
        if "error" in check_data:
            details.append(f"error: {check_data['error']}")

        table.add_row(
            component,
            f"[{color}]{check_status}[/{color}]",
            ", ".join(details) if details else "-",
        )

    console.print(table)


@app.command()
def ping() -> None:
    """
    Simple ping to check if backend is reachable.

    Examples:
        cli.py health ping
    """
    asyncio.run(_ping())


async def _ping() -> None:
    """Async implementation of ping command."""
    client = get_api_client()

    try:
        response = await client.get("/health")

        if response.status_code == 200:
            console.print("[green]✓ Backend is reachable[/green]")
        else:
            console.print(f"[yellow]Backend responded with status {response.status_code}[/yellow]")

    except Exception as e:
        if "Connection refused" in str(e) or "ConnectError" in str(e):
            console.print("[red]✗ Backend is not reachable[/red]")
        else:
            console.print(f"[red]✗ Error: {e}[/red]")
        raise typer.Exit(1)

    finally:
        await client.close()


@app.command()
def check() -> None:
    """
    Check application health locally (imports, config).

    Does NOT require running server.

    Examples:
        cli.py health check
    """
    console.print("[bold]Checking application health...[/bold]\n")

    checks = []

    try:
        from cloudnotes.backend.core.config import get_app_config
        app_config = get_app_config()
        checks.append(("YAML configuration", True, f"App: {app_config.application.name}"))
    except Exception as e:
        checks.append(("YAML configuration", False, str(e)))

    try:
        from cloudnotes.backend.core.config import get_settings
        get_settings()
        checks.append(("Secrets (.env)", True, None))
    except Exception as e:
        checks.append(("Secrets (.env)", False, str(e)))

    try:
        from cloudnotes.backend.core.config import get_database_url
        url = get_database_url()
        checks.append(("Note store URL", True, url.split("@")[-1]))
    except Exception as e:
        checks.append(("Note store URL", False, str(e)))

    try:
        from cloudnotes.backend.main import get_app
        fastapi_app = get_app()
        checks.append(("FastAPI application", True, f"Title: {fastapi_app.title}"))
    except Exception as e:
        checks.append(("FastAPI application", False, str(e)))

    table = Table(title="Health Check Results", show_header=True)
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    all_passed = True
    for name, passed, detail in checks:
        status = "[green]✓ PASS[/green]" if passed else "[red]✗ FAIL[/red]"
        table.add_row(name, status, detail or "-")
        if not passed:
            all_passed = False

    console.print(table)

    if all_passed:
        console.print("\n[green]All checks passed![/green]")
    else:
        console.print("\n[yellow]Some checks failed. See details above.[/yellow]")
        console.print("[dim]Note: secrets require config/.env to be configured.[/dim]")
        raise typer.Exit(1)
