#!/usr/bin/env python3
"""
CloudNotes Client.

Terminal client for the notes API.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    python cli.py --help                          # Show help

    # Notes and todos
    python cli.py notes list                      # Newest first
    python cli.py notes list --todo               # Todo view
    python cli.py notes add "call the bank"
    python cli.py notes todo "buy milk"
    python cli.py notes done <id>                 # Toggle a todo
    python cli.py notes edit <id> "new text"
    python cli.py notes rm <id>                   # Move to trash
    python cli.py notes attach ./receipt.pdf      # Upload and link a file

    # Trash
    python cli.py trash list
    python cli.py trash restore <id>
    python cli.py trash rm <id>
    python cli.py trash empty

    # Health checks
    python cli.py health check                    # Local health check (no server)
    python cli.py health status                   # Backend readiness (requires server)
    python cli.py health ping                     # Ping backend

    # Identity and interactive mode
    python cli.py whoami
    python cli.py shell

Options:
    --token           Bearer token (default: CLOUDNOTES_TOKEN)
    --server          Backend base URL (default: application.yaml server)
    --verbose, -v     Enable verbose output
    --debug           Enable debug mode (detailed logging)
    --help            Show help message
"""

import asyncio
import sys
from pathlib import Path

import typer
from rich.console import Console

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def _validate_project_root() -> None:
    """Validate that we're running from the project root."""
    if not (project_root / ".project_root").exists():
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


from cloudnotes.cli.client import TOKEN_ENV_VAR, configure_api_client
from cloudnotes.cli.commands import health_app, notes_app, trash_app

# Create main app
app = typer.Typer(
    name="cli",
    help="CloudNotes client - notes, todos, attachments and trash.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register command groups
app.add_typer(notes_app, name="notes")
app.add_typer(trash_app, name="trash")
app.add_typer(health_app, name="health")


@app.command()
def whoami() -> None:
    """Show who the token authenticates as."""
    from cloudnotes.cli.commands.common import execute

    state = execute([("whoami", {})], show=False)
    console.print(f"Owner: [cyan]{state.owner_id}[/cyan]")
    if state.email:
        console.print(f"Email: {state.email}")


@app.command()
def shell() -> None:
    """
    Start interactive shell mode.

    Provides a REPL with notes, todo and trash pages.
    """
    from cloudnotes.cli.shell import run_shell

    asyncio.run(run_shell())


@app.callback()
def main(
    token: str | None = typer.Option(
        None,
        "--token",
        envvar=TOKEN_ENV_VAR,
        help="Bearer token for the API",
        show_default=False,
    ),
    server: str | None = typer.Option(
        None,
        "--server",
        help="Backend base URL, e.g. http://127.0.0.1:3000",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    CloudNotes client.

    Notes, todos, attachments and trash over the CloudNotes API.
    Built with Typer for type-safe commands and Rich for formatted output.
    """
    # Validate project root
    _validate_project_root()

    # Configure logging based on flags
    from cloudnotes.backend.core.logging import setup_logging
    if debug:
        setup_logging(level="DEBUG", format_type="console", enable_file_logging=False)
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console", enable_file_logging=False)
    else:
        setup_logging(level="WARNING", format_type="console", enable_file_logging=False)

    configure_api_client(token=token, base_url=server)


if __name__ == "__main__":
    app()
