#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for the CloudNotes backend. All functionality is accessible
through command-line options.

Usage:
    python run.py --help
    python run.py --action server --verbose
    python run.py --action health --debug
    python run.py --action config
    python run.py --action test --test-type unit
    python run.py --action token --owner alice --email alice@example.com
"""

import subprocess
import sys
from datetime import timedelta
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from cloudnotes.backend.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "health", "config", "test", "info", "token"]),
    default="info",
    help="Action to perform.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--host",
    default=None,
    help="Server host (for server action).",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Server port (for server action).",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload (for server action).",
)
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run (for test action).",
)
@click.option(
    "--coverage",
    is_flag=True,
    help="Run tests with coverage (for test action).",
)
@click.option(
    "--owner",
    default=None,
    help="Owner id to issue a token for (for token action).",
)
@click.option(
    "--email",
    default=None,
    help="Email label to put in the token (for token action).",
)
@click.option(
    "--expires-minutes",
    default=None,
    type=int,
    help="Token lifetime; defaults to security.yaml (for token action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
    coverage: bool,
    owner: str | None,
    email: str | None,
    expires_minutes: int | None,
) -> None:
    """
    CloudNotes Backend Entry Point.

    Run the API server, check health, view configuration, run tests, or
    issue a development token.

    Examples:

        # Start development server
        python run.py --action server --reload --verbose

        # Check application health
        python run.py --action health --debug

        # View loaded configuration
        python run.py --action config

        # Run unit tests with coverage
        python run.py --action test --test-type unit --coverage

        # Issue a token for the terminal client
        python run.py --action token --owner alice
    """
    # Validate project root
    validate_project_root()

    # Configure logging based on verbosity
    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    # Dispatch to action handlers
    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "health":
        check_health(logger)
    elif action == "config":
        show_config(logger)
    elif action == "test":
        run_tests(logger, test_type, coverage)
    elif action == "info":
        show_info(logger)
    elif action == "token":
        issue_token(logger, owner, email, expires_minutes)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI development server."""
    from cloudnotes.backend.core.config import get_app_config

    try:
        server_config = get_app_config().application.server
    except Exception as e:
        logger.error("Failed to load configuration.", extra={"error": str(e)})
        click.echo(
            click.style("Error: Could not load config/settings/application.yaml.", fg="red"),
            err=True,
        )
        sys.exit(1)

    server_host = host or server_config.host
    server_port = port or server_config.port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "cloudnotes.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def check_health(logger) -> None:
    """Check application health by testing imports and configuration."""
    click.echo("Checking application health...\n")

    checks = []

    # Check 1: Configuration loading
    try:
        from cloudnotes.backend.core.config import get_app_config
        app_config = get_app_config()
        app_name = app_config.application.name
        checks.append(("YAML configuration", True, f"App: {app_name}"))
        logger.debug("Configuration loaded", extra={"app_name": app_name})
    except Exception as e:
        checks.append(("YAML configuration", False, str(e)))
        logger.error("Configuration failed", extra={"error": str(e)})

    # Check 2: Secrets
    try:
        from cloudnotes.backend.core.config import get_settings
        settings = get_settings()
        storage = "configured" if settings.storage_access_key else "no storage keys"
        checks.append(("Secrets (.env)", True, storage))
        logger.debug("Secrets loaded")
    except Exception as e:
        checks.append(("Secrets (.env)", False, str(e)))
        logger.warning("Secrets not configured", extra={"error": str(e)})

    # Check 3: FastAPI app
    try:
        from cloudnotes.backend.main import get_app
        app = get_app()
        checks.append(("FastAPI application", True, f"Title: {app.title}"))
        logger.debug("FastAPI app loaded", extra={"title": app.title})
    except Exception as e:
        checks.append(("FastAPI application", False, str(e)))
        logger.error("FastAPI app failed", extra={"error": str(e)})

    # Check 4: Note store models
    try:
        from cloudnotes.backend.models.note import Note, TrashedNote
        checks.append(("Note store models", True, f"{Note.__tablename__}, {TrashedNote.__tablename__}"))
        logger.debug("Database models loaded")
    except Exception as e:
        checks.append(("Note store models", False, str(e)))
        logger.error("Database models failed", extra={"error": str(e)})

    # Display results
    click.echo("Health Check Results:")
    click.echo("-" * 50)

    all_passed = True
    for name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        detail_str = f" ({detail})" if detail else ""
        click.echo(f"  {status}  {name}{detail_str}")
        if not passed:
            all_passed = False

    click.echo("-" * 50)

    if all_passed:
        click.echo(click.style("\nAll checks passed!", fg="green"))
    else:
        click.echo(click.style("\nSome checks failed. See details above.", fg="yellow"))
        click.echo("Note: secrets require config/.env to be configured.")
        sys.exit(1)


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    if title:
        click.echo(f"\n{title}:")
        click.echo("-" * 40)
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_section("", value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration. Secrets are never printed."""
    click.echo("Application Configuration:")

    try:
        from cloudnotes.backend.core.config import get_app_config

        app_config = get_app_config()

        _echo_section("Application Settings (from YAML)", app_config.application.model_dump())
        _echo_section("Database Settings (from YAML)", app_config.database.model_dump())
        _echo_section("Logging Settings (from YAML)", app_config.logging.model_dump())
        _echo_section("Security Settings (from YAML)", app_config.security.model_dump())
        _echo_section("Storage Settings (from YAML)", app_config.storage.model_dump())
        _echo_section("Concurrency Settings (from YAML)", app_config.concurrency.model_dump())

        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def run_tests(logger, test_type: str, coverage: bool) -> None:
    """Run the test suite."""
    logger.info("Running tests", extra={"type": test_type, "coverage": coverage})

    cmd = [sys.executable, "-m", "pytest"]

    # Select test directory based on type
    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")

    cmd.append("-v")

    if coverage:
        cmd.extend(["--cov=cloudnotes", "--cov-report=term-missing"])

    click.echo(f"Running: {' '.join(cmd)}\n")

    try:
        result = subprocess.run(cmd)
        sys.exit(result.returncode)
    except FileNotFoundError:
        logger.error("pytest not found. Install with: pip install -e '.[test]'")
        sys.exit(1)


def issue_token(logger, owner: str | None, email: str | None, expires_minutes: int | None) -> None:
    """
    Print a signed access token for local development.

    Production tokens come from the identity provider; this only signs with
    the local JWT_SECRET so the terminal client can be tried end to end.
    """
    if not owner:
        click.echo(click.style("Error: --owner is required for the token action.", fg="red"), err=True)
        sys.exit(1)

    from cloudnotes.backend.core.security import create_access_token

    claims = {"sub": owner}
    if email:
        claims["email"] = email
    expires = timedelta(minutes=expires_minutes) if expires_minutes else None

    token = create_access_token(claims, expires_delta=expires)
    logger.info("Development token issued", extra={"owner_id": owner})
    click.echo(token)


def show_info(logger) -> None:
    """Display application information."""
    click.echo("CloudNotes Backend")
    click.echo("=" * 40)

    try:
        from cloudnotes.backend.core.config import get_app_config
        application = get_app_config().application
        click.echo(f"Name: {application.name}")
        click.echo(f"Version: {application.version}")
        click.echo(f"Description: {application.description}")
        click.echo(f"API prefix: {application.api_prefix}")
    except Exception:
        click.echo("Name: CloudNotes")
        click.echo("Version: 0.1.0")

    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action server   Start the development server")
    click.echo("  --action health   Check application health")
    click.echo("  --action config   Display configuration")
    click.echo("  --action test     Run test suite")
    click.echo("  --action token    Issue a development token (--owner, --email)")
    click.echo("  --action info     Show this information")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v     Enable INFO level logging")
    click.echo("  --debug, -d       Enable DEBUG level logging")
    click.echo()
    click.echo("Examples:")
    click.echo("  python run.py --action server --reload --verbose")
    click.echo("  python run.py --action token --owner alice")
    click.echo("  python run.py --action test --test-type unit --coverage")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
