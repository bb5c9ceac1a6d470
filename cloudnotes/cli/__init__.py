"""
CLI Client Module.

Terminal client for CloudNotes built with Typer and Rich.

Architecture:
- CLI is a thin presentation layer over the HTTP API (httpx)
- state.py: immutable UIState snapshots and the pure reducer
- actions.py: action name -> handler mapping; handlers return events
- views.py: Rich rendering of a snapshot
- Sends X-Frontend-ID: cli header for log routing

Usage:
    python cli.py --help
    python cli.py notes list
    python cli.py notes todo "buy milk"
    python cli.py trash list
    python cli.py shell  # Interactive mode
"""
