"""
CloudNotes.

- backend/: Note store, lifecycle services, attachment storage, HTTP API
- cli/: Terminal client (Typer + Rich)
"""
