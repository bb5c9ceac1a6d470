"""
CLI Commands.

Organized by domain/feature area.
"""

from cloudnotes.cli.commands.health import app as health_app
from cloudnotes.cli.commands.notes import app as notes_app
from cloudnotes.cli.commands.trash import app as trash_app

__all__ = [
    "health_app",
    "notes_app",
    "trash_app",
]
