"""
Shared runner for one-shot client commands.

A command is a short list of actions run against a fresh snapshot; the
final snapshot is rendered and a failure sets the exit code.
"""

import asyncio
from typing import Any

import typer
from rich.console import Console

from cloudnotes.cli.actions import ActionError, run_action
from cloudnotes.cli.client import get_api_client
from cloudnotes.cli.state import Page, UIState
from cloudnotes.cli.views import render

console = Console()

Step = tuple[str, dict[str, Any]]


async def _execute(steps: list[Step], page: Page) -> UIState:
    client = get_api_client()
    if not client.signed_in:
        console.print("[red]Error: no token. Pass --token or set CLOUDNOTES_TOKEN.[/red]")
        raise typer.Exit(1)

    state = UIState(page=page, signed_in=True)
    try:
        for name, params in steps:
            state = await run_action(name, client, state, **params)
            if state.error:
                break
    except ActionError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        await client.close()
    return state


def execute(steps: list[Step], page: Page = Page.NOTES, show: bool = True) -> UIState:
    """Run `steps` in order, stopping at the first failure, and render the result."""
    state = asyncio.run(_execute(steps, page))
    if show or state.error:
        console.print(render(state))
    if state.error:
        raise typer.Exit(1)
    return state
