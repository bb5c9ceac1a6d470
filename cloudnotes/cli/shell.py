"""
Interactive Shell Mode.

REPL over the notes client. The shell holds the current UIState snapshot;
each command runs an action or a page switch and the snapshot that comes
back replaces the old one before it is rendered.
"""

import shlex
from typing import Callable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cloudnotes.cli.actions import ActionError, run_action
from cloudnotes.cli.client import close_api_client, get_api_client
from cloudnotes.cli.state import Page, PageSwitched, UIState, reduce
from cloudnotes.cli.views import render

console = Console()

# shell word -> (action name, positional parameter names); the last parameter
# takes the rest of the line
ACTION_COMMANDS: dict[str, tuple[str, tuple[str, ...]]] = {
    "add": ("create", ("text",)),
    "open": ("select", ("note_id",)),
    "save": ("save", ("text",)),
    "edit": ("edit", ("note_id", "text")),
    "rm": ("delete", ("note_id",)),
    "done": ("toggle", ("note_id",)),
    "import": ("import", ("path",)),
    "restore": ("restore", ("trash_id",)),
    "purge": ("purge", ("trash_id",)),
    "empty": ("empty", ()),
    "refresh": ("refresh", ()),
    "whoami": ("whoami", ()),
}

HELP_ROWS = [
    ("notes | todo | trash", "Switch page"),
    ("ls", "Show the current page"),
    ("add [text]", "Create a note (a todo on the todo page)"),
    ("open <id>", "Show a note in full"),
    ("save <text>", "Save text into the open note"),
    ("edit <id> <text>", "Replace a note's text; empty text trashes it"),
    ("rm <id>", "Move a note to the trash"),
    ("done <id>", "Toggle a todo"),
    ("import <path>", "Upload a file as a new note"),
    ("restore <id>", "Restore a trashed note"),
    ("purge <id>", "Delete a trashed note permanently"),
    ("empty", "Empty the trash"),
    ("refresh", "Reload notes and trash"),
    ("whoami", "Show the signed-in identity"),
    ("clear", "Clear the screen"),
    ("quit / exit", "Exit the shell"),
]


def parse_action(command: str, args: list[str]) -> tuple[str, dict[str, str]]:
    """
    Map a shell command line onto an action name and its parameters.

    Raises:
        ValueError: If a required argument is missing
    """
    action, names = ACTION_COMMANDS[command]
    if not names:
        return action, {}
    if len(args) < len(names) - 1 or (len(args) < len(names) and names[-1] != "text"):
        usage = " ".join(f"<{name}>" for name in names)
        raise ValueError(f"Usage: {command} {usage}")
    params = dict(zip(names[:-1], args))
    params[names[-1]] = " ".join(args[len(names) - 1:])
    return action, params


class InteractiveShell:
    """
    Interactive shell for the notes client.

    Usage:
        shell = InteractiveShell()
        await shell.run()
    """

    def __init__(self) -> None:
        """Initialize the interactive shell."""
        self.running = False
        self.client = get_api_client()
        self.state = UIState(signed_in=self.client.signed_in)
        self.commands: dict[str, Callable] = {
            "help": self._cmd_help,
            "ls": self._cmd_show,
            "notes": self._page(Page.NOTES),
            "todo": self._page(Page.TODO),
            "trash": self._page(Page.TRASH),
            "clear": self._cmd_clear,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }

    async def run(self) -> None:
        """Run the interactive shell."""
        self.running = True

        console.print(Panel(
            "[bold]CloudNotes[/bold]\n"
            "Type [cyan]help[/cyan] for available commands, [cyan]quit[/cyan] to exit.",
            title="Welcome",
        ))
        console.print()

        if self.state.signed_in:
            await self.dispatch("whoami", [])
            await self.dispatch("refresh", [])
        else:
            console.print(render(self.state))

        while self.running:
            try:
                user_input = console.input(f"[bold cyan]{self.state.page.value}>[/bold cyan] ").strip()

                if not user_input:
                    continue

                parts = shlex.split(user_input)
                await self.dispatch(parts[0].lower(), parts[1:])

            except KeyboardInterrupt:
                console.print("\n[dim]Use 'quit' to exit[/dim]")
            except EOFError:
                break
            except ValueError as e:
                console.print(f"[red]{e}[/red]")

        await close_api_client()
        console.print("[dim]Goodbye![/dim]")

    async def dispatch(self, command: str, args: list[str]) -> None:
        """Run one shell command and render the resulting snapshot."""
        if command in self.commands:
            await self.commands[command](args)
            return

        if command not in ACTION_COMMANDS:
            console.print(f"[red]Unknown command: {command}[/red]")
            console.print("Type [cyan]help[/cyan] for available commands.")
            return

        if not self.state.signed_in:
            console.print("[red]Sign in first: set CLOUDNOTES_TOKEN or pass --token.[/red]")
            return

        action, params = parse_action(command, args)
        if action == "create" and not params["text"]:
            params["text"] = console.input("Type your note: ")
            if not params["text"]:
                return

        try:
            self.state = await run_action(action, self.client, self.state, **params)
        except ActionError as e:
            console.print(f"[red]{e}[/red]")
            return

        if action == "whoami" and not self.state.error:
            console.print(f"[dim]Signed in as {self.state.email or self.state.owner_id}[/dim]")
        else:
            console.print(render(self.state))

    def _page(self, page: Page) -> Callable:
        async def switch(args: list[str]) -> None:
            self.state = reduce(self.state, PageSwitched(page=page))
            console.print(render(self.state))
        return switch

    async def _cmd_help(self, args: list[str]) -> None:
        """Display help information."""
        table = Table(title="Available Commands", show_header=True)
        table.add_column("Command", style="cyan")
        table.add_column("Description")

        for command, description in HELP_ROWS:
            table.add_row(command, description)

        console.print(table)

    async def _cmd_show(self, args: list[str]) -> None:
        console.print(render(self.state))

    async def _cmd_clear(self, args: list[str]) -> None:
        """Clear the screen."""
        console.clear()

    async def _cmd_quit(self, args: list[str]) -> None:
        """Exit the shell."""
        self.running = False


async def run_shell() -> None:
    """Run the interactive shell."""
    shell = InteractiveShell()
    await shell.run()
