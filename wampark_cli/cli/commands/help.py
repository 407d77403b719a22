# ABOUTME: Help command printing the overview of top-level commands
# ABOUTME: Falls back to cleo's per-command help for "help <command>" and --help

"""Help command - Show available commands."""

from cleo.commands.help_command import HelpCommand as BaseHelpCommand
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

COMMANDS = [
    ("help", "Show this help"),
    ("create <appName>", "Create an application in the current directory"),
    ("gw ls", "List the configured gateway connections"),
    ("gw add -H <host> -p <port> -k <secretKey>", "Add a connection to a gateway"),
    ("gw del -H <host> -p <port>", "Remove the connection for the gateway at <host> and <port>"),
    ("sh [port] [host]", "Open the shell for the gateway at [port] (default 5001) and [host] (default localhost)"),
]


class HelpCommand(BaseHelpCommand):
    description = "Show the available commands, or the help of one command"

    def handle(self) -> int:
        """Execute the help command."""
        command_requested = getattr(self, "_command", None) is not None
        if not command_requested and self.argument("command_name") in (None, "help"):
            self._print_overview()
            return 0
        return super().handle()

    def _print_overview(self) -> None:
        console = Console()

        table = Table(title="Available commands", box=box.ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("Command", style="cyan", no_wrap=True)
        table.add_column("Description")

        for command, description in COMMANDS:
            table.add_row(escape(command), description)

        console.print(table)
        console.print("\nRun [cyan]wampark help <command>[/cyan] for the options of one command.")
