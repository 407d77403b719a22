# ABOUTME: Shell command that opens the interactive gateway shell
# ABOUTME: Resolves the saved connection for port/host and hands over to GatewayShell

"""Shell command - Interactive access to a gateway."""

from cleo.commands.command import Command
from cleo.helpers import argument
from rich.console import Console

from wampark_cli.cli.utils.validators import validate_port
from wampark_cli.config import Config
from wampark_cli.shell import GatewayShell


class ShellCommand(Command):
    name = "sh"
    description = "Open the shell for the gateway at [port] and [host]"

    arguments = [
        argument("port", description="Gateway port", optional=True, default="5001"),
        argument("host", description="Gateway host", optional=True, default="localhost"),
    ]

    def handle(self) -> int:
        """Execute the sh command."""
        console = Console()
        port = self.argument("port")
        host = self.argument("host")

        valid = validate_port(port)
        if valid is not True:
            console.print(f"[red]Error: {valid}[/red]")
            return 1

        shell = GatewayShell(Config.load(), host, int(port), console=console)
        return shell.run()
