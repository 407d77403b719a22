# ABOUTME: Gateway connection management commands
# ABOUTME: Implements gw ls, gw add and gw del over the local connection store

"""Gateway commands - Manage saved gateway connections."""

import questionary
from cleo.commands.command import Command
from cleo.helpers import option
from rich import box
from rich.console import Console
from rich.table import Table

from wampark_cli.cli.utils.validators import validate_host, validate_port, validate_required
from wampark_cli.config import Config, Connection, DeleteResult


class GatewayListCommand(Command):
    """List saved gateway connections."""

    name = "gw ls"
    description = "List the configured gateway connections"

    def handle(self) -> int:
        """Execute the gw ls command."""
        console = Console()

        try:
            connections = Config.load().connection_store().load()
        except Exception as e:
            console.print(f"\n[red]Error reading connections: {e}[/red]\n")
            return 1

        if not connections:
            console.print("[yellow]No connections configured.[/yellow]")
            console.print("Run [cyan]wampark gw add --host <host> --port <port> --secret-key <key>[/cyan] to add one.")
            return 0

        table = Table(title="Configured Gateways", box=box.ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right")
        table.add_column("Host", style="cyan", no_wrap=True)
        table.add_column("Port", justify="right")

        for index, conn in enumerate(connections, start=1):
            table.add_row(str(index), conn.host, str(conn.port))

        console.print(table)
        return 0


class GatewayAddCommand(Command):
    """Save a new gateway connection."""

    name = "gw add"
    description = "Add a connection to a gateway"

    options = [
        option("host", "H", description="Gateway host", flag=False),
        option("port", "p", description="Gateway port", flag=False),
        option("secret-key", "k", description="Gateway secret key", flag=False),
    ]

    def handle(self) -> int:
        """Execute the gw add command."""
        console = Console()

        host = self.option("host")
        port = self.option("port")
        secret_key = self.option("secret-key")

        # Prompt for whatever was not given on the command line
        if not host:
            host = questionary.text("Gateway host:", default="localhost", validate=validate_host).ask()
        if not port:
            port = questionary.text("Gateway port:", default="5001", validate=validate_port).ask()
        if not secret_key:
            secret_key = questionary.password("Gateway secret key:", validate=validate_required).ask()

        if host is None or port is None or secret_key is None:  # User cancelled
            console.print("\n[yellow]Cancelled.[/yellow]")
            return 0

        for result in (validate_host(host), validate_port(port), validate_required(secret_key)):
            if result is not True:
                console.print(f"[red]Error: {result}[/red]")
                return 1

        connection = Connection(host=host.strip(), port=int(str(port).strip()), secret_key=secret_key.strip())

        try:
            Config.load().connection_store().add(connection)
        except OSError as e:
            console.print(f"[red]Error saving connection: {e}[/red]")
            return 1

        console.print(f"[green]✓ Gateway connection {connection.label} saved[/green]")
        return 0


class GatewayDeleteCommand(Command):
    """Remove a saved gateway connection."""

    name = "gw del"
    description = "Remove the connection for the gateway at <host> and <port>"

    options = [
        option("host", "H", description="Gateway host", flag=False),
        option("port", "p", description="Gateway port", flag=False),
        option("force", "f", description="Skip confirmation prompt", flag=True),
    ]

    def handle(self) -> int:
        """Execute the gw del command."""
        console = Console()

        host = self.option("host")
        port = self.option("port")
        if not host or not port:
            console.print("[red]Both --host and --port are required.[/red]")
            return 1

        if validate_port(port) is not True:
            console.print(f"[red]Error: {validate_port(port)}[/red]")
            return 1

        store = Config.load().connection_store()

        try:
            connections = store.load()
        except Exception as e:
            console.print(f"[red]Error reading connections: {e}[/red]")
            return 1

        if not connections:
            console.print("[yellow]No connections configured.[/yellow]")
            return 0

        if not any(conn.matches(host, port) for conn in connections):
            console.print(f"[yellow]No connection found for host {host} and port {port}.[/yellow]")
            return 0

        if not self.option("force") and self.io.is_interactive():
            confirm = questionary.confirm(
                f"Are you sure you want to delete the connection {host}:{port}?", default=False
            ).ask()
            if not confirm:
                console.print("[yellow]Deletion cancelled.[/yellow]")
                return 0

        result = store.delete(host, port)
        if result is DeleteResult.DELETED:
            console.print(f"[green]✓ Connection {host}:{port} deleted[/green]")
        else:
            console.print(f"[yellow]No connection found for host {host} and port {port}.[/yellow]")
        return 0
