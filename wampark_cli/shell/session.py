# ABOUTME: Interactive shell bound to one gateway connection
# ABOUTME: Reads lines with history and completion, dispatches them to wizards

"""Gateway shell session."""

from collections.abc import Callable
from enum import Enum

from prompt_toolkit import PromptSession
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from wampark_cli.config import Config
from wampark_cli.errors import ConnectionNotFoundError, WamparkError
from wampark_cli.gateway import GatewayClient
from wampark_cli.shell.grammar import CommandCompleter, ParsedLine, ShellAction, parse_line
from wampark_cli.shell.history import LineHistory
from wampark_cli.shell.wizards import GatewayWizards, WizardCancelled

HELP_ROWS = [
    ("ls containers", "List all containers on the gateway"),
    ("ls tenants", "List all tenants"),
    ("ls tenant containers <tenantId>", "List the containers of the given tenant"),
    ("ls tenant containers", "Choose a tenant from a menu, then list its containers"),
    ("add container", "Register a new container and scaffold its directory"),
    ("del container", "Remove an existing container"),
    ("add tenant", "Create a new tenant"),
    ("del tenant", "Remove an existing tenant"),
    ("enable tenant", "Enable a tenant"),
    ("disable tenant", "Disable a tenant"),
    ("enable tenant-container", "Enable one of a tenant's containers"),
    ("disable tenant-container", "Disable one of a tenant's containers"),
    ("add tenant-container", "Attach a container to a tenant"),
    ("help", "Show the available commands"),
    ("exit", "Leave the shell"),
]


class ShellState(str, Enum):
    """Lifecycle of a gateway shell."""

    CONNECTING = "connecting"
    LIVE = "live"
    READING_LINE = "reading_line"
    DISPATCHING = "dispatching"
    WIZARD_ACTIVE = "wizard_active"
    IDLE = "idle"
    CLOSED = "closed"


class GatewayShell:
    """Line-oriented shell for one gateway.

    Only one wizard runs at a time; lines submitted while one is active are
    dropped, not queued.
    """

    def __init__(self, config: Config, host: str, port: int | str, console: Console | None = None):
        self.config = config
        self.host = host
        self.port = port
        self.console = console or Console()
        self.state = ShellState.CONNECTING
        self.wizard_active = False
        self.client: GatewayClient | None = None
        self.wizards: GatewayWizards | None = None
        self._session: PromptSession | None = None
        self.history = LineHistory(config.history_file)

    @property
    def prompt_text(self) -> str:
        return f"gateway {self.host}:{self.port}> "

    def connect(self) -> bool:
        """Resolve the connection and probe the gateway. False closes the shell."""
        self.state = ShellState.CONNECTING

        try:
            connection = self.config.connection_store().get(self.host, self.port)
        except ConnectionNotFoundError as e:
            self.console.print(f"[red]{escape(str(e))}[/red]")
            self.state = ShellState.CLOSED
            return False
        except Exception as e:
            self.console.print(f"[red]Error reading connections: {escape(str(e))}[/red]")
            self.state = ShellState.CLOSED
            return False

        self.client = GatewayClient(connection, timeout=self.config.request_timeout, debug=self.config.debug)
        status = self.client.healthcheck()
        if not status:
            self.console.print("[red]Gateway is offline. Leaving the shell.[/red]")
            self.state = ShellState.CLOSED
            return False

        self.console.print(f"[green]Connected to gateway {connection.label}[/green] Status: {escape(str(status))}")
        self.wizards = GatewayWizards(
            self.client,
            console=self.console,
            template_repo=self.config.template_repo,
            debug=self.config.debug,
        )
        self.state = ShellState.LIVE
        return True

    def _create_session(self) -> PromptSession:
        return PromptSession(
            history=LineHistory(self.config.history_file),
            completer=CommandCompleter(),
            complete_while_typing=False,
        )

    def _reset_session(self) -> None:
        """Recreate the line reader so it picks up history written meanwhile."""
        if self._session is not None:
            self._session = self._create_session()

    def run(self) -> int:
        """Connect, then read and dispatch lines until exit or EOF."""
        if not self.connect():
            return 1

        self._session = self._create_session()
        while self.state != ShellState.CLOSED:
            self.state = ShellState.READING_LINE
            try:
                line = self._session.prompt(self.prompt_text)
            except KeyboardInterrupt:
                continue
            except EOFError:
                self.close()
                break

            self.history.store_string(line)
            self.dispatch(line)

        return 0

    def close(self) -> None:
        self.console.print("Leaving the shell...")
        self.state = ShellState.CLOSED

    def dispatch(self, line: str) -> bool:
        """Handle one submitted line.

        Returns False if the line was ignored because a wizard is running.
        """
        if self.wizard_active:
            return False

        parsed = parse_line(line)
        if parsed is None:
            return True

        self.state = ShellState.DISPATCHING

        if parsed.action is None:
            self.console.print(f"[yellow]Unknown command: {escape(' '.join([parsed.command, *parsed.args]))}[/yellow]")
            self.state = ShellState.IDLE
            return True

        if parsed.action is ShellAction.EXIT:
            self.close()
            return True

        if parsed.action is ShellAction.HELP:
            self.print_help()
            self.state = ShellState.IDLE
            return True

        handler, resets_session = self._handler(parsed)
        self._run_wizard(handler)
        if resets_session:
            self._reset_session()

        self.state = ShellState.IDLE
        return True

    def _handler(self, parsed: ParsedLine) -> tuple[Callable[[], None], bool]:
        """Map an action to its wizard and whether it changes gateway state."""
        wizards = self.wizards
        action = parsed.action

        if action is ShellAction.LS_TENANT_CONTAINERS:
            tenant_id = parsed.argument
            if tenant_id:
                return (lambda: wizards.list_tenant_containers(tenant_id)), False
            return wizards.prompt_tenant_and_list_containers, True

        handlers = {
            ShellAction.LS_CONTAINERS: (wizards.list_containers, False),
            ShellAction.LS_TENANTS: (wizards.list_tenants, False),
            ShellAction.ADD_CONTAINER: (wizards.add_container, True),
            ShellAction.ADD_TENANT: (wizards.add_tenant, True),
            ShellAction.ADD_TENANT_CONTAINER: (wizards.add_tenant_container, True),
            ShellAction.DEL_CONTAINER: (wizards.delete_container, True),
            ShellAction.DEL_TENANT: (wizards.delete_tenant, True),
            ShellAction.ENABLE_TENANT: ((lambda: wizards.toggle_tenant(True)), True),
            ShellAction.DISABLE_TENANT: ((lambda: wizards.toggle_tenant(False)), True),
            ShellAction.ENABLE_TENANT_CONTAINER: ((lambda: wizards.toggle_tenant_container(True)), True),
            ShellAction.DISABLE_TENANT_CONTAINER: ((lambda: wizards.toggle_tenant_container(False)), True),
        }
        return handlers[action]

    def _run_wizard(self, handler: Callable[[], None]) -> None:
        self.wizard_active = True
        self.state = ShellState.WIZARD_ACTIVE
        try:
            handler()
        except WizardCancelled:
            pass
        except (WamparkError, OSError) as e:
            self.console.print(f"[red]Error running command: {escape(str(e))}[/red]")
        except Exception as e:
            # Unexpected failures end the command, never the shell
            self.console.print(f"[red]Error running command: {type(e).__name__}: {escape(str(e))}[/red]")
        finally:
            self.wizard_active = False

    def print_help(self) -> None:
        table = Table(title="Available commands", box=box.ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("Command", style="cyan", no_wrap=True)
        table.add_column("Description")

        for command, description in HELP_ROWS:
            table.add_row(escape(command), description)

        self.console.print(table)
