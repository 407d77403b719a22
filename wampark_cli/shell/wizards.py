# ABOUTME: Multi-step prompts behind each gateway shell command
# ABOUTME: Builds request payloads for containers and tenants and prints the results

"""Tenant and container wizards for the gateway shell."""

from pathlib import Path
from typing import Any

import questionary
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from wampark_cli import scaffold
from wampark_cli.config import Connection
from wampark_cli.errors import GatewayError
from wampark_cli.gateway import GatewayClient


class WizardCancelled(Exception):
    """Raised when the user aborts a prompt with Ctrl+C."""

    pass


MAX_PORT = 65535


def next_free_port(http_port: int | str, used_ports: set[int]) -> int:
    """Pick a container port for a gateway listening on http_port.

    Candidates start at http_port * 10 + 1 and count up past any port already
    used by a known container. Another session adding a container at the same
    time can still pick the same port.

    Raises:
        GatewayError: http_port is not a number, or no candidate fits in 65535
    """
    try:
        base = int(str(http_port).strip())
    except (TypeError, ValueError) as e:
        raise GatewayError(f"Gateway reported an invalid HTTP_PORT: {http_port!r}") from e

    port = base * 10 + 1
    while port in used_ports:
        port += 1

    if not 1 <= port <= MAX_PORT:
        raise GatewayError(f"No container port available for gateway port {base}: {port} is above {MAX_PORT}")
    return port


def normalize_path(path: str | None) -> str | None:
    """Prefix a route path with '/' if needed. Empty paths become None."""
    if not path:
        return None
    return path if path.startswith("/") else f"/{path}"


def db_uri_base(db_uri: str | None) -> str:
    """Strip the database name from a URI: mongodb://host:27017/db -> mongodb://host:27017."""
    return "/".join((db_uri or "").split("/")[:3])


def container_placeholders(
    env: dict[str, Any],
    connection: Connection,
    container_id: str,
    port: int,
    host: str,
    db_uri: str,
) -> dict[str, object]:
    """Values substituted into the container template's .env file."""
    return {
        scaffold.WAMP_URL: env.get("WAMP_URL"),
        scaffold.WAMP_REALM: env.get("WAMP_REALM"),
        scaffold.WAMP_AUTHID: env.get("WAMP_AUTHID"),
        scaffold.WAMP_AUTHPASS: env.get("WAMP_AUTHPASS"),
        scaffold.HTTP_PORT: port,
        scaffold.HTTP_HOST: host,
        scaffold.DB_URI: db_uri,
        scaffold.GATEWAY_URL: connection.base_url,
        scaffold.GATEWAY_SECRET_KEY: connection.secret_key,
        scaffold.CONTAINER_ID: container_id,
    }


def _port_set(containers: list[dict[str, Any]]) -> set[int]:
    ports = set()
    for container in containers:
        try:
            ports.add(int(container.get("port")))
        except (TypeError, ValueError):
            continue
    return ports


def _tenant_title(tenant: dict[str, Any]) -> str:
    return f"ID: {tenant.get('_id')}, Name: {tenant.get('name')}, Domain: {tenant.get('domain')}"


class GatewayWizards:
    """Operations the gateway shell runs against one connected gateway.

    Selection wizards always fetch the current remote list first and act on
    the identifier the gateway reported at selection time.
    """

    def __init__(
        self,
        client: GatewayClient,
        console: Console | None = None,
        template_repo: str = "",
        workdir: Path | None = None,
        debug: bool = False,
    ):
        self.client = client
        self.connection = client.connection
        self.console = console or Console()
        self.template_repo = template_repo
        self.workdir = Path(workdir) if workdir else None
        self.debug = debug

    # Prompt helpers

    @staticmethod
    def _ask(question) -> Any:
        answer = question.ask()
        if answer is None:  # User cancelled
            raise WizardCancelled()
        return answer

    def _select(self, message: str, choices: list[questionary.Choice]) -> Any:
        return self._ask(questionary.select(message, choices=choices))

    def _select_tenant(self, message: str, tenants: list[dict[str, Any]]) -> dict[str, Any]:
        choices = [questionary.Choice(_tenant_title(tenant), value=tenant.get("_id")) for tenant in tenants]
        tenant_id = self._select(message, choices)
        return next(tenant for tenant in tenants if tenant.get("_id") == tenant_id)

    def _fetch_tenants(self) -> list[dict[str, Any]]:
        tenants = self.client.list_tenants()
        if not tenants:
            self.console.print("[yellow]No tenants found.[/yellow]")
        return tenants

    def _resolve(self, path: str) -> Path:
        target = Path(path)
        if self.workdir and not target.is_absolute():
            return self.workdir / target
        return target

    # Listing

    def list_containers(self) -> None:
        containers = self.client.list_containers()

        table = Table(title="Containers", box=box.ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name")
        table.add_column("Port", justify="right")
        table.add_column("Active", justify="center")

        for container in containers:
            active = "yes" if container.get("active") else "no"
            table.add_row(str(container.get("_id")), str(container.get("name")), str(container.get("port")), active)

        self.console.print(table)

    def list_tenants(self) -> None:
        tenants = self.client.list_tenants()

        table = Table(title="Tenants", box=box.ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name")
        table.add_column("Domain")

        for tenant in tenants:
            table.add_row(str(tenant.get("_id")), str(tenant.get("name")), str(tenant.get("domain")))

        self.console.print(table)

    def list_tenant_containers(self, tenant_id: str) -> None:
        """List a tenant's container bindings. Gateway errors are reported, not raised."""
        try:
            bindings = self.client.list_tenant_containers(tenant_id)
        except GatewayError as e:
            self.console.print(f"[red]Error listing tenant containers: {escape(str(e))}[/red]")
            return

        table = Table(title="Tenant Containers", box=box.ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Active", justify="center")
        table.add_column("Installed", justify="center")

        for binding in bindings:
            table.add_row(str(binding.get("_id")), str(binding.get("active")), str(binding.get("installed")))

        self.console.print(table)

    def prompt_tenant_and_list_containers(self) -> None:
        tenants = self._fetch_tenants()
        if not tenants:
            return

        tenant = self._select_tenant("Choose a tenant to list its containers:", tenants)
        self.list_tenant_containers(tenant.get("_id"))

    # Containers

    def add_container(self) -> None:
        """Register a container on the gateway and scaffold its directory."""
        env = self.client.get_env()

        name = self._ask(questionary.text("Container name:", default="My Container"))
        description = self._ask(questionary.text("Container description:", default="My Container Description"))
        host = self._ask(questionary.text("Container host:", default=self.connection.host))
        path = self._ask(questionary.text("Container path:", default="myContainer"))
        static_path = self._ask(questionary.text("Container static path (default empty):", default=""))
        tenancy_enabled = self._ask(questionary.confirm("Enable tenancy?", default=True))
        proxy_enabled = self._ask(questionary.confirm("Enable proxy?", default=True))
        db_uri = self._ask(questionary.text("Container database URL:", default=db_uri_base(env.get("DB_URI"))))

        path = normalize_path(path) or "/"
        static_path = normalize_path(static_path)

        container_dir = self._ask(questionary.text("Container directory:", default=path.replace("/", "")))
        used_ports = _port_set(self.client.list_containers())
        port = next_free_port(env.get("HTTP_PORT") or self.connection.port, used_ports)

        target_dir = self._resolve(container_dir)
        target_dir.mkdir(parents=True, exist_ok=True)

        created = self.client.create_container(
            {
                "name": name,
                "description": description,
                "path": path,
                "staticPath": static_path,
                "port": port,
                "host": host,
                "proxyEnabled": proxy_enabled,
                "tenancyEnabled": tenancy_enabled,
                "dbUri": db_uri,
            }
        )
        container_id = created.get("_id")
        self.console.print(f"[green]✓ Container registered on gateway[/green] (id {container_id}, port {port})")

        placeholders = container_placeholders(env, self.connection, container_id, port, host, db_uri)
        scaffold.scaffold(
            "container",
            target_dir,
            placeholders,
            repo_url=self.template_repo,
            workdir=self.workdir,
            debug=self.debug,
        )

        self.console.print(f"[green]✓ Container {name} created in {container_dir}[/green]")

    def delete_container(self) -> None:
        containers = self.client.list_containers()
        if not containers:
            self.console.print("[yellow]No containers found.[/yellow]")
            return

        choices = [
            questionary.Choice(
                f"ID: {c.get('_id')}, Name: {c.get('name')}, Port: {c.get('port')}",
                value=c.get("_id"),
            )
            for c in containers
        ]
        container_id = self._select("Choose a container to delete:", choices)

        if not self._ask(questionary.confirm("Are you sure you want to delete this container?", default=False)):
            return

        self.client.delete_container(container_id)
        self.console.print("[green]✓ Container deleted[/green]")

    # Tenants

    def add_tenant(self) -> None:
        name = self._ask(questionary.text("Tenant name:", default="MyTenant"))
        domain = self._ask(questionary.text("Tenant domain:", default="mytenant.com"))
        database_name = self._ask(questionary.text("Tenant database name:", default="mytenant_db"))

        self.client.create_tenant({"name": name, "domain": domain, "databaseName": database_name})
        self.console.print(f"[green]✓ Tenant {name} created[/green]")

    def delete_tenant(self) -> None:
        tenants = self._fetch_tenants()
        if not tenants:
            return

        tenant = self._select_tenant("Choose a tenant to delete:", tenants)

        if not self._ask(questionary.confirm("Are you sure you want to delete this tenant?", default=False)):
            return

        self.client.delete_tenant(tenant.get("_id"))
        self.console.print("[green]✓ Tenant deleted[/green]")

    def toggle_tenant(self, enable: bool) -> None:
        verb = "enable" if enable else "disable"
        tenants = self._fetch_tenants()
        if not tenants:
            return

        tenant = self._select_tenant(f"Choose a tenant to {verb}:", tenants)
        self.client.set_tenant_active(tenant.get("_id"), enable)
        self.console.print(f"[green]✓ Tenant {verb}d[/green]")

    def toggle_tenant_container(self, enable: bool) -> None:
        verb = "enable" if enable else "disable"
        tenants = self._fetch_tenants()
        if not tenants:
            return

        tenant = self._select_tenant("Choose a tenant:", tenants)
        bindings = tenant.get("containers") or []
        if not bindings:
            self.console.print("[yellow]No containers available for this tenant.[/yellow]")
            return

        choices = [
            questionary.Choice(f"ID: {b.get('_id')}, Container: {b.get('container')}", value=b.get("_id"))
            for b in bindings
        ]
        binding_id = self._select(f"Choose a container to {verb}:", choices)

        self.client.set_tenant_container_active(tenant.get("_id"), binding_id, enable)
        self.console.print(f"[green]✓ Tenant container {verb}d[/green]")

    def add_tenant_container(self) -> None:
        tenants = self._fetch_tenants()
        if not tenants:
            return

        tenant = self._select_tenant("Choose a tenant:", tenants)
        # Bindings name the container they point at
        attached = {b.get("container") for b in tenant.get("containers") or []}

        containers = self.client.list_containers()
        available = [c for c in containers if c.get("name") not in attached and c.get("_id") not in attached]
        if not available:
            self.console.print("[yellow]No containers available to add to this tenant.[/yellow]")
            return

        choices = [
            questionary.Choice(f"ID: {c.get('_id')}, Name: {c.get('name')}", value=c.get("_id")) for c in available
        ]
        container_id = self._select("Choose a container to add to the tenant:", choices)

        self.client.attach_container_to_tenant(tenant.get("_id"), container_id)

        selected = next(c for c in available if c.get("_id") == container_id)
        container_name = escape(f"[{selected.get('name')}]")
        tenant_name = escape(f"[{tenant.get('name')}]")
        self.console.print(f"[green]✓ Container {container_name} added to tenant {tenant_name}[/green]")
