# ABOUTME: Create command that scaffolds a new application with its gateway
# ABOUTME: Prompts for gateway settings, copies templates and renders the gateway .env

"""Create command - Scaffold a new application in the current directory."""

from pathlib import Path

import questionary
from cleo.commands.command import Command
from cleo.helpers import argument
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from wampark_cli import scaffold
from wampark_cli.cli.utils.validators import validate_app_name, validate_host, validate_port
from wampark_cli.config import Config
from wampark_cli.errors import ScaffoldError


def gateway_placeholders(answers: dict[str, str], secret_key: str) -> dict[str, object]:
    """Values substituted into the gateway template's .env file."""
    return {
        scaffold.WAMP_URL: answers["wamp_url"],
        scaffold.WAMP_REALM: answers["wamp_realm"],
        scaffold.WAMP_AUTHID: answers["wamp_authid"],
        scaffold.WAMP_AUTHPASS: answers["wamp_authpass"],
        scaffold.HTTP_PORT: answers["http_port"],
        scaffold.HTTP_HOST: answers["http_host"],
        scaffold.DB_URI: f"{answers['db_uri']}/{answers['db_name']}",
        scaffold.SECRET_KEY: secret_key,
    }


class CreateCommand(Command):
    name = "create"
    description = "Create an application in the current directory"

    arguments = [argument("name", description="Application name (also the directory created)")]

    def handle(self) -> int:
        """Execute the create command."""
        console = Console()
        app_name = self.argument("name")

        valid = validate_app_name(app_name)
        if valid is not True:
            console.print(f"[red]Error: {valid}[/red]")
            return 1

        answers = self._gather_answers(app_name)
        if answers is None:
            console.print("\n[yellow]Creation cancelled.[/yellow]")
            return 0

        config = Config.load()
        app_dir = Path.cwd() / app_name
        gateway_dir = app_dir / "gateway"
        secret_key = scaffold.generate_secret_key()

        try:
            with Progress(
                SpinnerColumn(), TextColumn("[progress.description]{task.description}"), console=console
            ) as progress:
                task = progress.add_task("Cloning template repository...", total=None)

                with scaffold.TemplateCheckout(config.template_repo, debug=config.debug) as checkout:
                    progress.update(task, description="Copying application template...")
                    checkout.copy("application", app_dir)

                    progress.update(task, description="Copying gateway template...")
                    checkout.copy("gateway", gateway_dir)
                    env_file = checkout.render_env("gateway", gateway_dir, gateway_placeholders(answers, secret_key))

                progress.update(task, completed=True)
        except ScaffoldError as e:
            console.print(f"[red]Error creating application: {e}[/red]")
            return 1

        details = f"Directory: [cyan]{app_dir}[/cyan]"
        if env_file:
            details += f"\nGateway environment: [cyan]{env_file}[/cyan]"

        console.print(
            Panel.fit(
                f"[bold green]✓ Application {app_name} created[/bold green]\n\n{details}",
                border_style="green",
                padding=(1, 2),
            )
        )
        console.print("\nRegister the gateway once it is running:")
        console.print(
            f"  [cyan]wampark gw add --host {answers['http_host']} --port {answers['http_port']} "
            "--secret-key <SECRET_KEY from gateway/.env.development>[/cyan]"
        )
        return 0

    def _gather_answers(self, app_name: str) -> dict[str, str] | None:
        """Prompt for the gateway settings. Returns None if the user cancelled."""
        questions = [
            ("http_port", lambda: questionary.text("Gateway port:", default="5001", validate=validate_port)),
            ("http_host", lambda: questionary.text("Gateway host:", default="localhost", validate=validate_host)),
            ("db_name", lambda: questionary.text("Gateway database name:", default=f"{app_name}_gateway")),
            ("db_uri", lambda: questionary.text("MongoDB connection string:", default="mongodb://localhost:27017")),
            ("wamp_url", lambda: questionary.text("Crossbar.io URL:", default="ws://localhost:9001/ws")),
            ("wamp_realm", lambda: questionary.text("Crossbar.io REALM:", default="realm1")),
            ("wamp_authid", lambda: questionary.text("Crossbar.io AUTHID:")),
            ("wamp_authpass", lambda: questionary.password("Crossbar.io AUTHPASS:")),
        ]

        answers = {}
        for key, question in questions:
            answer = question().ask()
            if answer is None:  # User cancelled
                return None
            answers[key] = answer

        return answers
