# ABOUTME: CLI module for the wampark developer tool
# ABOUTME: Provides the command-line interface for scaffolding and gateway management

"""Command-line interface for wampark-cli."""

from cleo.application import Application

from wampark_cli import __version__

from .commands.create import CreateCommand
from .commands.gw import GatewayAddCommand, GatewayDeleteCommand, GatewayListCommand
from .commands.help import HelpCommand
from .commands.shell import ShellCommand


def create_application() -> Application:
    """Create the CLI application."""
    application = Application("wampark", __version__)

    # Replaces cleo's built-in help
    application.add(HelpCommand())
    application.add(CreateCommand())

    # Gateway connection commands
    application.add(GatewayListCommand())
    application.add(GatewayAddCommand())
    application.add(GatewayDeleteCommand())

    application.add(ShellCommand())

    return application


def main():
    """Main entry point for the CLI."""
    application = create_application()
    application.run()


if __name__ == "__main__":
    main()
