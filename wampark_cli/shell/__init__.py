# ABOUTME: Interactive gateway shell package
# ABOUTME: Grammar, history, wizards and the session loop

"""Interactive shell for a connected gateway."""

from wampark_cli.shell.session import GatewayShell, ShellState

__all__ = ["GatewayShell", "ShellState"]
