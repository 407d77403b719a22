# ABOUTME: Package root for the wampark developer CLI
# ABOUTME: Exposes the package version used by the cleo application

"""Developer CLI for wampark applications, gateways and containers."""

__version__ = "1.0.0"
