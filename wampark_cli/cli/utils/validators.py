# ABOUTME: Input validators shared by command options and questionary prompts
# ABOUTME: Each returns True when valid or an error message string

"""Validators for interactive prompts and command options."""

import re


def validate_port(value) -> bool | str:
    """Validate a TCP port number.

    Args:
        value: The port as typed (string) or already parsed (int)

    Returns:
        True if valid, error message if invalid
    """
    try:
        port = int(str(value).strip())
    except (TypeError, ValueError):
        return "Port must be a number between 1 and 65535"

    if 1 <= port <= 65535:
        return True
    return "Port must be a number between 1 and 65535"


def validate_host(value: str) -> bool | str:
    """Validate a gateway host name or address."""
    if value and re.match(r"^[A-Za-z0-9.\-:\[\]]+$", value.strip()):
        return True
    return "Host is required (letters, digits, dots, hyphens)"


def validate_app_name(value: str) -> bool | str:
    """Validate an application directory name."""
    if value and re.match(r"^[A-Za-z0-9_.-]+$", value) and value not in (".", ".."):
        return True
    return "Invalid application name (alphanumeric, dot, underscore, hyphen only)"


def validate_required(value: str) -> bool | str:
    return bool(value and value.strip()) or "A value is required"
