# ABOUTME: Exception hierarchy shared by the store, gateway client and scaffolder
# ABOUTME: Commands catch WamparkError and report it instead of crashing

"""Exceptions raised by wampark-cli library code."""


class WamparkError(Exception):
    """Base exception for wampark-cli operations."""

    pass


class ConnectionNotFoundError(WamparkError):
    """Raised when no saved connection matches a host and port."""

    def __init__(self, host: str, port: int | str):
        self.host = host
        self.port = port
        super().__init__(f"No connection found for host {host} and port {port}.")


class GatewayError(WamparkError):
    """Raised when a gateway request fails or returns a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is None:
            return message
        if self.body:
            return f"{message} (HTTP {self.status_code}: {self.body})"
        return f"{message} (HTTP {self.status_code})"


class ScaffoldError(WamparkError):
    """Raised when cloning or copying the template repository fails."""

    pass
