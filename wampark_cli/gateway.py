# ABOUTME: HTTP client for the remote gateway REST API
# ABOUTME: Attaches the shared secret header and maps failures to GatewayError

"""Gateway API client."""

from typing import Any

import requests
from rich.console import Console

from wampark_cli.config import Connection
from wampark_cli.errors import GatewayError

SECRET_KEY_HEADER = "X-SECRET-KEY"


class GatewayClient:
    """Thin wrapper over the gateway REST API for one connection.

    Every call except healthcheck() sends the connection's secret key. Calls
    are never retried: a failure raises GatewayError and the caller decides
    whether to report and continue.
    """

    def __init__(
        self,
        connection: Connection,
        timeout: float | None = None,
        debug: bool = False,
        session: requests.Session | None = None,
    ):
        self.connection = connection
        self.timeout = timeout
        self.debug = debug
        self.session = session or requests.Session()
        self._debug_console = Console(stderr=True)

    def _debug_print(self, message: str) -> None:
        """Print debug message only if debug mode is enabled"""
        if self.debug:
            self._debug_console.print(f"[dim]Debug: {message}[/dim]", highlight=False)

    def _url(self, path: str) -> str:
        return f"{self.connection.base_url}{path}"

    def _request(self, method: str, path: str, json_body: dict[str, Any] | None = None, auth: bool = True) -> Any:
        """Send a request and return the decoded response body."""
        url = self._url(path)
        headers = {SECRET_KEY_HEADER: self.connection.secret_key} if auth else {}

        self._debug_print(f"{method} {url}")
        try:
            response = self.session.request(method, url, json=json_body, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self._debug_print(f"{method} {url} failed: {e}")
            raise GatewayError(f"Could not reach gateway {self.connection.label}: {e}") from e

        self._debug_print(f"{method} {url} -> {response.status_code}")
        body = self._decode(response)

        if not response.ok:
            raise GatewayError(f"Gateway request {method} {path} failed", status_code=response.status_code, body=body)

        return body

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _object(body: Any, path: str) -> dict[str, Any]:
        """Require a JSON object body. An empty body counts as {}."""
        if body is None:
            return {}
        if not isinstance(body, dict):
            raise GatewayError(f"Unexpected response from {path}: expected a JSON object, got {type(body).__name__}")
        return body

    @staticmethod
    def _dataset(body: Any) -> list[dict[str, Any]]:
        """Unwrap list responses, which the gateway nests under 'dataset'."""
        if isinstance(body, dict):
            return body.get("dataset") or []
        if isinstance(body, list):
            return body
        return []

    def healthcheck(self) -> Any:
        """Probe gateway liveness.

        Returns the reported status (truthy) when the gateway answers, False on
        any error. Never raises.
        """
        try:
            body = self._request("GET", "/healthcheck", auth=False)
        except GatewayError:
            return False

        if isinstance(body, dict):
            return body.get("status", False)
        return False

    def get_env(self) -> dict[str, Any]:
        """Fetch the gateway's own environment configuration."""
        return self._object(self._request("GET", "/gateway/env"), "/gateway/env")

    def list_containers(self) -> list[dict[str, Any]]:
        return self._dataset(self._request("GET", "/containers"))

    def create_container(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._object(self._request("POST", "/containers", payload), "/containers")

    def delete_container(self, container_id: str) -> Any:
        return self._request("DELETE", f"/containers/{container_id}")

    def list_tenants(self) -> list[dict[str, Any]]:
        return self._dataset(self._request("GET", "/tenant"))

    def list_tenant_containers(self, tenant_id: str) -> list[dict[str, Any]]:
        return self._dataset(self._request("GET", f"/tenant/{tenant_id}/containers"))

    def create_tenant(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/tenant", payload) or {}

    def delete_tenant(self, tenant_id: str) -> Any:
        return self._request("DELETE", f"/tenant/{tenant_id}")

    def set_tenant_active(self, tenant_id: str, active: bool) -> Any:
        return self._request("PUT", f"/tenant/{tenant_id}", {"active": active})

    def set_tenant_container_active(self, tenant_id: str, binding_id: str, active: bool) -> Any:
        return self._request("PUT", f"/tenant/{tenant_id}/containers/{binding_id}", {"active": active})

    def attach_container_to_tenant(self, tenant_id: str, container_id: str) -> Any:
        """Bind a container to a tenant, active but not yet installed."""
        payload = {"container": container_id, "active": True, "installed": False}
        return self._request("PUT", f"/tenant/{tenant_id}/containers", payload)
