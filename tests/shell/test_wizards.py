# ABOUTME: Unit tests for the tenant and container wizards
# ABOUTME: Mocks questionary and the gateway client to check payloads and flows

"""Tests for GatewayWizards."""

from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from wampark_cli import scaffold
from wampark_cli.config import Connection
from wampark_cli.errors import GatewayError
from wampark_cli.gateway import GatewayClient
from wampark_cli.shell.wizards import (
    GatewayWizards,
    WizardCancelled,
    container_placeholders,
    db_uri_base,
    next_free_port,
    normalize_path,
)

TENANTS = [
    {
        "_id": "t1",
        "name": "Acme",
        "domain": "acme.com",
        "containers": [{"_id": "b1", "container": "Billing", "active": True, "installed": False}],
    },
    {"_id": "t2", "name": "Globex", "domain": "globex.com"},
]

CONTAINERS = [
    {"_id": "c1", "name": "Billing", "port": 50011, "active": True},
    {"_id": "c2", "name": "Reports", "port": 50012, "active": False},
]

GATEWAY_ENV = {
    "HTTP_PORT": "5001",
    "DB_URI": "mongodb://db.local:27017/app_gateway",
    "WAMP_URL": "ws://localhost:9001/ws",
    "WAMP_REALM": "realm1",
    "WAMP_AUTHID": "gateway",
    "WAMP_AUTHPASS": "pass",
}


def answer(mock_questionary, text=(), confirm=(), select=()):
    """Queue answers for each questionary prompt type."""
    mock_questionary.text.return_value.ask.side_effect = list(text)
    mock_questionary.confirm.return_value.ask.side_effect = list(confirm)
    mock_questionary.select.return_value.ask.side_effect = list(select)


@pytest.fixture
def connection():
    return Connection(host="gw.local", port=5001, secret_key="s3cret")


@pytest.fixture
def client(connection):
    client = MagicMock(spec=GatewayClient)
    client.connection = connection
    client.list_tenants.return_value = [dict(t) for t in TENANTS]
    client.list_containers.return_value = [dict(c) for c in CONTAINERS]
    client.get_env.return_value = dict(GATEWAY_ENV)
    client.create_container.return_value = {"_id": "new-id"}
    return client


@pytest.fixture
def wizards(client, tmp_path):
    console = Console(record=True, width=200)
    return GatewayWizards(client, console=console, template_repo="repo", workdir=tmp_path)


@pytest.fixture
def mock_questionary():
    with patch("wampark_cli.shell.wizards.questionary") as mock_q:
        yield mock_q


class TestHelpers:
    """Tests for the pure helper functions."""

    def test_port_allocation_skips_used_ports(self):
        """Test the first free candidate after the used ports is chosen."""
        assert next_free_port(501, {5011, 5012}) == 5013

    def test_port_allocation_from_gateway_port(self):
        assert next_free_port(5001, {50011, 50012}) == 50013
        assert next_free_port("5001", set()) == 50011

    def test_port_allocation_ignores_gaps_after_first_free(self):
        assert next_free_port(5001, {50012, 50013}) == 50011

    @pytest.mark.parametrize("http_port", ["abc", None, ""])
    def test_port_allocation_rejects_non_numeric_gateway_port(self, http_port):
        with pytest.raises(GatewayError, match="invalid HTTP_PORT"):
            next_free_port(http_port, set())

    def test_port_allocation_stays_in_tcp_range(self):
        assert next_free_port(6553, set()) == 65531
        with pytest.raises(GatewayError, match="above 65535"):
            next_free_port(6554, set())
        with pytest.raises(GatewayError, match="above 65535"):
            next_free_port(6553, set(range(65531, 65536)))

    @pytest.mark.parametrize(
        "path, expected",
        [("myContainer", "/myContainer"), ("/already", "/already"), ("", None), (None, None)],
    )
    def test_normalize_path(self, path, expected):
        assert normalize_path(path) == expected

    def test_db_uri_base_drops_database_name(self):
        assert db_uri_base("mongodb://db.local:27017/app_gateway") == "mongodb://db.local:27017"
        assert db_uri_base(None) == ""

    def test_container_placeholders(self, connection):
        values = container_placeholders(GATEWAY_ENV, connection, "cid", 50013, "gw.local", "mongodb://db")

        assert values[scaffold.GATEWAY_URL] == "http://gw.local:5001"
        assert values[scaffold.GATEWAY_SECRET_KEY] == "s3cret"
        assert values[scaffold.CONTAINER_ID] == "cid"
        assert values[scaffold.HTTP_PORT] == 50013
        assert values[scaffold.WAMP_REALM] == "realm1"


class TestListing:
    """Tests for the read-only commands."""

    def test_list_containers(self, wizards):
        wizards.list_containers()

        output = wizards.console.export_text()
        assert "Billing" in output
        assert "50012" in output

    def test_list_tenants(self, wizards):
        wizards.list_tenants()

        output = wizards.console.export_text()
        assert "acme.com" in output
        assert "Globex" in output

    def test_list_tenant_containers_reports_errors(self, wizards, client):
        client.list_tenant_containers.side_effect = GatewayError("boom", status_code=500)

        wizards.list_tenant_containers("t1")

        assert "Error listing tenant containers" in wizards.console.export_text()

    def test_prompt_tenant_then_list(self, wizards, client, mock_questionary):
        answer(mock_questionary, select=["t2"])
        client.list_tenant_containers.return_value = [{"_id": "b9", "active": True, "installed": True}]

        wizards.prompt_tenant_and_list_containers()

        client.list_tenant_containers.assert_called_once_with("t2")
        assert "b9" in wizards.console.export_text()


class TestAddContainer:
    """Tests for the add container wizard."""

    def test_creates_container_and_scaffolds(self, wizards, client, mock_questionary, tmp_path):
        answer(
            mock_questionary,
            text=["Orders", "Order service", "gw.local", "orders", "static", "mongodb://db.local:27017", "orders"],
            confirm=[True, False],
        )

        with patch("wampark_cli.scaffold.scaffold") as mock_scaffold:
            wizards.add_container()

        payload = client.create_container.call_args.args[0]
        assert payload == {
            "name": "Orders",
            "description": "Order service",
            "path": "/orders",
            "staticPath": "/static",
            "port": 50013,
            "host": "gw.local",
            "proxyEnabled": False,
            "tenancyEnabled": True,
            "dbUri": "mongodb://db.local:27017",
        }

        subpath, dest, placeholders = mock_scaffold.call_args.args
        assert subpath == "container"
        assert dest == tmp_path / "orders"
        assert dest.is_dir()
        assert placeholders[scaffold.CONTAINER_ID] == "new-id"
        assert placeholders[scaffold.HTTP_PORT] == 50013
        assert mock_scaffold.call_args.kwargs["repo_url"] == "repo"

    def test_empty_static_path_is_sent_as_none(self, wizards, client, mock_questionary):
        answer(
            mock_questionary,
            text=["Orders", "d", "gw.local", "/orders", "", "mongodb://db", "orders"],
            confirm=[True, True],
        )

        with patch("wampark_cli.scaffold.scaffold"):
            wizards.add_container()

        assert client.create_container.call_args.args[0]["staticPath"] is None
        assert client.create_container.call_args.args[0]["path"] == "/orders"

    def test_prompt_defaults_come_from_context(self, wizards, mock_questionary):
        answer(mock_questionary, text=["Orders", "d", "gw.local", "p", "", None], confirm=[True, True])

        with pytest.raises(WizardCancelled):
            wizards.add_container()

        defaults = {call.args[0]: call.kwargs.get("default") for call in mock_questionary.text.call_args_list}
        assert defaults["Container name:"] == "My Container"
        assert defaults["Container host:"] == "gw.local"
        assert defaults["Container database URL:"] == "mongodb://db.local:27017"

    def test_cancel_does_not_create(self, wizards, client, mock_questionary):
        answer(mock_questionary, text=["Orders", "d", None])

        with pytest.raises(WizardCancelled):
            wizards.add_container()

        client.create_container.assert_not_called()

    def test_invalid_gateway_port_stops_before_creating(self, wizards, client, mock_questionary, tmp_path):
        client.get_env.return_value = dict(GATEWAY_ENV, HTTP_PORT="not-a-port")
        answer(mock_questionary, text=["Orders", "d", "h", "p", "", "db", "orders"], confirm=[True, True])

        with pytest.raises(GatewayError, match="invalid HTTP_PORT"):
            wizards.add_container()

        client.create_container.assert_not_called()
        assert not (tmp_path / "orders").exists()

    def test_gateway_error_propagates_before_scaffold(self, wizards, client, mock_questionary):
        answer(mock_questionary, text=["Orders", "d", "h", "p", "", "db", "p"], confirm=[True, True])
        client.create_container.side_effect = GatewayError("rejected", status_code=400)

        with patch("wampark_cli.scaffold.scaffold") as mock_scaffold:
            with pytest.raises(GatewayError):
                wizards.add_container()

        mock_scaffold.assert_not_called()


class TestDeleteWizards:
    """Tests for the delete wizards."""

    def test_delete_container_confirmed(self, wizards, client, mock_questionary):
        answer(mock_questionary, select=["c2"], confirm=[True])

        wizards.delete_container()

        client.delete_container.assert_called_once_with("c2")

    def test_delete_container_declined_is_noop(self, wizards, client, mock_questionary):
        answer(mock_questionary, select=["c2"], confirm=[False])

        wizards.delete_container()

        client.delete_container.assert_not_called()

    def test_delete_container_with_no_containers(self, wizards, client, mock_questionary):
        client.list_containers.return_value = []

        wizards.delete_container()

        mock_questionary.select.assert_not_called()
        assert "No containers found" in wizards.console.export_text()

    def test_delete_tenant_confirmed(self, wizards, client, mock_questionary):
        answer(mock_questionary, select=["t1"], confirm=[True])

        wizards.delete_tenant()

        client.delete_tenant.assert_called_once_with("t1")

    def test_delete_tenant_declined_is_noop(self, wizards, client, mock_questionary):
        answer(mock_questionary, select=["t1"], confirm=[False])

        wizards.delete_tenant()

        client.delete_tenant.assert_not_called()


class TestTenantWizards:
    """Tests for tenant creation, toggling and attaching."""

    def test_add_tenant(self, wizards, client, mock_questionary):
        answer(mock_questionary, text=["Initech", "initech.com", "initech_db"])

        wizards.add_tenant()

        client.create_tenant.assert_called_once_with(
            {"name": "Initech", "domain": "initech.com", "databaseName": "initech_db"}
        )

    @pytest.mark.parametrize("enable", [True, False])
    def test_toggle_tenant(self, wizards, client, mock_questionary, enable):
        answer(mock_questionary, select=["t2"])

        wizards.toggle_tenant(enable)

        client.set_tenant_active.assert_called_once_with("t2", enable)

    def test_toggle_tenant_container(self, wizards, client, mock_questionary):
        answer(mock_questionary, select=["t1", "b1"])

        wizards.toggle_tenant_container(False)

        client.set_tenant_container_active.assert_called_once_with("t1", "b1", False)

    def test_toggle_tenant_container_without_bindings(self, wizards, client, mock_questionary):
        answer(mock_questionary, select=["t2"])

        wizards.toggle_tenant_container(True)

        client.set_tenant_container_active.assert_not_called()
        assert "No containers available" in wizards.console.export_text()

    def test_add_tenant_container_offers_only_unattached(self, wizards, client, mock_questionary):
        answer(mock_questionary, select=["t1", "c2"])

        wizards.add_tenant_container()

        offered = [call.kwargs["value"] for call in mock_questionary.Choice.call_args_list[-1:]]
        assert offered == ["c2"]
        client.attach_container_to_tenant.assert_called_once_with("t1", "c2")
        assert "[Reports]" in wizards.console.export_text()

    def test_add_tenant_container_when_all_attached(self, wizards, client, mock_questionary):
        client.list_containers.return_value = [CONTAINERS[0]]
        answer(mock_questionary, select=["t1"])

        wizards.add_tenant_container()

        client.attach_container_to_tenant.assert_not_called()
        assert "No containers available to add" in wizards.console.export_text()

    def test_no_tenants(self, wizards, client, mock_questionary):
        client.list_tenants.return_value = []

        wizards.toggle_tenant(True)

        mock_questionary.select.assert_not_called()
        assert "No tenants found" in wizards.console.export_text()

    def test_selection_uses_fresh_remote_list(self, wizards, client, mock_questionary):
        """Test that each wizard run fetches the tenant list again."""
        answer(mock_questionary, select=["t1", "t2"])

        wizards.toggle_tenant(True)
        wizards.toggle_tenant(True)

        assert client.list_tenants.call_count == 2
