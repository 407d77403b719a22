# ABOUTME: Tests for the create command
# ABOUTME: Fakes git clone and questionary to check the scaffolded application tree

"""Tests for CreateCommand."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from cleo.testers.command_tester import CommandTester

from wampark_cli import scaffold
from wampark_cli.cli.commands.create import CreateCommand, gateway_placeholders

TEMPLATE_TREE = {
    "application/package.json": '{"name": "app"}\n',
    "gateway/index.js": "start()\n",
    "gateway/.env": (
        "HTTP_PORT=HTTP_PORT_PLACEHOLDER\n"
        "HTTP_HOST=HTTP_HOST_PLACEHOLDER\n"
        "DB_URI=DB_URI_PLACEHOLDER\n"
        "WAMP_URL=WAMP_URL_PLACEHOLDER\n"
        "WAMP_REALM=WAMP_REALM_PLACEHOLDER\n"
        "WAMP_AUTHID=WAMP_AUTHID_PLACEHOLDER\n"
        "WAMP_AUTHPASS=WAMP_AUTHPASS_PLACEHOLDER\n"
        "SECRET_KEY=SECRET_KEY_PLACEHOLDER\n"
    ),
    "container/index.js": "container()\n",
}

ANSWERS = {
    "http_port": "5001",
    "http_host": "localhost",
    "db_name": "shop_gateway",
    "db_uri": "mongodb://localhost:27017",
    "wamp_url": "ws://localhost:9001/ws",
    "wamp_realm": "realm1",
    "wamp_authid": "gateway",
    "wamp_authpass": "secret",
}


def fake_clone(cmd, **kwargs):
    target = Path(cmd[-1])
    for relative, content in TEMPLATE_TREE.items():
        path = target / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


@pytest.fixture
def tester():
    return CommandTester(CreateCommand())


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def mock_questionary():
    with patch("wampark_cli.cli.commands.create.questionary") as mock_q:
        mock_q.text.return_value.ask.side_effect = [
            ANSWERS["http_port"],
            ANSWERS["http_host"],
            ANSWERS["db_name"],
            ANSWERS["db_uri"],
            ANSWERS["wamp_url"],
            ANSWERS["wamp_realm"],
            ANSWERS["wamp_authid"],
        ]
        mock_q.password.return_value.ask.return_value = ANSWERS["wamp_authpass"]
        yield mock_q


class TestGatewayPlaceholders:
    """Tests for the gateway .env values."""

    def test_db_uri_joins_name(self):
        values = gateway_placeholders(ANSWERS, "k" * 64)

        assert values[scaffold.DB_URI] == "mongodb://localhost:27017/shop_gateway"
        assert values[scaffold.SECRET_KEY] == "k" * 64
        assert values[scaffold.HTTP_PORT] == "5001"


class TestCreateCommand:
    """Tests for create <appName>."""

    def test_scaffolds_application_and_gateway(self, tester, workdir, mock_questionary):
        with patch("wampark_cli.scaffold.subprocess.run", side_effect=fake_clone):
            assert tester.execute("shop") == 0

        app_dir = workdir / "shop"
        assert (app_dir / "package.json").exists()
        assert (app_dir / "gateway" / "index.js").exists()
        assert not (app_dir / "container").exists()

        env = (app_dir / "gateway" / ".env.development").read_text()
        assert "HTTP_PORT=5001\n" in env
        assert "DB_URI=mongodb://localhost:27017/shop_gateway\n" in env
        assert "WAMP_AUTHPASS=secret\n" in env
        assert "PLACEHOLDER" not in env

        secret = env.split("SECRET_KEY=")[1].strip()
        assert len(secret) == 64

    def test_database_name_defaults_to_app_name(self, tester, workdir, mock_questionary):
        with patch("wampark_cli.scaffold.subprocess.run", side_effect=fake_clone):
            tester.execute("shop")

        defaults = {call.args[0]: call.kwargs.get("default") for call in mock_questionary.text.call_args_list}
        assert defaults["Gateway database name:"] == "shop_gateway"
        assert defaults["Gateway port:"] == "5001"

    def test_temp_checkout_removed(self, tester, workdir, mock_questionary):
        with patch("wampark_cli.scaffold.subprocess.run", side_effect=fake_clone):
            tester.execute("shop")

        assert [p for p in workdir.iterdir() if p.name.startswith(scaffold.TEMP_DIR_PREFIX)] == []

    def test_clone_failure_reports_and_cleans_up(self, tester, workdir, mock_questionary, capsys):
        def failing(cmd, **kwargs):
            return subprocess.CompletedProcess(cmd, 128, stdout="", stderr="fatal: could not read")

        with patch("wampark_cli.scaffold.subprocess.run", side_effect=failing):
            assert tester.execute("shop") == 1

        assert "could not read" in capsys.readouterr().out
        assert list(workdir.iterdir()) == []

    def test_cancelled_prompt_creates_nothing(self, tester, workdir):
        """Test that cancelling exits cleanly with code 0 and creates nothing."""
        with patch("wampark_cli.cli.commands.create.questionary") as mock_q:
            mock_q.text.return_value.ask.side_effect = ["5001", None]

            with patch("wampark_cli.scaffold.subprocess.run") as mock_run:
                assert tester.execute("shop") == 0

        mock_run.assert_not_called()
        assert list(workdir.iterdir()) == []

    def test_invalid_app_name(self, tester, workdir, capsys):
        assert tester.execute("..") == 1

        assert "Invalid application name" in capsys.readouterr().out
