# ABOUTME: Configuration management for the wampark CLI
# ABOUTME: Handles settings, the gateway connection store and on-disk locations

"""Configuration management for wampark-cli."""

import json
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from wampark_cli.errors import ConnectionNotFoundError

DEFAULT_TEMPLATE_REPO = "https://github.com/rafael-freitas/wampark-sdk-templates"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


@dataclass
class Connection:
    """A named route to a gateway: host, port and shared secret key."""

    host: str
    port: int
    secret_key: str

    @property
    def label(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def matches(self, host: str, port: int | str) -> bool:
        """Return True if this connection points at host and port."""
        try:
            return self.host == host and self.port == int(port)
        except (TypeError, ValueError):
            return False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted JSON shape."""
        return {"host": self.host, "port": self.port, "secretKey": self.secret_key}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Connection":
        """Create a connection from its persisted JSON shape.

        Older files stored the port as the string typed on the command line,
        so it is coerced to int here.
        """
        secret_key = data.get("secretKey", data.get("secret_key", ""))
        return cls(host=str(data["host"]), port=int(data["port"]), secret_key=secret_key or "")


class DeleteResult(str, Enum):
    """Outcome of removing a connection from the store."""

    DELETED = "deleted"
    NOT_FOUND = "not_found"
    EMPTY = "empty"


class ConnectionStore:
    """Ordered list of gateway connections persisted as a JSON array.

    The file is read and rewritten whole on every operation with no locking:
    two processes mutating the same store concurrently can lose an update
    (last writer wins).
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> list[Connection]:
        """Load all connections. A missing file yields an empty list."""
        if not self.path.exists():
            return []

        with open(self.path) as f:
            data = json.load(f)

        return [Connection.from_dict(item) for item in data]

    def save(self, connections: list[Connection]) -> None:
        """Overwrite the store atomically with the given connections."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w") as f:
                json.dump([conn.to_dict() for conn in connections], f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def add(self, connection: Connection) -> None:
        """Append a connection. Duplicate host/port pairs are allowed."""
        connections = self.load()
        connections.append(connection)
        self.save(connections)

    def find(self, host: str, port: int | str) -> Connection | None:
        """Return the first connection matching host and port."""
        for conn in self.load():
            if conn.matches(host, port):
                return conn
        return None

    def get(self, host: str, port: int | str) -> Connection:
        """Like find(), but raise ConnectionNotFoundError when nothing matches."""
        connection = self.find(host, port)
        if connection is None:
            raise ConnectionNotFoundError(host, port)
        return connection

    def delete(self, host: str, port: int | str) -> DeleteResult:
        """Remove the first connection matching host and port.

        Nothing is written unless a connection was actually removed.
        """
        connections = self.load()
        if not connections:
            return DeleteResult.EMPTY

        for index, conn in enumerate(connections):
            if conn.matches(host, port):
                del connections[index]
                self.save(connections)
                return DeleteResult.DELETED

        return DeleteResult.NOT_FOUND


class Config:
    """Configuration manager for wampark-cli."""

    CONFIG_DIR = Path(os.getenv("WAMPARK_HOME") or Path.home() / ".wampark")
    SETTINGS_FILE_NAME = "config.json"
    CONNECTIONS_FILE_NAME = "connections.json"
    HISTORY_FILE_NAME = "history.txt"

    def __init__(
        self,
        template_repo: str = DEFAULT_TEMPLATE_REPO,
        request_timeout: float | None = None,
        debug: bool = False,
        config_dir: Path | None = None,
    ):
        """Initialize configuration."""
        self.template_repo = template_repo
        self.request_timeout = request_timeout
        self.debug = debug
        self.config_dir = Path(config_dir) if config_dir else self.CONFIG_DIR

    @property
    def settings_file(self) -> Path:
        return self.config_dir / self.SETTINGS_FILE_NAME

    @property
    def connections_file(self) -> Path:
        return self.config_dir / self.CONNECTIONS_FILE_NAME

    @property
    def history_file(self) -> Path:
        return self.config_dir / self.HISTORY_FILE_NAME

    @classmethod
    def load(cls, config_dir: Path | None = None) -> "Config":
        """Load settings from file, then apply environment overrides."""
        config = cls(config_dir=config_dir)

        if config.settings_file.exists():
            try:
                with open(config.settings_file) as f:
                    data = json.load(f)

                config.template_repo = data.get("template_repo") or DEFAULT_TEMPLATE_REPO
                config.request_timeout = data.get("request_timeout")
                config.debug = bool(data.get("debug", False))

            except Exception as e:
                print(f"Warning: Could not load config: {e}")

        if os.getenv("WAMPARK_TEMPLATE_REPO"):
            config.template_repo = os.environ["WAMPARK_TEMPLATE_REPO"]
        if _env_flag("WAMPARK_DEBUG"):
            config.debug = True

        return config

    def save(self) -> None:
        """Save settings to file."""
        data = {
            "template_repo": self.template_repo,
            "request_timeout": self.request_timeout,
            "debug": self.debug,
        }

        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.settings_file, "w") as f:
            json.dump(data, f, indent=2)

    def connection_store(self) -> ConnectionStore:
        """Return the store backing the configured connections file."""
        return ConnectionStore(self.connections_file)
