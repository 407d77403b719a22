# ABOUTME: Scaffolding engine that copies subtrees out of the template repository
# ABOUTME: Clones into a unique temp dir, renders .env placeholders, always cleans up

"""Template scaffolding for applications, gateways and containers."""

import secrets
import shutil
import subprocess
import tempfile
from pathlib import Path

from rich.console import Console

from wampark_cli.errors import ScaffoldError

ENV_TEMPLATE_NAME = ".env"
ENV_OUTPUT_NAME = ".env.development"
TEMP_DIR_PREFIX = ".dktmp-"

# Tokens understood by the templates' .env files
WAMP_URL = "WAMP_URL_PLACEHOLDER"
WAMP_REALM = "WAMP_REALM_PLACEHOLDER"
WAMP_AUTHID = "WAMP_AUTHID_PLACEHOLDER"
WAMP_AUTHPASS = "WAMP_AUTHPASS_PLACEHOLDER"
HTTP_PORT = "HTTP_PORT_PLACEHOLDER"
HTTP_HOST = "HTTP_HOST_PLACEHOLDER"
DB_URI = "DB_URI_PLACEHOLDER"
SECRET_KEY = "SECRET_KEY_PLACEHOLDER"
GATEWAY_URL = "GATEWAY_URL_PLACEHOLDER"
GATEWAY_SECRET_KEY = "GATEWAY_SECRET_KEY_PLACEHOLDER"
CONTAINER_ID = "CONTAINER_ID_PLACEHOLDER"


def generate_secret_key() -> str:
    """Generate a gateway shared secret: 32 random bytes as hex."""
    return secrets.token_hex(32)


def replace_placeholders(text: str, placeholders: dict[str, object]) -> str:
    """Replace every occurrence of each placeholder token with its value.

    Plain substring replacement, no templating or escaping. Tokens that are
    not in the mapping, or whose value is None, are left untouched.
    """
    for token, value in placeholders.items():
        if value is None:
            continue
        text = text.replace(token, str(value))
    return text


class TemplateCheckout:
    """A temporary clone of the template repository.

    Use as a context manager; the clone directory is removed on exit whether
    or not the body succeeded. Each checkout gets its own randomly named
    directory so concurrent scaffolds in one working directory don't collide.
    """

    def __init__(self, repo_url: str, workdir: Path | None = None, debug: bool = False):
        self.repo_url = repo_url
        self.workdir = Path(workdir) if workdir else Path.cwd()
        self.debug = debug
        self.path: Path | None = None
        self._debug_console = Console(stderr=True)

    def _debug_print(self, message: str) -> None:
        if self.debug:
            self._debug_console.print(f"[dim]Debug: {message}[/dim]", highlight=False)

    def __enter__(self) -> "TemplateCheckout":
        self.path = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX, dir=self.workdir))
        try:
            self._clone()
        except BaseException:
            self.cleanup()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def _clone(self) -> None:
        self._debug_print(f"Cloning {self.repo_url} into {self.path}")
        cmd = ["git", "clone", "--depth", "1", self.repo_url, str(self.path)]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise ScaffoldError("git is not installed or not on PATH") from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise ScaffoldError(f"Could not clone template repository {self.repo_url}: {stderr}")

    def cleanup(self) -> None:
        """Remove the clone directory if it still exists."""
        if self.path and self.path.exists():
            self._debug_print(f"Removing {self.path}")
            shutil.rmtree(self.path, ignore_errors=True)

    def subtree(self, subpath: str) -> Path:
        """Return the path of a named subtree inside the clone."""
        if self.path is None:
            raise ScaffoldError("Template checkout is not open")

        source = self.path / subpath
        if not source.is_dir():
            raise ScaffoldError(f"Template '{subpath}' not found in {self.repo_url}")
        return source

    def copy(self, subpath: str, dest: Path) -> Path:
        """Copy a subtree into dest, merging with any existing contents."""
        source = self.subtree(subpath)
        dest = Path(dest)

        self._debug_print(f"Copying {subpath} to {dest}")
        try:
            shutil.copytree(source, dest, dirs_exist_ok=True)
        except OSError as e:
            raise ScaffoldError(f"Could not copy template '{subpath}' to {dest}: {e}") from e
        return dest

    def render_env(self, subpath: str, dest: Path, placeholders: dict[str, object]) -> Path | None:
        """Render the subtree's .env template into dest/.env.development.

        Returns the written path, or None when the template has no .env file.
        """
        env_template = self.subtree(subpath) / ENV_TEMPLATE_NAME
        if not env_template.exists():
            self._debug_print(f"No {ENV_TEMPLATE_NAME} in template '{subpath}'")
            return None

        output = Path(dest) / ENV_OUTPUT_NAME
        try:
            content = env_template.read_text(encoding="utf-8")
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(replace_placeholders(content, placeholders), encoding="utf-8")
        except OSError as e:
            raise ScaffoldError(f"Could not write {output}: {e}") from e

        self._debug_print(f"Wrote {output}")
        return output


def scaffold(
    subpath: str,
    dest: Path,
    placeholders: dict[str, object],
    repo_url: str,
    workdir: Path | None = None,
    debug: bool = False,
) -> Path | None:
    """Copy one template subtree to dest and render its .env file.

    Returns the path of the rendered .env.development, if any.
    """
    with TemplateCheckout(repo_url, workdir=workdir, debug=debug) as checkout:
        checkout.copy(subpath, dest)
        return checkout.render_env(subpath, dest, placeholders)
