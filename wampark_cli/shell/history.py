# ABOUTME: Persistent line history for the gateway shell
# ABOUTME: prompt_toolkit History backed by a plain newline-delimited file

"""Shell input history."""

from collections.abc import Iterable
from pathlib import Path

from prompt_toolkit.history import History


class LineHistory(History):
    """History stored one submitted line per row in a text file.

    Every stored line rewrites the whole file; there is no locking between
    concurrent shells.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)

    def read_lines(self) -> list[str]:
        """Return stored lines, oldest first."""
        if not self.path.exists():
            return []
        return [line for line in self.path.read_text(encoding="utf-8").split("\n") if line.strip()]

    def load_history_strings(self) -> Iterable[str]:
        # prompt_toolkit expects the most recent entry first
        return list(reversed(self.read_lines()))

    def append_string(self, string: str) -> None:
        # In memory only; the shell persists every submitted line with store_string()
        self._loaded_strings.insert(0, string)

    def store_string(self, string: str) -> None:
        line = string.strip()
        if not line:
            return

        lines = self.read_lines()
        lines.append(line)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("\n".join(lines), encoding="utf-8")
