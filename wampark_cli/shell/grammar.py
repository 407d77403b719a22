# ABOUTME: Command vocabulary of the gateway shell
# ABOUTME: Parses input lines into actions and drives tab completion from the same table

"""Gateway shell command grammar."""

from dataclasses import dataclass, field
from enum import Enum

from prompt_toolkit.completion import Completer, Completion


class ShellAction(str, Enum):
    """Commands recognised by the gateway shell."""

    LS_CONTAINERS = "ls containers"
    LS_TENANTS = "ls tenants"
    LS_TENANT_CONTAINERS = "ls tenant containers"
    ADD_CONTAINER = "add container"
    ADD_TENANT = "add tenant"
    ADD_TENANT_CONTAINER = "add tenant-container"
    DEL_CONTAINER = "del container"
    DEL_TENANT = "del tenant"
    ENABLE_TENANT = "enable tenant"
    DISABLE_TENANT = "disable tenant"
    ENABLE_TENANT_CONTAINER = "enable tenant-container"
    DISABLE_TENANT_CONTAINER = "disable tenant-container"
    HELP = "help"
    EXIT = "exit"

    @property
    def words(self) -> tuple[str, ...]:
        return tuple(self.value.split())


COMMANDS = [action.value for action in ShellAction]

# Number of trailing arguments each action accepts
MAX_ARGS = {ShellAction.LS_TENANT_CONTAINERS: 1}

# Longest word sequences first so "ls tenant containers" wins over shorter forms
_BY_LENGTH = sorted(ShellAction, key=lambda action: len(action.words), reverse=True)


@dataclass
class ParsedLine:
    """A tokenized shell line. action is None for unrecognised input."""

    command: str
    args: list[str] = field(default_factory=list)
    action: ShellAction | None = None

    @property
    def argument(self) -> str | None:
        """First argument after the matched command words, if any."""
        if self.action is None:
            return None
        extra = self.args[len(self.action.words) - 1 :]
        return extra[0] if extra else None


def parse_line(line: str) -> ParsedLine | None:
    """Split a line on whitespace and match it against the vocabulary.

    Returns None for a blank line.
    """
    tokens = line.split()
    if not tokens:
        return None

    parsed = ParsedLine(command=tokens[0], args=tokens[1:])
    for action in _BY_LENGTH:
        words = action.words
        if tuple(tokens[: len(words)]) != words:
            continue
        if len(tokens) - len(words) > MAX_ARGS.get(action, 0):
            continue
        parsed.action = action
        break

    return parsed


def complete(text: str) -> list[str]:
    """Return commands starting with text, or every command if none do."""
    hits = [command for command in COMMANDS if command.startswith(text)]
    return hits or list(COMMANDS)


class CommandCompleter(Completer):
    """prompt_toolkit completer over the shell vocabulary."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor.lstrip()
        for candidate in complete(text):
            yield Completion(candidate, start_position=-len(text))
