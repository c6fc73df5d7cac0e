"""Error types raised by git-drive.

Every error carries enough context (alias, namespace, file, field) for the CLI
to report it without further lookups, plus an optional suggestion line.
"""

from pathlib import Path
from typing import Optional, Sequence


class GitDriveError(Exception):
    """Base class for all recoverable git-drive errors."""

    suggestion: Optional[str] = None

    def __init__(self, message: str, suggestion: Optional[str] = None) -> None:
        super().__init__(message)
        if suggestion is not None:
            self.suggestion = suggestion


class NotFound(GitDriveError):
    """No identity with the given alias exists in the namespace."""

    def __init__(self, alias: str, kind: "object") -> None:
        self.alias = alias
        self.kind = kind
        super().__init__(
            f"No {kind} found for `{alias}`",
            suggestion=f"Run 'git-drive {_list_command(kind)}' to see the known aliases.",
        )


class Duplicate(GitDriveError):
    """An identity with an equivalent alias already exists in the namespace."""

    def __init__(self, alias: str, kind: "object", existing: Optional[str] = None) -> None:
        self.alias = alias
        self.kind = kind
        self.existing = existing or alias
        message = f"Alias `{alias}` already exists as a {kind}"
        if self.existing != alias:
            message += f" (as `{self.existing}`)"
        super().__init__(message, suggestion="Choose a different alias or edit the existing one.")


class AmbiguousAlias(GitDriveError):
    """A partial alias matches more than one identity."""

    def __init__(self, alias: str, kind: "object", candidates: Sequence[str]) -> None:
        self.alias = alias
        self.kind = kind
        self.candidates = list(candidates)
        super().__init__(
            f"The query `{alias}` is ambiguous, possible {kind}s: [{', '.join(self.candidates)}]",
            suggestion="Type more of the alias to pick exactly one.",
        )


class NoDriver(GitDriveError):
    """The operation needs an active driver but none is set."""

    def __init__(self) -> None:
        super().__init__(
            "No driver is set",
            suggestion="Pick a driver with 'git-drive as ALIAS' or 'git-drive with --as ALIAS'.",
        )


class MalformedStore(GitDriveError):
    """Persisted data could not be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(
            f"Could not read {self.path}: {reason}",
            suggestion=(
                f"Inspect {self.path} and fix it by hand, or delete it to start over."
            ),
        )


class InvalidIdentity(GitDriveError):
    """An identity field failed validation."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class ConfigError(GitDriveError):
    """An environment setting has a value git-drive cannot use."""

    def __init__(self, variable: str, value: str, expected: str) -> None:
        self.variable = variable
        self.value = value
        super().__init__(
            f"Environment variable {variable} must be {expected}, got {value!r}",
            suggestion=f"Fix or unset {variable} (it may come from a .env file).",
        )


class GitIntegrationError(GitDriveError):
    """Applying the drive to the git repository failed."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            suggestion="Run git-drive from inside a git working tree.",
        )


def _list_command(kind: object) -> str:
    return "me list" if str(kind) == "driver" else "list"
