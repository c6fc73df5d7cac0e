"""Data models for git-drive identities and trailers."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from .core.normalize import canonicalize


class Kind(str, Enum):
    """The two independent identity namespaces."""

    DRIVER = "driver"
    NAVIGATOR = "navigator"

    def __str__(self) -> str:
        return self.value

    @property
    def plural(self) -> str:
        """Key under which this namespace is persisted."""
        return f"{self.value}s"


@dataclass(frozen=True)
class Identity:
    """A named person record.

    Identities are immutable; edits produce a replacement with the same alias.
    Only drivers may carry a signing key.
    """

    alias: str
    name: str
    email: str
    signing_key: Optional[str] = None

    @property
    def canonical_alias(self) -> str:
        """Lookup key for case and accent insensitive alias matching."""
        return canonicalize(self.alias)

    def with_changes(self, **changes: Any) -> "Identity":
        """Return an edited copy; the alias is never changed."""
        changes.pop("alias", None)
        return replace(self, **changes)

    def to_trailer(self) -> "Trailer":
        return Trailer(name=self.name, email=self.email)

    def to_dict(self) -> dict[str, str]:
        data = {"alias": self.alias, "name": self.name, "email": self.email}
        if self.signing_key:
            data["signing_key"] = self.signing_key
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Identity":
        """Build an identity from its persisted form.

        Raises:
            KeyError: If alias, name or email is missing
            ValueError: If a field is not a string
        """
        values = {key: data[key] for key in ("alias", "name", "email")}
        signing_key = data.get("signing_key")
        if signing_key is not None:
            values["signing_key"] = signing_key
        for key, value in values.items():
            if not isinstance(value, str):
                raise ValueError(f"the {key} of an identity must be text, got {value!r}")
        return cls(**values)

    def __str__(self) -> str:
        return f"{self.alias}: {self.name} <{self.email}>"


@dataclass(frozen=True)
class Trailer:
    """A ``Co-authored-by`` trailer as found in a commit message.

    Trailers are free text and need not belong to a registered identity.
    """

    name: str
    email: str
