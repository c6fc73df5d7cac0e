"""Identity registry for drivers and navigators.

The registry holds two independent namespaces. Each namespace is an ordered
mapping keyed by the canonical form of the alias, so "Éric" and "eric" are the
same entry, while listing keeps the order in which identities were added.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import replace
from typing import Any, Callable, Optional

from ..errors import AmbiguousAlias, Duplicate, NotFound
from ..models import Identity, Kind
from ..utils.validation import validate_identity
from .normalize import canonicalize

logger = logging.getLogger(__name__)

DeleteListener = Callable[[Kind, Identity], None]


class Namespace:
    """Ordered, alias-keyed store of identities of one kind."""

    def __init__(self, kind: Kind, identities: Iterable[Identity] = ()) -> None:
        self.kind = kind
        self._entries: dict[str, Identity] = {}
        for identity in identities:
            self._insert(validate_identity(identity, kind))

    def _insert(self, identity: Identity) -> None:
        key = identity.canonical_alias
        if key in self._entries:
            raise Duplicate(identity.alias, self.kind, self._entries[key].alias)
        self._entries[key] = identity

    def list(self) -> list[Identity]:
        """All identities in insertion order."""
        return list(self._entries.values())

    def get(self, alias: str) -> Optional[Identity]:
        return self._entries.get(canonicalize(alias))

    def find(self, alias: str) -> Identity:
        """Look up an identity by alias, ignoring case and accents.

        Raises:
            NotFound: If no alias has the same canonical form
        """
        identity = self.get(alias)
        if identity is None:
            raise NotFound(alias, self.kind)
        return identity

    def match(self, query: str) -> Identity:
        """Resolve a possibly abbreviated alias.

        An exact canonical match wins. Otherwise the query must be the
        canonical prefix of exactly one alias.

        Raises:
            NotFound: If nothing matches
            AmbiguousAlias: If the query is a prefix of several aliases
        """
        identity = self.get(query)
        if identity is not None:
            return identity

        prefix = canonicalize(query)
        candidates = [
            entry for key, entry in self._entries.items() if prefix and key.startswith(prefix)
        ]
        if len(candidates) == 1:
            logger.debug(f"Resolved {self.kind} '{query}' to '{candidates[0].alias}' by prefix")
            return candidates[0]
        if candidates:
            raise AmbiguousAlias(query, self.kind, [c.alias for c in candidates])
        raise NotFound(query, self.kind)

    def add(self, identity: Identity) -> Identity:
        """Validate and append a new identity.

        Raises:
            InvalidIdentity: If a field is malformed
            Duplicate: If the alias is already taken in this namespace
        """
        identity = validate_identity(identity, self.kind)
        self._insert(identity)
        return identity

    def edit(self, alias: str, mutator: Callable[[Identity], Identity]) -> Identity:
        """Replace an identity with an edited copy that keeps its alias.

        Args:
            alias: Alias of the identity to edit
            mutator: Receives the current identity and returns the edited one

        Returns:
            The stored replacement
        """
        current = self.find(alias)
        edited = replace(mutator(current), alias=current.alias)
        edited = validate_identity(edited, self.kind)
        self._entries[current.canonical_alias] = edited
        return edited

    def delete(self, alias: str) -> Identity:
        """Remove an identity and return it.

        Raises:
            NotFound: If the alias is unknown
        """
        identity = self.find(alias)
        del self._entries[identity.canonical_alias]
        return identity

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and canonicalize(alias) in self._entries

    def __iter__(self) -> Iterator[Identity]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._entries)


class Registry:
    """Drivers and navigators known to git-drive.

    Mutations mark the registry as modified so the store only writes it back
    when something changed. Deletions are announced to listeners, which is how
    the active session drops aliases that no longer exist.
    """

    def __init__(
        self,
        drivers: Iterable[Identity] = (),
        navigators: Iterable[Identity] = (),
    ) -> None:
        self._namespaces = {
            Kind.DRIVER: Namespace(Kind.DRIVER, drivers),
            Kind.NAVIGATOR: Namespace(Kind.NAVIGATOR, navigators),
        }
        self._delete_listeners: list[DeleteListener] = []
        self.modified = False

    def namespace(self, kind: Kind) -> Namespace:
        return self._namespaces[Kind(kind)]

    @property
    def drivers(self) -> Namespace:
        return self._namespaces[Kind.DRIVER]

    @property
    def navigators(self) -> Namespace:
        return self._namespaces[Kind.NAVIGATOR]

    def on_delete(self, listener: DeleteListener) -> None:
        """Register a callback invoked after every successful delete."""
        self._delete_listeners.append(listener)

    def list(self, kind: Kind) -> list[Identity]:
        return self.namespace(kind).list()

    def find(self, kind: Kind, alias: str) -> Identity:
        return self.namespace(kind).find(alias)

    def match(self, kind: Kind, query: str) -> Identity:
        return self.namespace(kind).match(query)

    def add(self, kind: Kind, identity: Identity) -> Identity:
        added = self.namespace(kind).add(identity)
        self.modified = True
        logger.info(f"Added {kind} '{added.alias}'")
        return added

    def edit(self, kind: Kind, alias: str, mutator: Callable[[Identity], Identity]) -> Identity:
        namespace = self.namespace(kind)
        before = namespace.find(alias)
        after = namespace.edit(alias, mutator)
        if after != before:
            self.modified = True
            logger.info(f"Edited {kind} '{after.alias}'")
        return after

    def delete(self, kind: Kind, alias: str) -> Identity:
        removed = self.namespace(kind).delete(alias)
        self.modified = True
        logger.info(f"Deleted {kind} '{removed.alias}'")
        for listener in self._delete_listeners:
            listener(Kind(kind), removed)
        return removed

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        return {
            Kind.DRIVER.plural: [identity.to_dict() for identity in self.drivers],
            Kind.NAVIGATOR.plural: [identity.to_dict() for identity in self.navigators],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Registry":
        """Build a registry from its persisted form.

        Raises:
            ValueError: If the structure is not a mapping of identity lists
            KeyError: If an identity misses a required field
            GitDriveError: If the stored identities are invalid or clash
        """
        if not isinstance(data, dict):
            raise ValueError("expected a mapping with 'drivers' and 'navigators'")

        def entries(kind: Kind) -> list[Identity]:
            raw = data.get(kind.plural) or []
            if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
                raise ValueError(f"'{kind.plural}' must be a list of identities")
            return [Identity.from_dict(item) for item in raw]

        return cls(drivers=entries(Kind.DRIVER), navigators=entries(Kind.NAVIGATOR))
