"""The active drive: who is driving and who is navigating.

A session stores aliases only. Identities are looked up in the registry every
time they are needed, so edits and deletes show up immediately.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from ..models import Kind
from .normalize import same_alias


class SessionState(str, Enum):
    IDLE = "idle"
    DRIVING = "driving"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of the active drive.

    Transitions return a new snapshot; the caller decides whether to persist it.
    """

    driver: Optional[str] = None
    navigators: tuple[str, ...] = ()
    started_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def state(self) -> SessionState:
        if self.driver is None and not self.navigators:
            return SessionState.IDLE
        return SessionState.DRIVING

    @property
    def is_idle(self) -> bool:
        return self.state is SessionState.IDLE

    def drive_with(
        self, driver: Optional[str], navigators: tuple[str, ...], now: Optional[datetime] = None
    ) -> "Session":
        """Replace driver and navigators."""
        return Session(driver=driver, navigators=tuple(navigators), started_at=now or _now())

    def alone(self, now: Optional[datetime] = None) -> "Session":
        """Drop all navigators, keep the driver."""
        if self.driver is None:
            return Session()
        return Session(driver=self.driver, started_at=now or _now())

    def drive_as(self, driver: str, now: Optional[datetime] = None) -> "Session":
        """Switch the driver, keep the navigators."""
        return Session(driver=driver, navigators=self.navigators, started_at=now or _now())

    def forget(self, kind: Kind, alias: str) -> "Session":
        """Remove a deleted alias from the session.

        Returns the same object when the alias is not active.
        """
        if kind is Kind.DRIVER:
            if self.driver is None or not same_alias(self.driver, alias):
                return self
            return Session(navigators=self.navigators, started_at=self.started_at)

        remaining = tuple(nav for nav in self.navigators if not same_alias(nav, alias))
        if remaining == self.navigators:
            return self
        return Session(driver=self.driver, navigators=remaining, started_at=self.started_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "driver": self.driver,
            "navigators": list(self.navigators),
            "started_at": self.started_at.isoformat() if self.started_at else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Session":
        """Build a session from its persisted form.

        Raises:
            ValueError: If the structure or timestamp is malformed
        """
        if not isinstance(data, dict):
            raise ValueError("expected a mapping with 'driver' and 'navigators'")

        driver = data.get("driver")
        if driver is not None and not isinstance(driver, str):
            raise ValueError("'driver' must be an alias or null")

        navigators = data.get("navigators") or []
        if not isinstance(navigators, list) or not all(isinstance(n, str) for n in navigators):
            raise ValueError("'navigators' must be a list of aliases")

        started_at = data.get("started_at")
        if isinstance(started_at, str):
            started_at = datetime.fromisoformat(started_at)
        elif started_at is not None and not isinstance(started_at, datetime):
            raise ValueError("'started_at' must be an ISO-8601 timestamp")

        return cls(driver=driver, navigators=tuple(navigators), started_at=started_at)
