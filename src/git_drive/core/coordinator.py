"""Drive coordination: resolve aliases, update the session, produce git data.

The coordinator is the only component that changes the session. It turns
alias strings from the command line into identities, records the new session
in the store, and hands back a :class:`DriveOutput` for the git layer.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from ..errors import NoDriver
from ..models import Identity, Kind, Trailer
from ..utils.trailers import render_trailers
from .normalize import canonicalize
from .registry import Registry
from .session import Session
from .store import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DriveOutput:
    """Everything the git layer needs for the next commits."""

    driver: Optional[Identity]
    navigators: tuple[Identity, ...] = ()

    @property
    def author_name(self) -> Optional[str]:
        return self.driver.name if self.driver else None

    @property
    def author_email(self) -> Optional[str]:
        return self.driver.email if self.driver else None

    @property
    def signing_key(self) -> Optional[str]:
        return self.driver.signing_key if self.driver else None

    @property
    def trailers(self) -> list[Trailer]:
        return [navigator.to_trailer() for navigator in self.navigators]

    @property
    def rendered_trailers(self) -> str:
        """Co-authored-by block for the commit message."""
        return render_trailers(self.trailers)

    @property
    def is_alone(self) -> bool:
        return not self.navigators


class DriveCoordinator:
    """Applies drive transitions to the store's session.

    Every transition re-resolves the aliases it keeps from the current
    session, so an alias that has vanished from the registry is reported as
    ``NotFound`` instead of being silently dropped. Registry deletes are the
    exception: they remove the alias from the session right away.
    """

    def __init__(self, store: Store) -> None:
        self.store = store
        self.registry.on_delete(self._forget_deleted)

    @property
    def registry(self) -> Registry:
        return self.store.registry

    @property
    def session(self) -> Session:
        return self.store.session

    def resolve_drive(
        self,
        driver_alias: Optional[str] = None,
        navigator_aliases: Iterable[str] = (),
        require_driver: bool = False,
    ) -> DriveOutput:
        """Start driving with the given navigators.

        Args:
            driver_alias: New driver; keeps the current driver when omitted
            navigator_aliases: Navigators to drive with, in order
            require_driver: Fail with ``NoDriver`` if no driver ends up set

        Raises:
            NotFound: Naming the first alias that does not resolve
            AmbiguousAlias: If an abbreviated alias matches several identities
            NoDriver: If ``require_driver`` is set and there is no driver

        Nothing is changed when an error is raised.
        """
        if driver_alias is not None:
            driver: Optional[Identity] = self.registry.match(Kind.DRIVER, driver_alias)
        else:
            driver = self._current_driver()
        if driver is None and require_driver:
            raise NoDriver()

        navigators = self._resolve_navigators(navigator_aliases)

        self.store.session = self.session.drive_with(
            driver.alias if driver else None,
            tuple(navigator.alias for navigator in navigators),
        )
        logger.info(
            f"Driving as {driver.alias if driver else '(git default)'} with "
            f"{', '.join(n.alias for n in navigators) or 'nobody'}"
        )
        return DriveOutput(driver=driver, navigators=tuple(navigators))

    def alone(self) -> DriveOutput:
        """Stop navigating: clear the navigators, keep the driver."""
        driver = self._current_driver()
        self.store.session = self.session.alone()
        logger.info("Driving alone")
        return DriveOutput(driver=driver)

    def drive_as(self, alias: str) -> DriveOutput:
        """Switch the driver, keeping the current navigators.

        Raises:
            NotFound: If ``alias`` is not a known driver; the session is left
                unchanged
        """
        driver = self.registry.match(Kind.DRIVER, alias)
        navigators = self._current_navigators()
        self.store.session = self.session.drive_as(driver.alias)
        logger.info(f"Switched driver to {driver.alias}")
        return DriveOutput(driver=driver, navigators=tuple(navigators))

    def show(self) -> DriveOutput:
        """Resolve the current session without changing it."""
        return DriveOutput(
            driver=self._current_driver(),
            navigators=tuple(self._current_navigators()),
        )

    def current_driver(self) -> Identity:
        """The active driver.

        Raises:
            NoDriver: If no driver is set
        """
        driver = self._current_driver()
        if driver is None:
            raise NoDriver()
        return driver

    def delete(self, kind: Kind, alias: str) -> Identity:
        """Delete an identity; the session forgets it if it was active."""
        return self.registry.delete(kind, alias)

    def _current_driver(self) -> Optional[Identity]:
        if self.session.driver is None:
            return None
        return self.registry.find(Kind.DRIVER, self.session.driver)

    def _current_navigators(self) -> list[Identity]:
        return [self.registry.find(Kind.NAVIGATOR, alias) for alias in self.session.navigators]

    def _resolve_navigators(self, aliases: Iterable[str]) -> list[Identity]:
        navigators: list[Identity] = []
        seen: set[str] = set()
        for alias in aliases:
            navigator = self.registry.match(Kind.NAVIGATOR, alias)
            key = canonicalize(navigator.alias)
            if key in seen:
                logger.debug(f"Ignoring repeated navigator '{alias}'")
                continue
            seen.add(key)
            navigators.append(navigator)
        return navigators

    def _forget_deleted(self, kind: Kind, identity: Identity) -> None:
        session = self.session.forget(kind, identity.alias)
        if session is not self.session:
            logger.info(f"Removed deleted {kind} '{identity.alias}' from the active session")
            self.store.session = session
