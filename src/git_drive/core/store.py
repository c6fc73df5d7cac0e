"""On-disk persistence of the registry and the active session.

The store directory holds two YAML files:

- ``config.yaml``: the ``drivers`` and ``navigators`` identity lists
- ``session.yaml``: the active driver and navigator aliases

Every command opens the store, applies one change and flushes it. Writes go
through a temp file in the same directory followed by a rename, so a crash or
a concurrent invocation never sees a half-written file. Concurrent edits are
last-writer-wins.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Union

import yaml

from ..errors import GitDriveError, MalformedStore
from .registry import Registry
from .session import Session

logger = logging.getLogger(__name__)

REGISTRY_FILE = "config.yaml"
SESSION_FILE = "session.yaml"


def atomic_write_yaml(data: Any, file_path: Path) -> None:
    """Write YAML data atomically using temp file + rename.

    Args:
        data: YAML-serializable data to write
        file_path: Target file path
    """
    dir_path = file_path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=f".{file_path.name}.", suffix=".tmp", dir=dir_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                data,
                f,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, file_path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def read_yaml(file_path: Path) -> Any:
    """Read a YAML file, returning ``None`` when it does not exist.

    Raises:
        MalformedStore: If the file is not valid YAML or cannot be read
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        return None
    except yaml.YAMLError as e:
        raise MalformedStore(file_path, f"invalid YAML ({e})") from e
    except UnicodeDecodeError as e:
        raise MalformedStore(file_path, "the file is not UTF-8 text") from e
    except OSError as e:
        raise MalformedStore(file_path, e.strerror or str(e)) from e


class Store:
    """Registry and session persisted in one directory.

    Use :meth:`open` for the usual load-modify-flush cycle.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory).expanduser()
        self.registry = Registry()
        self._session = Session()
        self._session_modified = False

    @property
    def registry_path(self) -> Path:
        return self.directory / REGISTRY_FILE

    @property
    def session_path(self) -> Path:
        return self.directory / SESSION_FILE

    @property
    def session(self) -> Session:
        return self._session

    @session.setter
    def session(self, session: Session) -> None:
        if session != self._session or session.started_at != self._session.started_at:
            self._session = session
            self._session_modified = True

    @property
    def modified(self) -> bool:
        return self.registry.modified or self._session_modified

    def load(self) -> "Store":
        """Read registry and session fresh from disk.

        Missing files mean an empty registry and an idle session.

        Raises:
            MalformedStore: If either file cannot be parsed
        """
        self.registry = self._load_registry()
        self._session = self._load_session()
        self._session_modified = False
        logger.debug(
            f"Loaded {len(self.registry.drivers)} driver(s) and "
            f"{len(self.registry.navigators)} navigator(s) from {self.directory}"
        )
        return self

    def _load_registry(self) -> Registry:
        data = read_yaml(self.registry_path)
        if data is None:
            return Registry()
        try:
            return Registry.from_dict(data)
        except KeyError as e:
            raise MalformedStore(self.registry_path, f"identity is missing the field {e}") from e
        except (ValueError, TypeError) as e:
            raise MalformedStore(self.registry_path, str(e)) from e
        except GitDriveError as e:
            raise MalformedStore(self.registry_path, str(e)) from e

    def _load_session(self) -> Session:
        data = read_yaml(self.session_path)
        if data is None:
            return Session()
        try:
            return Session.from_dict(data)
        except (ValueError, TypeError) as e:
            raise MalformedStore(self.session_path, str(e)) from e

    def flush(self) -> None:
        """Write back whatever changed since :meth:`load`."""
        if self.registry.modified:
            atomic_write_yaml(self.registry.to_dict(), self.registry_path)
            self.registry.modified = False
            logger.debug(f"Saved registry to {self.registry_path}")

        if self._session_modified:
            if self._session.is_idle:
                self.session_path.unlink(missing_ok=True)
                logger.debug(f"Removed idle session {self.session_path}")
            else:
                atomic_write_yaml(self._session.to_dict(), self.session_path)
                logger.debug(f"Saved session to {self.session_path}")
            self._session_modified = False

    @classmethod
    @contextmanager
    def open(cls, directory: Union[str, Path]) -> Iterator["Store"]:
        """Load the store, yield it, and flush it if the block succeeds.

        Nothing is written when the block raises.
        """
        store = cls(directory).load()
        yield store
        store.flush()
