"""Configuration management for git-drive."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import click
from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "git-drive"
TEMPLATE_NAME = "git-drive_commit_template"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
LOG_LEVELS = ("none", "INFO", "DEBUG")


@dataclass
class DriveConfig:
    """Runtime configuration.

    ``home`` is the directory holding the registry and the session.
    """

    home: Path
    template_name: str = TEMPLATE_NAME
    log_level: str = "none"
    sign_commits: bool = True

    def __post_init__(self) -> None:
        self.home = Path(self.home).expanduser()


class ConfigLoader:
    """Build a :class:`DriveConfig` from the environment."""

    @classmethod
    def load(cls, home: Optional[Union[str, Path]] = None) -> DriveConfig:
        """Load configuration.

        A ``.env`` file in the working directory is read first, then one in the
        store directory. An explicit ``home`` wins over ``GIT_DRIVE_HOME``.

        Args:
            home: Store directory override (the ``--home`` CLI option)

        Returns:
            The resolved configuration
        """
        load_dotenv()

        home_dir = Path(home or os.environ.get("GIT_DRIVE_HOME") or click.get_app_dir(APP_NAME))
        env_file = home_dir.expanduser() / ".env"
        if env_file.exists():
            load_dotenv(env_file, override=False)
            logger.debug(f"Loaded environment variables from {env_file}")

        return DriveConfig(
            home=home_dir,
            template_name=os.environ.get("GIT_DRIVE_TEMPLATE", TEMPLATE_NAME),
            log_level=cls._parse_log_level("GIT_DRIVE_LOG"),
            sign_commits=cls._parse_bool("GIT_DRIVE_SIGN", default=True),
        )

    @staticmethod
    def _parse_bool(env_var: str, default: bool) -> bool:
        value = os.environ.get(env_var)
        if value is None or not value.strip():
            return default
        value = value.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ConfigError(env_var, value, "a boolean")

    @staticmethod
    def _parse_log_level(env_var: str) -> str:
        value = os.environ.get(env_var, "").strip()
        if not value:
            return "none"
        for level in LOG_LEVELS:
            if value.lower() == level.lower():
                return level
        raise ConfigError(env_var, value, f"one of {', '.join(LOG_LEVELS)}")
