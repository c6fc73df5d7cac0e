"""Apply a drive to a git repository.

Writes the commit template with the navigators' trailers and points
``commit.template`` at it, and sets the driver as the repository's user.
Only repository-level configuration is touched.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from .config import TEMPLATE_NAME
from .core.coordinator import DriveOutput
from .errors import GitIntegrationError

logger = logging.getLogger(__name__)


class GitIntegration:
    """Repository configuration for the active drive."""

    def __init__(
        self, repo_path: Union[str, Path] = ".", template_name: str = TEMPLATE_NAME
    ) -> None:
        try:
            self.repo = Repo(repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise GitIntegrationError(f"Not a git repository: {repo_path}") from e
        self.template_name = template_name

    @property
    def git_dir(self) -> Path:
        return Path(self.repo.git_dir)

    @property
    def template_path(self) -> Path:
        return self.git_dir / self.template_name

    def apply(self, output: DriveOutput, sign_commits: bool = True) -> Optional[Path]:
        """Configure the repository for the given drive.

        Args:
            output: Driver and navigators to commit as
            sign_commits: Enable ``commit.gpgsign`` when the driver has a key

        Returns:
            Path of the commit template, or None when driving alone
        """
        template = None
        try:
            if output.navigators:
                template = self._write_template(output.rendered_trailers)
            else:
                self._remove_template()

            with self.repo.config_writer(config_level="repository") as writer:
                if template is not None:
                    writer.set_value("commit", "template", str(template))
                else:
                    self._remove_option(writer, "commit", "template")

                if output.driver is not None:
                    writer.set_value("user", "name", output.driver.name)
                    writer.set_value("user", "email", output.driver.email)
                    if output.driver.signing_key:
                        writer.set_value("user", "signingkey", output.driver.signing_key)
                        if sign_commits:
                            writer.set_value("commit", "gpgsign", "true")
                    else:
                        self._remove_option(writer, "user", "signingkey")
                        self._remove_option(writer, "commit", "gpgsign")
        except (GitCommandError, OSError) as e:
            raise GitIntegrationError(f"Could not update git configuration: {e}") from e

        logger.info(f"Applied drive to {self.repo.working_tree_dir or self.git_dir}")
        return template

    def clear(self) -> None:
        """Stop adding co-authors: unset ``commit.template`` and remove the file."""
        try:
            with self.repo.config_writer(config_level="repository") as writer:
                self._remove_option(writer, "commit", "template")
            self._remove_template()
        except (GitCommandError, OSError) as e:
            raise GitIntegrationError(f"Could not update git configuration: {e}") from e

    def _write_template(self, trailers: str) -> Path:
        # Two empty lines leave room for the subject and body above the trailers.
        self.template_path.write_text("\n\n" + trailers, encoding="utf-8")
        logger.debug(f"Wrote commit template {self.template_path}")
        return self.template_path

    def _remove_template(self) -> None:
        self.template_path.unlink(missing_ok=True)

    @staticmethod
    def _remove_option(writer, section: str, option: str) -> None:
        if writer.has_section(section) and writer.has_option(section, option):
            writer.remove_option(section, option)


def environment(output: DriveOutput) -> dict[str, str]:
    """Author and committer environment variables for the driver.

    Returns an empty mapping when there is no driver.
    """
    if output.driver is None:
        return {}
    return {
        "GIT_AUTHOR_NAME": output.driver.name,
        "GIT_AUTHOR_EMAIL": output.driver.email,
        "GIT_COMMITTER_NAME": output.driver.name,
        "GIT_COMMITTER_EMAIL": output.driver.email,
    }
