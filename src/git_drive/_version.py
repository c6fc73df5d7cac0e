"""Version information for git-drive."""

__version__ = "0.6.1"
