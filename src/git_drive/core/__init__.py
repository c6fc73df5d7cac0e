"""Core identity registry, session and drive coordination for git-drive."""
