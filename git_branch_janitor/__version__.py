"""Version information for git-branch-janitor."""

__version__ = "0.4.0"
