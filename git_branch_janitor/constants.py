"""Shared constants for git-branch-janitor."""

from dataclasses import dataclass
from typing import FrozenSet, List


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    label: str
    width: int = 0  # minimum width, 0 means auto-width


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("Branch", 30),
    ColumnDefinition("Last Commit", 20),
    ColumnDefinition("Merged Status", 12),
    ColumnDefinition("Behind/Ahead", 12),
    ColumnDefinition("Additions/Deletions", 20),
]


# Branches that always require typing their exact name before deletion,
# even in force mode
PROTECTED_BRANCHES: FrozenSet[str] = frozenset(
    {
        "main",
        "master",
        "develop",
        "development",
        "dev",
        "staging",
        "stage",
        "test",
        "testing",
        "qa",
        "uat",
        "production",
        "prod",
        "release",
        "hotfix",
        "beta",
        "alpha",
        "stable",
        "live",
        "demo",
        "preview",
        "gh-pages",
        "pages",
        "docs",
        "documentation",
    }
)


# Prompt responses (exact, case-sensitive)
ABORT_TOKENS: FrozenSet[str] = frozenset({"abort", "cancel", "no", "n"})
QUIT_TOKENS: FrozenSet[str] = frozenset({"quit", "exit", "q"})

BULK_CONFIRMATION_TEMPLATE = "I understand I am deleting {count} branches"

# Commits listed before an unmerged branch is deleted
DEFAULT_COMMIT_DISPLAY_LIMIT = 10
# Commits listed in the per-branch detail panel
RECENT_COMMITS_LIMIT = 3

SECONDS_PER_DAY = 86400

SYMBOL_DEGRADED = "⚠"


# CLI colors (Rich color names) keyed by MergeStatus value
STATUS_COLORS = {
    "MERGED": "green",
    "ANCESTOR": "yellow",
    "DIVERGED": "cyan",
    "REBASED": "dark_orange",
    "PARTIAL": "yellow",
    "EMPTY": "blue",
    "UNMERGED": "red",
}


STATUS_DESCRIPTIONS = {
    "MERGED": "Actually merged - safe to delete",
    "ANCESTOR": "Ancestor only - NOT actually merged, just older",
    "DIVERGED": "Diverged - merged but has additional commits",
    "REBASED": "Rebased - every commit has an equivalent in main",
    "PARTIAL": "Partially rebased - some commits landed, some did not",
    "EMPTY": "Empty - commits exist but change nothing",
    "UNMERGED": "Unmerged - contains commits not in main branch",
}
