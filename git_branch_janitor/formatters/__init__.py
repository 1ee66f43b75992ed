"""Formatting utilities for git-branch-janitor.

This package provides formatting functions for displaying branch information,
organized into logical modules:
- date: Commit date and age formatting
- branch: Branch name, divergence and line change formatting
- status: Merge status, commit list and summary formatting
"""

# Date formatters
from .date import format_age, format_last_commit

# Branch formatters
from .branch import (
    format_branch_name,
    format_behind_ahead,
    format_line_changes,
)

# Status formatters
from .status import (
    format_status,
    format_status_description,
    format_commit_list,
    format_status_summary,
)

__all__ = [
    # Date
    "format_age",
    "format_last_commit",
    # Branch
    "format_branch_name",
    "format_behind_ahead",
    "format_line_changes",
    # Status
    "format_status",
    "format_status_description",
    "format_commit_list",
    "format_status_summary",
]
