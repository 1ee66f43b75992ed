"""Merge status and commit list formatting utilities."""

from typing import Dict, List, Sequence

from rich.markup import escape

from git_branch_janitor.constants import STATUS_COLORS, STATUS_DESCRIPTIONS
from git_branch_janitor.models.branch import CommitInfo, MergeStatus


def format_status(status: MergeStatus) -> str:
    """
    Format merge status with its color.

    Args:
        status: Merge status enum value

    Returns:
        Rich markup for the status
    """
    color = STATUS_COLORS.get(status.value, "white")
    return f"[{color}]{status.value}[/{color}]"


def format_status_description(status: MergeStatus) -> str:
    """One-line explanation of a status, colored like the status itself."""
    color = STATUS_COLORS.get(status.value, "white")
    return f"[bold {color}]{STATUS_DESCRIPTIONS[status.value]}[/bold {color}]"


def format_commit_list(commits: Sequence[CommitInfo], limit: int) -> List[str]:
    """
    Format commits for display, capped at `limit` lines.

    When commits are left out a final "... and K more commits" line is
    added, so the operator always sees the real total.

    Args:
        commits: Commits to show, newest first
        limit: Maximum number of commits to list

    Returns:
        Lines of rich markup
    """
    lines = [
        f"  [yellow]{commit.sha}[/yellow] {escape(commit.summary)} [dim]({escape(commit.author)}, {commit.date})[/dim]"
        for commit in commits[:limit]
    ]
    hidden = len(commits) - limit
    if hidden > 0:
        lines.append(f"  [yellow]... and {hidden} more commits[/yellow]")
    return lines


_SUMMARY_LABELS = {
    MergeStatus.MERGED: "✓ Actually Merged",
    MergeStatus.ANCESTOR: "⚠ Ancestor Only",
    MergeStatus.DIVERGED: "↗ Diverged",
    MergeStatus.REBASED: "↻ Rebased",
    MergeStatus.PARTIAL: "◐ Partially Rebased",
    MergeStatus.EMPTY: "∅ Empty",
    MergeStatus.UNMERGED: "✗ Unmerged",
}

_SUMMARY_NOTES = {
    MergeStatus.ANCESTOR: " (potential false positives)",
    MergeStatus.REBASED: " (commits already in main)",
    MergeStatus.PARTIAL: " (some commits would be lost)",
    MergeStatus.UNMERGED: " (will lose commits!)",
}


def format_status_summary(counts: Dict[MergeStatus, int]) -> List[str]:
    """Per-status counts for the non-zero statuses, in MergeStatus order."""
    lines = []
    for status in MergeStatus:
        count = counts.get(status, 0)
        if count == 0:
            continue
        color = STATUS_COLORS[status.value]
        lines.append(
            f"  [{color}]{_SUMMARY_LABELS[status]}:[/{color}] {count} branches"
            f"{_SUMMARY_NOTES.get(status, '')}"
        )
    return lines
