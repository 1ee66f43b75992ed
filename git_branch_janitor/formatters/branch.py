"""Branch name and divergence formatting utilities."""

from rich.markup import escape

from git_branch_janitor.constants import SYMBOL_DEGRADED
from git_branch_janitor.models.branch import BranchDetails


def format_branch_name(branch: BranchDetails, max_width: int = 30, is_current: bool = False) -> str:
    """
    Format a branch name for a table cell.

    Names longer than max_width are cut and end in "...". Degraded branches
    get a warning marker.

    Args:
        branch: Branch details
        max_width: Maximum visible width of the name
        is_current: Whether this is the current branch

    Returns:
        Formatted branch name
    """
    name = branch.name
    if len(name) > max_width:
        name = name[: max_width - 3] + "..."
    if is_current:
        name += " *"
    if branch.is_degraded:
        name += f" {SYMBOL_DEGRADED}"
    return escape(name)


def format_behind_ahead(behind: int, ahead: int) -> str:
    """Behind/ahead counts with rich color markup."""
    if behind > 20:
        behind_color = "red"
    elif behind > 10:
        behind_color = "yellow"
    else:
        behind_color = "green"

    ahead_text = f"[cyan]{ahead}[/cyan]" if ahead > 0 else str(ahead)
    return f"[{behind_color}]{behind}[/{behind_color}]/{ahead_text}"


def format_line_changes(additions: int, deletions: int) -> str:
    """Added/deleted line totals, e.g. '+120/-4'."""
    return f"[green]+{additions}[/green]/[red]-{deletions}[/red]"
