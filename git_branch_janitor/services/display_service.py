"""Display service for branch tables, warnings and run summaries"""
from typing import Iterable, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from git_branch_janitor.constants import COLUMNS, STATUS_COLORS
from git_branch_janitor.formatters import (
    format_behind_ahead,
    format_branch_name,
    format_commit_list,
    format_last_commit,
    format_line_changes,
    format_status,
    format_status_description,
    format_status_summary,
)
from git_branch_janitor.logging_config import get_logger
from git_branch_janitor.models.branch import BranchDetails, CommitInfo, MergeStatus
from git_branch_janitor.models.plan import DeletionPlan, SkippedBranch
from git_branch_janitor.services.deletion_service import DeletionOutcome, DeletionResult

default_console = Console()
logger = get_logger(__name__)


class DisplayService:
    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or default_console
        self.verbose = verbose

    def build_branch_table(
        self, branches: Sequence[BranchDetails], current_branch: Optional[str] = None
    ) -> Table:
        """Build the branch table without printing it."""
        table = Table()
        for col in COLUMNS:
            table.add_column(col.label, min_width=col.width or None)

        for branch in branches:
            is_current = current_branch is not None and branch.name == current_branch
            row_style = "dim" if branch.is_degraded else None
            table.add_row(
                format_branch_name(branch, is_current=is_current),
                branch.last_commit_relative,
                format_status(branch.status),
                format_behind_ahead(branch.behind, branch.ahead),
                format_line_changes(branch.additions, branch.deletions),
                style=row_style,
            )
        return table

    def display_branch_table(
        self, branches: Sequence[BranchDetails], current_branch: Optional[str] = None
    ) -> None:
        """Display a table of branch information."""
        logger.debug(f"Displaying {len(branches)} branches")
        self.console.print(self.build_branch_table(branches, current_branch))
        if any(branch.is_degraded for branch in branches):
            self.console.print("[yellow]⚠ Status could not be fully determined for marked branches[/yellow]")

    def display_status_summary(self, plan: DeletionPlan) -> None:
        """Show how many planned branches fall under each status."""
        self.console.print("\n[bold]Branch Status Summary:[/bold]")
        for line in format_status_summary(plan.count_by_status()):
            self.console.print(line)

    def display_skipped(self, skipped: Iterable[SkippedBranch]) -> None:
        """List skipped branches with their reasons (verbose only)."""
        if not self.verbose:
            return
        skipped = list(skipped)
        if not skipped:
            return
        self.console.print("\n[dim]Skipped branches:[/dim]")
        for entry in skipped:
            self.console.print(f"[dim]  • {entry.name}: {entry.reason}[/dim]")

    def display_branch_info(self, branch: BranchDetails, recent_commits: Sequence[CommitInfo] = ()) -> None:
        """Detailed view of one branch, shown in verbose mode."""
        color = STATUS_COLORS[branch.status.value]
        self.console.print(f"\n[bold cyan]Branch:[/bold cyan] {branch.name}")
        self.console.print(f"  Status: {format_status_description(branch.status)}")
        self.console.print(
            f"  Last commit: {format_last_commit(branch.last_commit_relative, branch.age_days)}"
        )
        self.console.print(f"  Behind/Ahead: {format_behind_ahead(branch.behind, branch.ahead)}")
        self.console.print(f"  Changes: {format_line_changes(branch.additions, branch.deletions)}")

        if branch.equivalent_commits is not None:
            self.console.print(
                f"  Commits: [{color}]{branch.equivalent_commits} already in main[/{color}], "
                f"{branch.unique_commits} unique"
            )

        if branch.status == MergeStatus.ANCESTOR:
            self.console.print(
                "  [yellow]⚠ WARNING: This branch is in main's history but was never merged. "
                "It may be abandoned work.[/yellow]"
            )

        for error in branch.query_errors:
            self.console.print(f"  [yellow]⚠ {error}[/yellow]")

        if recent_commits:
            self.console.print("  Recent commits:")
            for line in format_commit_list(recent_commits, len(recent_commits)):
                self.console.print(line)

    def display_plan(self, plan: DeletionPlan, dry_run: bool) -> None:
        """Summarize what the run is about to do."""
        if not plan:
            self.console.print("\n[green]No branches to delete![/green]")
            return

        verb = "would be deleted" if dry_run else "will be deleted"
        self.console.print(f"\n[bold]{len(plan)} branches {verb}:[/bold]")
        for branch in plan:
            self.console.print(f"  • {branch.name} ({format_status(branch.status)})")
        self.display_status_summary(plan)

    def display_bulk_prompt(self, plan: DeletionPlan, phrase: str) -> None:
        """Explain the bulk confirmation phrase."""
        self.console.print(
            f"\n[bold red]You are about to delete {len(plan)} branches.[/bold red]"
        )
        self.console.print(f"To continue, type exactly: [bold]{phrase}[/bold]")
        self.console.print("[dim](abort/cancel/no/n to abort, quit/exit/q to quit)[/dim]")

    def display_protected_warning(self, branch: BranchDetails) -> None:
        """Banner shown before the exact-name prompt for a protected branch."""
        self.console.print(
            f"\n[bold red]⚠ PROTECTED BRANCH: {branch.name}[/bold red]\n"
            f"[red]'{branch.name}' is a protected branch name. Deleting it may break "
            f"deployments or shared workflows.[/red]"
        )
        self.console.print(f"Type the branch name [bold]{branch.name}[/bold] to delete it")

    def display_unmerged_warning(
        self, branch: BranchDetails, commits: Sequence[CommitInfo], limit: int
    ) -> None:
        """Banner plus the commits that would be lost for an unmerged branch."""
        self.console.print(
            f"\n[bold red]⚠ DATA LOSS WARNING: {branch.name} is UNMERGED[/bold red]\n"
            f"[red]Deleting it will lose {len(commits)} commits not found in main:[/red]"
        )
        for line in format_commit_list(commits, limit):
            self.console.print(line)
        self.console.print(f"Type the branch name [bold]{branch.name}[/bold] to delete it")

    def display_response_hint(self, expected: str) -> None:
        """Shown when a response matched neither the expected text nor a token."""
        self.console.print(f"[yellow]Please type exactly: {expected}[/yellow]")

    def display_protected_list(self, protected: Iterable[str]) -> None:
        """Print the protected branch names, one per line."""
        self.console.print("[bold]Protected branches:[/bold]")
        for name in sorted(protected):
            self.console.print(f"  • {name}")

    def display_result(self, result: DeletionResult) -> None:
        """One line per deletion attempt."""
        if result.outcome == DeletionOutcome.PREVIEWED:
            self.console.print(f"Would delete branch {result.branch}")
        elif result.outcome == DeletionOutcome.DELETED:
            self.console.print(f"[green]✓ Deleted branch {result.branch}[/green]")
        elif result.outcome == DeletionOutcome.FORCE_DELETED:
            self.console.print(f"[yellow]✓ Force deleted branch {result.branch}[/yellow]")
        elif result.outcome == DeletionOutcome.MISSING:
            self.console.print(f"[yellow]Skipping {result.branch} - branch no longer exists[/yellow]")
        else:
            self.console.print(f"[red]✗ Failed to delete {result.branch}: {result.error}[/red]")

    def display_summary(self, results: List[DeletionResult], skipped_by_operator: int = 0) -> None:
        """Final counts for the run."""
        if not results and not skipped_by_operator:
            return

        previewed = [r for r in results if r.outcome == DeletionOutcome.PREVIEWED]
        if previewed:
            self.console.print(
                f"\n[bold]Preview complete:[/bold] {len(previewed)} branches would be deleted. "
                "Run with --execute to delete them."
            )
            return

        deleted = [r for r in results if r.deleted]
        failed = [r for r in results if r.outcome == DeletionOutcome.FAILED]
        self.console.print(f"\n[green]Deleted {len(deleted)} branches[/green]")
        if skipped_by_operator:
            self.console.print(f"[yellow]Skipped {skipped_by_operator} branches at confirmation[/yellow]")
        if failed:
            self.console.print(f"\n[red]Failed to delete {len(failed)} branches:[/red]")
            for result in failed:
                self.console.print(f"[red]  • {result.branch}: {result.error}[/red]")
