"""Branch deletion service"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from git_branch_janitor.exceptions import GitOperationError
from git_branch_janitor.logging_config import get_logger
from git_branch_janitor.services.git.operations import GitOperations

logger = get_logger(__name__)


class DeletionOutcome(Enum):
    """What happened to a branch handed to the executor."""
    PREVIEWED = "previewed"
    DELETED = "deleted"
    FORCE_DELETED = "force-deleted"
    FAILED = "failed"
    MISSING = "missing"


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of one deletion attempt."""
    branch: str
    outcome: DeletionOutcome
    error: Optional[str] = None

    @property
    def deleted(self) -> bool:
        return self.outcome in (DeletionOutcome.DELETED, DeletionOutcome.FORCE_DELETED)


class DeletionExecutor:
    """Deletes one branch at a time: safe delete first, forced only if allowed."""

    def __init__(self, git_ops: GitOperations):
        self.git_ops = git_ops

    def delete(self, branch_name: str, dry_run: bool = True, force: bool = False) -> DeletionResult:
        """Delete a branch, or report what would happen in dry-run mode.

        Args:
            branch_name: Local branch to delete
            dry_run: If True, nothing is changed
            force: If True, fall back to `git branch -D` when git refuses a
                safe delete because the branch is not fully merged

        Returns:
            DeletionResult describing the outcome; failures are reported, not raised
        """
        if dry_run:
            logger.info(f"PREVIEW: Would delete branch: {branch_name}")
            return DeletionResult(branch_name, DeletionOutcome.PREVIEWED)

        # The plan may be stale by now
        if not self.git_ops.branch_exists(branch_name):
            logger.warning(f"Branch {branch_name} no longer exists, skipping")
            return DeletionResult(branch_name, DeletionOutcome.MISSING, "Branch no longer exists")

        try:
            self.git_ops.delete_branch(branch_name, force=False)
            logger.info(f"Deleted branch: {branch_name}")
            return DeletionResult(branch_name, DeletionOutcome.DELETED)
        except GitOperationError as e:
            logger.warning(f"Could not delete branch '{branch_name}' (may have unmerged commits)")
            safe_error = e.message or str(e)

        if not force:
            return DeletionResult(
                branch_name,
                DeletionOutcome.FAILED,
                f"{safe_error}. Use --force to force delete unmerged branches",
            )

        logger.warning(f"Force deleting branch: {branch_name}")
        try:
            self.git_ops.delete_branch(branch_name, force=True)
        except GitOperationError as e:
            logger.error(f"Force delete of {branch_name} failed: {e}")
            return DeletionResult(branch_name, DeletionOutcome.FAILED, e.message or str(e))

        logger.info(f"Force deleted branch: {branch_name}")
        return DeletionResult(branch_name, DeletionOutcome.FORCE_DELETED)
