"""Service for choosing which branches to delete"""

from typing import Iterable, Optional, Union, TYPE_CHECKING

from git_branch_janitor.constants import PROTECTED_BRANCHES
from git_branch_janitor.logging_config import get_logger
from git_branch_janitor.models.branch import BranchDetails, MergeStatus
from git_branch_janitor.models.plan import DeletionPlan, SkippedBranch

if TYPE_CHECKING:
    from git_branch_janitor.config import Config

logger = get_logger(__name__)


class DeletionPlanner:
    """Filters classified branches into a DeletionPlan."""

    def __init__(self, config: Union["Config", dict]):
        """Initialize the planner."""
        self.config = config
        self.main_branch = config.get("main_branch", "main")
        self.protected_branches = frozenset(config.get("protected_branches", PROTECTED_BRANCHES))
        self.requested_branches = tuple(config.get("branches", ()))
        self.min_age_days = config.get("min_age_days", None)
        self.include_ancestors = config.get("include_ancestors", False)
        self.include_diverged = config.get("include_diverged", False)
        self.include_unmerged = config.get("include_unmerged", False)

    def is_protected(self, branch_name: str) -> bool:
        """Check if a branch is protected (exact, case-sensitive)."""
        return branch_name in self.protected_branches

    def is_status_included(self, status: MergeStatus) -> bool:
        """Whether the inclusion flags allow deleting a branch with this status."""
        if status == MergeStatus.MERGED:
            return True
        if status == MergeStatus.ANCESTOR:
            return self.include_ancestors
        if status in (MergeStatus.DIVERGED, MergeStatus.REBASED, MergeStatus.PARTIAL):
            return self.include_diverged
        if status in (MergeStatus.UNMERGED, MergeStatus.EMPTY):
            return self.include_unmerged

        logger.warning(f"Unexpected merge status {status!r}, not planning deletion")
        return False

    def skip_reason(self, branch: BranchDetails, current_branch: Optional[str]) -> Optional[str]:
        """Why a branch stays out of the plan, or None if it qualifies."""
        if branch.name == self.main_branch:
            return "main branch"
        if current_branch is not None and branch.name == current_branch:
            return "current branch"

        explicitly_requested = branch.name in self.requested_branches
        if self.requested_branches and not explicitly_requested:
            return "not requested"
        if self.is_protected(branch.name) and not explicitly_requested:
            return "protected branch (name it with --branch to delete it)"

        if self.min_age_days is not None and branch.age_days < self.min_age_days:
            return f"only {branch.age_days} days old (required: {self.min_age_days}+ days)"

        if branch.is_degraded:
            return "status unknown: " + "; ".join(branch.query_errors)

        if not self.is_status_included(branch.status):
            return _EXCLUSION_HINTS[branch.status]

        return None

    def build_plan(
        self, branches: Iterable[BranchDetails], current_branch: Optional[str]
    ) -> DeletionPlan:
        """Build a DeletionPlan, keeping the input order."""
        branches = list(branches)
        planned = []
        skipped = []

        for branch in branches:
            reason = self.skip_reason(branch, current_branch)
            if reason is None:
                logger.info(f"Branch {branch.name} is {branch.status.value} - planned for deletion")
                planned.append(branch)
            else:
                logger.info(f"Skipping {branch.name}: {reason}")
                skipped.append(SkippedBranch(branch.name, reason))

        known = {branch.name for branch in branches}
        for name in self.requested_branches:
            if name in known:
                continue
            logger.warning(f"Requested branch '{name}' does not exist")
            skipped.append(SkippedBranch(name, "no such branch"))

        return DeletionPlan(
            main_branch=self.main_branch,
            current_branch=current_branch or "",
            branches=tuple(planned),
            skipped=tuple(skipped),
        )


_EXCLUSION_HINTS = {
    MergeStatus.MERGED: "merged",
    MergeStatus.ANCESTOR: "only an ancestor, potential false positive (use --include-ancestors)",
    MergeStatus.DIVERGED: "diverged (use --include-diverged)",
    MergeStatus.REBASED: "rebased (use --include-diverged)",
    MergeStatus.PARTIAL: "partially rebased (use --include-diverged)",
    MergeStatus.EMPTY: "empty, no net changes (use --include-unmerged)",
    MergeStatus.UNMERGED: "not merged (use --include-unmerged)",
}
