"""Merge status classification for git-branch-janitor."""

from dataclasses import dataclass
from typing import Optional, Tuple

from git_branch_janitor.exceptions import GitOperationError
from git_branch_janitor.logging_config import get_logger
from git_branch_janitor.models.branch import MergeStatus
from git_branch_janitor.services.git.divergence import Divergence, LineChanges
from git_branch_janitor.services.git.operations import GitOperations

logger = get_logger(__name__)


@dataclass(frozen=True)
class MergeSignals:
    """Everything the merge status decision looks at.

    `has_merge_evidence` only matters when the branch is an ancestor with
    nothing ahead; the cherry counts only matter when it is not an ancestor.
    Unused signals may be left as None.
    """

    ahead: int
    is_ancestor: bool
    has_merge_evidence: Optional[bool] = None
    equivalent_commits: Optional[int] = None
    unique_commits: Optional[int] = None
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class Classification:
    """Result of classifying one branch."""

    status: MergeStatus
    equivalent_commits: Optional[int] = None
    unique_commits: Optional[int] = None
    errors: Tuple[str, ...] = ()


def determine_merge_status(signals: MergeSignals) -> MergeStatus:
    """Map merge signals to exactly one MergeStatus (first match wins)."""
    if signals.is_ancestor:
        if signals.ahead == 0:
            if signals.has_merge_evidence:
                return MergeStatus.MERGED
            # Reachable from main, but never merged by a recorded merge
            return MergeStatus.ANCESTOR
        return MergeStatus.DIVERGED

    equivalent = signals.equivalent_commits or 0
    unique = signals.unique_commits or 0

    if unique == 0 and equivalent > 0:
        return MergeStatus.REBASED
    if unique == 0 and signals.ahead == 0:
        return MergeStatus.MERGED
    if equivalent > 0 and unique > 0:
        return MergeStatus.PARTIAL
    if signals.additions == 0 and signals.deletions == 0 and signals.ahead > 0:
        return MergeStatus.EMPTY
    return MergeStatus.UNMERGED


class MergeStatusClassifier:
    """Collects merge signals for a branch and classifies it.

    Ancestry alone gives false "merged" verdicts for branches that main
    simply moved past, and false "unmerged" verdicts for rebased work whose
    commits have new hashes. The extra signals gathered here tell those cases
    apart.
    """

    def __init__(self, git_ops: GitOperations):
        self.git_ops = git_ops

    def classify(
        self,
        branch_name: str,
        main_branch: str,
        divergence: Divergence,
        line_changes: LineChanges,
        tip: Optional[str] = None,
    ) -> Classification:
        """Classify a branch from its divergence and line changes."""
        errors = []
        has_merge_evidence = None
        equivalent = unique = None

        if divergence.is_ancestor and divergence.ahead == 0:
            has_merge_evidence = self._has_merge_evidence(
                branch_name, main_branch, tip, errors
            )
        elif not divergence.is_ancestor:
            equivalent, unique = self._count_cherry_equivalents(branch_name, main_branch, errors)

        signals = MergeSignals(
            ahead=divergence.ahead,
            is_ancestor=divergence.is_ancestor,
            has_merge_evidence=has_merge_evidence,
            equivalent_commits=equivalent,
            unique_commits=unique,
            additions=line_changes.additions,
            deletions=line_changes.deletions,
        )
        status = determine_merge_status(signals)
        logger.debug(f"{branch_name} classified as {status.value} ({signals})")

        return Classification(
            status=status,
            equivalent_commits=equivalent,
            unique_commits=unique,
            errors=tuple(errors),
        )

    def _has_merge_evidence(
        self, branch_name: str, main_branch: str, tip: Optional[str], errors: list
    ) -> bool:
        """A merge commit with the tip as parent, or the tip on main's first-parent chain."""
        try:
            sha = tip or self.git_ops.get_branch_tip(branch_name)
            if self.git_ops.has_merge_commit_with_parent(main_branch, sha):
                logger.debug(f"{branch_name}: tip {sha[:7]} is a parent of a merge commit")
                return True
            if self.git_ops.in_first_parent_history(main_branch, sha):
                logger.debug(f"{branch_name}: tip {sha[:7]} is in {main_branch} first-parent history")
                return True
        except GitOperationError as e:
            logger.debug(f"Could not look for merge evidence for {branch_name}: {e}")
            errors.append(str(e))
        return False

    def _count_cherry_equivalents(self, branch_name: str, main_branch: str, errors: list) -> Tuple[int, int]:
        """Split the branch's own commits into (equivalent, unique) counts."""
        try:
            marks = self.git_ops.get_cherry_marks(main_branch, branch_name)
        except GitOperationError as e:
            logger.debug(f"Could not compute cherry-pick equivalence for {branch_name}: {e}")
            errors.append(str(e))
            return 0, 0

        equivalent = sum(1 for mark in marks if mark == "=")
        unique = len(marks) - equivalent
        return equivalent, unique
