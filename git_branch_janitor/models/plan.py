"""Deletion plan model"""
from dataclasses import dataclass
from typing import Iterator, Tuple

from git_branch_janitor.models.branch import BranchDetails, MergeStatus


@dataclass(frozen=True)
class SkippedBranch:
    """A branch the planner left out, and why."""
    name: str
    reason: str


@dataclass(frozen=True)
class DeletionPlan:
    """Ordered deletion candidates from one classification pass.

    Plans are immutable. Building a second plan after the repository changed
    may give a different result; nothing ties a plan to the repository state
    it was computed from.
    """
    main_branch: str
    current_branch: str
    branches: Tuple[BranchDetails, ...] = ()
    skipped: Tuple[SkippedBranch, ...] = ()

    def __len__(self) -> int:
        return len(self.branches)

    def __iter__(self) -> Iterator[BranchDetails]:
        return iter(self.branches)

    def __bool__(self) -> bool:
        return bool(self.branches)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(branch.name for branch in self.branches)

    def count_by_status(self) -> dict:
        """Number of planned branches per MergeStatus (all statuses present)."""
        counts = {status: 0 for status in MergeStatus}
        for branch in self.branches:
            counts[branch.status] += 1
        return counts
