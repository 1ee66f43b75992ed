"""Branch model and related enums"""
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple


class MergeStatus(Enum):
    """How a branch relates to the main branch."""
    MERGED = "MERGED"
    ANCESTOR = "ANCESTOR"
    DIVERGED = "DIVERGED"
    REBASED = "REBASED"
    PARTIAL = "PARTIAL"
    EMPTY = "EMPTY"
    UNMERGED = "UNMERGED"


@dataclass(frozen=True)
class CommitInfo:
    """A single commit, as shown to the operator."""
    sha: str
    summary: str
    author: str = ""
    date: str = ""


@dataclass(frozen=True)
class BranchDetails:
    """Snapshot of one branch from a single classification pass."""
    name: str
    status: MergeStatus
    tip: str = ""
    last_commit_relative: str = "unknown"
    last_commit_timestamp: int = 0
    age_days: int = 0
    ahead: int = 0
    behind: int = 0
    additions: int = 0
    deletions: int = 0
    equivalent_commits: Optional[int] = None  # None = not computed (branch is an ancestor)
    unique_commits: Optional[int] = None
    is_protected: bool = False
    query_errors: Tuple[str, ...] = ()

    @property
    def is_degraded(self) -> bool:
        """True if any query fell back to a default during analysis."""
        return bool(self.query_errors)
