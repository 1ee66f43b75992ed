"""Data models for git-branch-janitor."""

from .branch import BranchDetails, CommitInfo, MergeStatus
from .plan import DeletionPlan, SkippedBranch

__all__ = ["BranchDetails", "CommitInfo", "MergeStatus", "DeletionPlan", "SkippedBranch"]
