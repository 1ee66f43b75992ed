"""Core functionality for git-branch-janitor"""

from .branch_janitor import BranchJanitor

__all__ = ["BranchJanitor"]
