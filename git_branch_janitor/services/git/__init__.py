"""Git-related services for git-branch-janitor."""

from .operations import GitOperations
from .divergence import DivergenceAnalyzer, Divergence, LineChanges
from .merge_detector import MergeStatusClassifier, MergeSignals, determine_merge_status

__all__ = [
    "GitOperations",
    "DivergenceAnalyzer",
    "Divergence",
    "LineChanges",
    "MergeStatusClassifier",
    "MergeSignals",
    "determine_merge_status",
]
