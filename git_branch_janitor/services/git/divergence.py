"""Ancestry and divergence analysis for git-branch-janitor."""

import re
from dataclasses import dataclass
from typing import Tuple

from git_branch_janitor.exceptions import GitOperationError
from git_branch_janitor.logging_config import get_logger
from git_branch_janitor.services.git.operations import GitOperations

logger = get_logger(__name__)

_INSERTIONS_RE = re.compile(r"(\d+) insertions?\(\+\)")
_DELETIONS_RE = re.compile(r"(\d+) deletions?\(-\)")


@dataclass(frozen=True)
class Divergence:
    """Ahead/behind counts and ancestry of a branch against the main branch."""

    ahead: int
    behind: int
    is_ancestor: bool
    errors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LineChanges:
    """Added/deleted line totals of a branch against the main branch."""

    additions: int
    deletions: int
    errors: Tuple[str, ...] = ()


def coerce_count(value) -> Tuple[int, bool]:
    """Coerce raw query output to a non-negative int.

    Returns (value, ok). Missing or non-numeric input gives (0, False).
    """
    text = str(value).strip() if value is not None else ""
    if not text.isdecimal():
        return 0, False
    return int(text), True


def parse_behind_ahead(output: str) -> Tuple[int, int, bool]:
    """Parse 'behind<TAB>ahead' from `rev-list --left-right --count`.

    Returns (behind, ahead, ok).
    """
    parts = (output or "").split()
    behind, behind_ok = coerce_count(parts[0] if len(parts) > 0 else None)
    ahead, ahead_ok = coerce_count(parts[1] if len(parts) > 1 else None)
    return behind, ahead, behind_ok and ahead_ok and len(parts) == 2


def parse_shortstat(output: str) -> Tuple[int, int]:
    """Parse insertions/deletions from `git diff --shortstat`.

    Either number is 0 when git leaves it out (e.g. a pure deletion).
    """
    insertions = _INSERTIONS_RE.search(output or "")
    deletions = _DELETIONS_RE.search(output or "")
    return (
        int(insertions.group(1)) if insertions else 0,
        int(deletions.group(1)) if deletions else 0,
    )


class DivergenceAnalyzer:
    """Computes how far a branch has moved away from the main branch.

    Query failures never propagate: the affected number falls back to zero
    and the failure is recorded in the result's `errors`.
    """

    def __init__(self, git_ops: GitOperations):
        self.git_ops = git_ops

    def analyze(self, branch_name: str, main_branch: str) -> Divergence:
        """Ahead/behind counts and the ancestry predicate for one branch."""
        errors = []

        try:
            raw = self.git_ops.count_behind_ahead(main_branch, branch_name)
            behind, ahead, ok = parse_behind_ahead(raw)
            if not ok:
                logger.debug(f"Malformed ahead/behind output for {branch_name}: {raw!r}")
                errors.append(f"malformed ahead/behind count: {raw!r}")
        except GitOperationError as e:
            logger.debug(f"Could not count commits for {branch_name}: {e}")
            behind, ahead = 0, 0
            errors.append(str(e))

        try:
            is_ancestor = self.git_ops.is_ancestor(branch_name, main_branch)
        except GitOperationError as e:
            logger.debug(f"Could not test ancestry of {branch_name}: {e}")
            is_ancestor = False
            errors.append(str(e))

        logger.debug(
            f"{branch_name}: behind={behind} ahead={ahead} ancestor={is_ancestor}"
        )
        return Divergence(ahead=ahead, behind=behind, is_ancestor=is_ancestor, errors=tuple(errors))

    def line_changes(self, branch_name: str, main_branch: str) -> LineChanges:
        """Added/deleted line totals since the merge base."""
        try:
            additions, deletions = parse_shortstat(
                self.git_ops.get_diff_shortstat(main_branch, branch_name)
            )
            return LineChanges(additions=additions, deletions=deletions)
        except GitOperationError as e:
            logger.debug(f"Could not diff {branch_name}: {e}")
            return LineChanges(additions=0, deletions=0, errors=(str(e),))
