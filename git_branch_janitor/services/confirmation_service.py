"""Confirmation workflow for branch deletion.

The workflow is a state machine that never touches the terminal: the caller
shows prompts, reads a line, and passes it to `feed()`. Branches are released
for deletion in plan order through `drain_authorized()`, so the caller can
delete each one as soon as it is approved.

PREVIEW ends in DONE for dry runs and empty plans. Otherwise the operator
types the bulk phrase (skipped in force mode), then every protected or
unmerged branch gets its own exact-name prompt. Aborting the bulk prompt ends
in ABORTED; aborting a per-branch prompt skips only that branch. Quit tokens
raise UserQuit from any prompt.
"""

from enum import Enum
from typing import Iterable, List, Optional, Union, TYPE_CHECKING

from git_branch_janitor.constants import (
    ABORT_TOKENS,
    BULK_CONFIRMATION_TEMPLATE,
    PROTECTED_BRANCHES,
    QUIT_TOKENS,
)
from git_branch_janitor.exceptions import UserQuit
from git_branch_janitor.logging_config import get_logger
from git_branch_janitor.models.branch import BranchDetails, MergeStatus
from git_branch_janitor.models.plan import DeletionPlan

if TYPE_CHECKING:
    from git_branch_janitor.config import Config

logger = get_logger(__name__)


class ConfirmationState(Enum):
    """States of the confirmation workflow."""
    PREVIEW = "preview"
    AWAITING_BULK_CONFIRMATION = "awaiting-bulk-confirmation"
    PER_BRANCH_PROTECTED_CONFIRM = "per-branch-protected-confirm"
    PER_BRANCH_UNMERGED_CONFIRM = "per-branch-unmerged-confirm"
    DONE = "done"
    ABORTED = "aborted"


AWAITING_STATES = frozenset(
    {
        ConfirmationState.AWAITING_BULK_CONFIRMATION,
        ConfirmationState.PER_BRANCH_PROTECTED_CONFIRM,
        ConfirmationState.PER_BRANCH_UNMERGED_CONFIRM,
    }
)


class ResponseKind(Enum):
    """How one operator response was understood."""
    CONFIRMED = "confirmed"
    ABORTED = "aborted"
    QUIT = "quit"
    EMPTY = "empty"
    MISMATCH = "mismatch"


def bulk_confirmation_phrase(count: int) -> str:
    """The exact phrase that confirms deleting `count` branches."""
    return BULK_CONFIRMATION_TEMPLATE.format(count=count)


def interpret_response(response: str, expected: str) -> ResponseKind:
    """Classify a response against the exact text expected at a prompt.

    The expected text wins over the abort/quit tokens, so a branch named
    "n" can still be confirmed by typing "n".
    """
    if response == expected:
        return ResponseKind.CONFIRMED
    if response in ABORT_TOKENS:
        return ResponseKind.ABORTED
    if response in QUIT_TOKENS:
        return ResponseKind.QUIT
    if response == "":
        return ResponseKind.EMPTY
    return ResponseKind.MISMATCH


class ConfirmationWorkflow:
    """Gates deletion of a DeletionPlan behind operator confirmations."""

    def __init__(self, plan: DeletionPlan, config: Union["Config", dict]):
        self.plan = plan
        self.dry_run = config.get("dry_run", True)
        self.force = config.get("force", False)
        self.protected_branches = frozenset(config.get("protected_branches", PROTECTED_BRANCHES))

        # Fixed when the workflow is created; a phrase for any other size never matches
        self.expected_phrase = bulk_confirmation_phrase(len(plan))

        self.state = ConfirmationState.PREVIEW
        self.pending: Optional[BranchDetails] = None
        self.authorized: List[BranchDetails] = []
        self.skipped: List[BranchDetails] = []
        self._position = 0
        self._undrained: List[BranchDetails] = []

    @property
    def awaiting_input(self) -> bool:
        return self.state in AWAITING_STATES

    @property
    def finished(self) -> bool:
        return self.state in (ConfirmationState.DONE, ConfirmationState.ABORTED)

    @property
    def expected_response(self) -> Optional[str]:
        """The exact text the current prompt accepts, or None when not prompting."""
        if self.state == ConfirmationState.AWAITING_BULK_CONFIRMATION:
            return self.expected_phrase
        if self.pending is not None:
            return self.pending.name
        return None

    def gate_for(self, branch: BranchDetails) -> Optional[ConfirmationState]:
        """The per-branch prompt a branch needs, or None if bulk approval covers it."""
        if branch.name in self.protected_branches:
            return ConfirmationState.PER_BRANCH_PROTECTED_CONFIRM
        if branch.status == MergeStatus.UNMERGED:
            return ConfirmationState.PER_BRANCH_UNMERGED_CONFIRM
        return None

    def start(self) -> ConfirmationState:
        """Leave PREVIEW. Safe to call more than once."""
        if self.state != ConfirmationState.PREVIEW:
            return self.state

        if self.dry_run:
            logger.debug("Dry run: previewing plan without confirmation")
            self.state = ConfirmationState.DONE
        elif not self.plan:
            self.state = ConfirmationState.DONE
        elif self.force:
            logger.debug("Force mode: skipping bulk confirmation")
            self._advance()
        else:
            self.state = ConfirmationState.AWAITING_BULK_CONFIRMATION
        return self.state

    def feed(self, response: str) -> ResponseKind:
        """Process one operator response at the current prompt.

        Raises:
            UserQuit: On a quit token
            RuntimeError: If no prompt is pending
        """
        if not self.awaiting_input:
            raise RuntimeError(f"No confirmation pending (state: {self.state.value})")

        kind = interpret_response(response, self.expected_response)

        if kind == ResponseKind.QUIT:
            logger.debug("Quit requested at confirmation prompt")
            self.state = ConfirmationState.ABORTED
            raise UserQuit()

        if self.state == ConfirmationState.AWAITING_BULK_CONFIRMATION:
            if kind == ResponseKind.CONFIRMED:
                logger.info(f"Bulk deletion of {len(self.plan)} branches confirmed")
                self._advance()
            elif kind == ResponseKind.ABORTED:
                logger.info("Bulk deletion aborted")
                self.state = ConfirmationState.ABORTED
            return kind

        # Per-branch prompt
        if kind == ResponseKind.CONFIRMED:
            logger.info(f"Deletion of {self.pending.name} confirmed by name")
            self._authorize(self.pending)
            self._position += 1
            self._advance()
        elif kind == ResponseKind.ABORTED:
            logger.info(f"Deletion of {self.pending.name} aborted")
            self.skipped.append(self.pending)
            self._position += 1
            self._advance()
        return kind

    def drain_authorized(self) -> List[BranchDetails]:
        """Branches approved since the last call, in plan order."""
        drained, self._undrained = self._undrained, []
        return drained

    def run(self, responses: Iterable[str]) -> List[BranchDetails]:
        """Drive the workflow to the end from a sequence of responses.

        Running out of responses while a prompt is pending counts as quit.
        Returns every authorized branch.
        """
        self.start()
        responses = iter(responses)
        while self.awaiting_input:
            try:
                response = next(responses)
            except StopIteration:
                self.state = ConfirmationState.ABORTED
                raise UserQuit("No more input")
            self.feed(response)
        return list(self.authorized)

    def _authorize(self, branch: BranchDetails) -> None:
        self.authorized.append(branch)
        self._undrained.append(branch)

    def _advance(self) -> None:
        """Approve branches up to the next one that needs its own prompt."""
        self.pending = None
        while self._position < len(self.plan.branches):
            branch = self.plan.branches[self._position]
            gate = self.gate_for(branch)
            if gate is not None:
                self.pending = branch
                self.state = gate
                return
            self._authorize(branch)
            self._position += 1
        self.state = ConfirmationState.DONE
