"""Core functionality for git-branch-janitor"""

import time
from typing import Callable, List, Optional, Union

from rich.console import Console

from git_branch_janitor.config import Config
from git_branch_janitor.constants import RECENT_COMMITS_LIMIT, SECONDS_PER_DAY
from git_branch_janitor.exceptions import GitOperationError, MainBranchNotFoundError, UserQuit
from git_branch_janitor.logging_config import get_logger
from git_branch_janitor.models.branch import BranchDetails, CommitInfo
from git_branch_janitor.models.plan import DeletionPlan
from git_branch_janitor.services.confirmation_service import (
    ConfirmationState,
    ConfirmationWorkflow,
    ResponseKind,
)
from git_branch_janitor.services.deletion_service import DeletionExecutor, DeletionResult
from git_branch_janitor.services.display_service import DisplayService
from git_branch_janitor.services.git import DivergenceAnalyzer, GitOperations, MergeStatusClassifier
from git_branch_janitor.services.git.divergence import coerce_count
from git_branch_janitor.services.planner_service import DeletionPlanner

default_console = Console()
logger = get_logger(__name__)


class BranchJanitor:
    """Main class for classifying and cleaning up local Git branches."""

    def __init__(
        self,
        repo_path: str,
        config: Union[Config, dict],
        console: Optional[Console] = None,
        input_func: Optional[Callable[[str], str]] = None,
    ):
        """Initialize BranchJanitor and validate the environment.

        Args:
            repo_path: Path inside the git repository
            config: Configuration dict or Config object
            console: Rich console for operator output
            input_func: Reads one response line; defaults to console.input

        Raises:
            NotAGitRepositoryError: If repo_path is not inside a repository
            MainBranchNotFoundError: If the reference branch does not exist
        """
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        self.console = console or default_console
        self.input_func = input_func or self.console.input
        self.main_branch = self.config.main_branch
        self.dry_run = self.config.dry_run
        self.force_mode = self.config.force
        self.verbose = self.config.verbose

        self.git_ops = GitOperations(repo_path)
        self.repo_path = self.git_ops.repo_path

        if not self.git_ops.branch_exists(self.main_branch):
            try:
                available = self.git_ops.list_local_branches()
            except GitOperationError:
                available = []
            raise MainBranchNotFoundError(self.main_branch, available)

        self.divergence_analyzer = DivergenceAnalyzer(self.git_ops)
        self.classifier = MergeStatusClassifier(self.git_ops)
        self.planner = DeletionPlanner(self.config)
        self.executor = DeletionExecutor(self.git_ops)
        self.display_service = DisplayService(console=self.console, verbose=self.verbose)
        self.workflow: Optional[ConfirmationWorkflow] = None

    def sync_remote(self) -> None:
        """Best-effort fetch/prune so remote-tracking refs are current."""
        if self.git_ops.fetch_prune():
            logger.info("Fetched and pruned remote-tracking refs")

    def analyze_branch(self, branch_name: str) -> BranchDetails:
        """Collect every signal for one branch and classify it."""
        errors = []

        tip = ""
        try:
            tip = self.git_ops.get_branch_tip(branch_name)
        except GitOperationError as e:
            errors.append(str(e))

        relative = "unknown"
        try:
            relative = self.git_ops.get_last_commit_relative(branch_name) or "unknown"
        except GitOperationError as e:
            logger.debug(f"Could not get last commit date for {branch_name}: {e}")

        timestamp = 0
        try:
            raw = self.git_ops.get_last_commit_timestamp(branch_name)
            timestamp, ok = coerce_count(raw)
            if not ok:
                errors.append(f"malformed commit timestamp: {raw!r}")
        except GitOperationError as e:
            errors.append(str(e))

        age_days = 0
        if timestamp:
            age_days = max(0, (int(time.time()) - timestamp) // SECONDS_PER_DAY)

        divergence = self.divergence_analyzer.analyze(branch_name, self.main_branch)
        line_changes = self.divergence_analyzer.line_changes(branch_name, self.main_branch)
        classification = self.classifier.classify(
            branch_name, self.main_branch, divergence, line_changes, tip=tip or None
        )

        errors.extend(divergence.errors)
        errors.extend(line_changes.errors)
        errors.extend(classification.errors)
        if errors:
            logger.warning(f"Status of {branch_name} could not be fully determined")

        return BranchDetails(
            name=branch_name,
            status=classification.status,
            tip=tip,
            last_commit_relative=relative,
            last_commit_timestamp=timestamp,
            age_days=age_days,
            ahead=divergence.ahead,
            behind=divergence.behind,
            additions=line_changes.additions,
            deletions=line_changes.deletions,
            equivalent_commits=classification.equivalent_commits,
            unique_commits=classification.unique_commits,
            is_protected=self.planner.is_protected(branch_name),
            query_errors=tuple(errors),
        )

    def analyze_branches(self) -> List[BranchDetails]:
        """Classify every local branch, oldest last commit first."""
        names = self.git_ops.list_local_branches()
        logger.info(f"Analyzing {len(names)} local branches against {self.main_branch}")
        return [self.analyze_branch(name) for name in names]

    def build_plan(self, branches: Optional[List[BranchDetails]] = None) -> DeletionPlan:
        """Classify branches (unless given) and build a deletion plan."""
        if branches is None:
            branches = self.analyze_branches()
        return self.planner.build_plan(branches, self.git_ops.get_current_branch())

    def get_unique_commits(self, branch_name: str) -> List[CommitInfo]:
        """Commits only on this branch; empty if they cannot be listed."""
        try:
            return self.git_ops.get_unique_commits(self.main_branch, branch_name)
        except GitOperationError as e:
            logger.warning(f"Could not list commits of {branch_name}: {e}")
            return []

    def run(self) -> List[DeletionResult]:
        """Classify, plan, confirm and delete.

        Raises:
            UserQuit: If the operator quits at a prompt; branches deleted
                before that stay deleted
        """
        if self.config.fetch:
            self.sync_remote()

        current_branch = self.git_ops.get_current_branch()
        branches = self.analyze_branches()
        if not branches:
            self.console.print("No branches to process")
            return []

        self.display_service.display_branch_table(branches, current_branch)
        plan = self.planner.build_plan(branches, current_branch)
        self.display_service.display_skipped(plan.skipped)

        if self.verbose:
            for branch in plan:
                self.display_service.display_branch_info(
                    branch, self.get_unique_commits(branch.name)[:RECENT_COMMITS_LIMIT]
                )

        self.display_service.display_plan(plan, self.dry_run)
        if not plan:
            return []

        self.workflow = ConfirmationWorkflow(plan, self.config)
        self.workflow.start()
        if self.dry_run:
            return self._preview(self.workflow)
        return self._perform_cleanup(self.workflow)

    def _preview(self, workflow: ConfirmationWorkflow) -> List[DeletionResult]:
        """Dry run: the workflow finishes without authorizing anything."""
        logger.debug(f"Confirmation workflow ended in {workflow.state.value} for dry run")
        results = [self.executor.delete(branch.name, dry_run=True) for branch in workflow.plan]
        for result in results:
            self.display_service.display_result(result)
        self.display_service.display_summary(results)
        return results

    def _perform_cleanup(self, workflow: ConfirmationWorkflow) -> List[DeletionResult]:
        """Walk the confirmation workflow, deleting branches as they are authorized."""
        plan = workflow.plan
        workflow.start()
        results: List[DeletionResult] = []

        try:
            self._delete_authorized(workflow, results)
            shown = None
            while workflow.awaiting_input:
                prompt_key = (workflow.state, workflow.pending.name if workflow.pending else None)
                if prompt_key != shown:
                    self._show_prompt(workflow, plan)
                    shown = prompt_key

                kind = workflow.feed(self._read_response())
                if kind in (ResponseKind.EMPTY, ResponseKind.MISMATCH):
                    self.display_service.display_response_hint(workflow.expected_response)
                self._delete_authorized(workflow, results)
        except UserQuit:
            self.display_service.display_summary(results, len(workflow.skipped))
            raise

        if workflow.state == ConfirmationState.ABORTED:
            self.console.print("[yellow]Deletion aborted[/yellow]")

        self.display_service.display_summary(results, len(workflow.skipped))
        return results

    def _show_prompt(self, workflow: ConfirmationWorkflow, plan: DeletionPlan) -> None:
        if workflow.state == ConfirmationState.AWAITING_BULK_CONFIRMATION:
            self.display_service.display_bulk_prompt(plan, workflow.expected_phrase)
        elif workflow.state == ConfirmationState.PER_BRANCH_PROTECTED_CONFIRM:
            self.display_service.display_protected_warning(workflow.pending)
        else:
            self.display_service.display_unmerged_warning(
                workflow.pending,
                self.get_unique_commits(workflow.pending.name),
                self.config.commit_display_limit,
            )

    def _read_response(self) -> str:
        try:
            return self.input_func("> ")
        except EOFError:
            raise UserQuit("End of input")

    def _delete_authorized(self, workflow: ConfirmationWorkflow, results: List[DeletionResult]) -> None:
        for branch in workflow.drain_authorized():
            result = self.executor.delete(branch.name, dry_run=False, force=self.force_mode)
            self.display_service.display_result(result)
            results.append(result)
