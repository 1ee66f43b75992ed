"""Tests for the deletion executor"""
from unittest.mock import Mock

from git_branch_janitor.exceptions import GitOperationError
from git_branch_janitor.services.deletion_service import DeletionExecutor, DeletionOutcome
from git_branch_janitor.services.git import GitOperations


class TestDeletionExecutorMocked:
    """Executor paths with a mocked repository."""

    def test_dry_run_touches_nothing(self):
        git_ops = Mock()

        result = DeletionExecutor(git_ops).delete("feat/a", dry_run=True)

        assert result.outcome == DeletionOutcome.PREVIEWED
        assert not result.deleted
        git_ops.delete_branch.assert_not_called()
        git_ops.branch_exists.assert_not_called()

    def test_safe_delete(self):
        git_ops = Mock()
        git_ops.branch_exists.return_value = True

        result = DeletionExecutor(git_ops).delete("feat/a", dry_run=False)

        assert result.outcome == DeletionOutcome.DELETED
        git_ops.delete_branch.assert_called_once_with("feat/a", force=False)

    def test_refused_without_force(self):
        git_ops = Mock()
        git_ops.branch_exists.return_value = True
        git_ops.delete_branch.side_effect = GitOperationError("delete", "feat/d", "not fully merged")

        result = DeletionExecutor(git_ops).delete("feat/d", dry_run=False)

        assert result.outcome == DeletionOutcome.FAILED
        assert "not fully merged" in result.error
        assert "--force" in result.error
        assert git_ops.delete_branch.call_count == 1

    def test_refused_with_force_falls_back(self):
        git_ops = Mock()
        git_ops.branch_exists.return_value = True
        git_ops.delete_branch.side_effect = [GitOperationError("delete", "feat/d", "not fully merged"), None]

        result = DeletionExecutor(git_ops).delete("feat/d", dry_run=False, force=True)

        assert result.outcome == DeletionOutcome.FORCE_DELETED
        assert result.deleted
        git_ops.delete_branch.assert_called_with("feat/d", force=True)

    def test_forced_delete_failure(self):
        git_ops = Mock()
        git_ops.branch_exists.return_value = True
        git_ops.delete_branch.side_effect = GitOperationError("delete", "feat/d", "locked")

        result = DeletionExecutor(git_ops).delete("feat/d", dry_run=False, force=True)

        assert result.outcome == DeletionOutcome.FAILED
        assert git_ops.delete_branch.call_count == 2

    def test_vanished_branch(self):
        git_ops = Mock()
        git_ops.branch_exists.return_value = False

        result = DeletionExecutor(git_ops).delete("feat/a", dry_run=False)

        assert result.outcome == DeletionOutcome.MISSING
        git_ops.delete_branch.assert_not_called()


class TestDeletionExecutorRealRepo:
    """Executor against a real repository."""

    def test_merged_branch_deleted(self, scenario_repo):
        git_ops = GitOperations(scenario_repo.working_dir)

        result = DeletionExecutor(git_ops).delete("feat/a", dry_run=False)

        assert result.outcome == DeletionOutcome.DELETED
        assert not git_ops.branch_exists("feat/a")

    def test_unmerged_branch_kept_without_force(self, scenario_repo):
        git_ops = GitOperations(scenario_repo.working_dir)

        result = DeletionExecutor(git_ops).delete("feat/d", dry_run=False)

        assert result.outcome == DeletionOutcome.FAILED
        assert git_ops.branch_exists("feat/d")

    def test_unmerged_branch_force_deleted(self, scenario_repo):
        git_ops = GitOperations(scenario_repo.working_dir)

        result = DeletionExecutor(git_ops).delete("feat/d", dry_run=False, force=True)

        assert result.outcome == DeletionOutcome.FORCE_DELETED
        assert not git_ops.branch_exists("feat/d")
