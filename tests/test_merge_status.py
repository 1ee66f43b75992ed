"""Tests for merge status classification"""
from unittest.mock import Mock

import pytest

from git_branch_janitor.config import Config
from git_branch_janitor.core import BranchJanitor
from git_branch_janitor.exceptions import GitOperationError
from git_branch_janitor.models.branch import MergeStatus
from git_branch_janitor.services.git import (
    Divergence,
    LineChanges,
    MergeSignals,
    GitOperations,
    MergeStatusClassifier,
    determine_merge_status,
)


class TestDetermineMergeStatus:
    """The decision table, one row at a time."""

    def test_ancestor_with_merge_evidence_is_merged(self):
        signals = MergeSignals(ahead=0, is_ancestor=True, has_merge_evidence=True)
        assert determine_merge_status(signals) == MergeStatus.MERGED

    def test_ancestor_without_merge_evidence_is_ancestor(self):
        signals = MergeSignals(ahead=0, is_ancestor=True, has_merge_evidence=False)
        assert determine_merge_status(signals) == MergeStatus.ANCESTOR

    def test_ancestor_with_commits_ahead_is_diverged(self):
        signals = MergeSignals(ahead=2, is_ancestor=True, has_merge_evidence=True)
        assert determine_merge_status(signals) == MergeStatus.DIVERGED

    def test_all_commits_equivalent_is_rebased(self):
        signals = MergeSignals(ahead=3, is_ancestor=False, equivalent_commits=3, unique_commits=0)
        assert determine_merge_status(signals) == MergeStatus.REBASED

    def test_nothing_ahead_and_no_unique_commits_is_merged(self):
        signals = MergeSignals(ahead=0, is_ancestor=False, equivalent_commits=0, unique_commits=0)
        assert determine_merge_status(signals) == MergeStatus.MERGED

    def test_mixed_equivalent_and_unique_is_partial(self):
        signals = MergeSignals(ahead=2, is_ancestor=False, equivalent_commits=1, unique_commits=1)
        assert determine_merge_status(signals) == MergeStatus.PARTIAL

    def test_commits_without_line_changes_is_empty(self):
        signals = MergeSignals(
            ahead=2, is_ancestor=False, equivalent_commits=0, unique_commits=2,
            additions=0, deletions=0,
        )
        assert determine_merge_status(signals) == MergeStatus.EMPTY

    def test_unique_commits_with_changes_is_unmerged(self):
        signals = MergeSignals(
            ahead=5, is_ancestor=False, equivalent_commits=0, unique_commits=5,
            additions=5, deletions=0,
        )
        assert determine_merge_status(signals) == MergeStatus.UNMERGED

    def test_rebased_wins_over_empty(self):
        """A rebased branch with no net diff is still REBASED."""
        signals = MergeSignals(ahead=1, is_ancestor=False, equivalent_commits=1, unique_commits=0)
        assert determine_merge_status(signals) == MergeStatus.REBASED

    def test_missing_cherry_counts_treated_as_zero(self):
        signals = MergeSignals(ahead=1, is_ancestor=False, additions=3)
        assert determine_merge_status(signals) == MergeStatus.UNMERGED

    def test_every_status_reachable(self):
        cases = [
            MergeSignals(ahead=0, is_ancestor=True, has_merge_evidence=True),
            MergeSignals(ahead=0, is_ancestor=True, has_merge_evidence=False),
            MergeSignals(ahead=1, is_ancestor=True),
            MergeSignals(ahead=1, is_ancestor=False, equivalent_commits=1, unique_commits=0),
            MergeSignals(ahead=2, is_ancestor=False, equivalent_commits=1, unique_commits=1),
            MergeSignals(ahead=1, is_ancestor=False, equivalent_commits=0, unique_commits=1),
            MergeSignals(ahead=1, is_ancestor=False, equivalent_commits=0, unique_commits=1, additions=1),
        ]
        assert {determine_merge_status(s) for s in cases} == set(MergeStatus)


class TestMergeStatusClassifier:
    """Classifier behaviour with a mocked repository query layer."""

    def test_ancestor_checks_merge_parents_then_first_parent_chain(self):
        git_ops = Mock()
        git_ops.has_merge_commit_with_parent.return_value = False
        git_ops.in_first_parent_history.return_value = True

        result = MergeStatusClassifier(git_ops).classify(
            "feat/x", "main", Divergence(0, 4, True), LineChanges(0, 0), tip="abc1234"
        )

        assert result.status == MergeStatus.MERGED
        git_ops.has_merge_commit_with_parent.assert_called_once_with("main", "abc1234")
        git_ops.get_cherry_marks.assert_not_called()

    def test_tip_resolved_when_not_given(self):
        git_ops = Mock()
        git_ops.get_branch_tip.return_value = "def5678"
        git_ops.has_merge_commit_with_parent.return_value = True

        result = MergeStatusClassifier(git_ops).classify(
            "feat/x", "main", Divergence(0, 1, True), LineChanges(0, 0)
        )

        assert result.status == MergeStatus.MERGED
        git_ops.get_branch_tip.assert_called_once_with("feat/x")

    def test_cherry_marks_counted(self):
        git_ops = Mock()
        git_ops.get_cherry_marks.return_value = ["=", "+", "="]

        result = MergeStatusClassifier(git_ops).classify(
            "feat/x", "main", Divergence(3, 1, False), LineChanges(10, 2)
        )

        assert result.status == MergeStatus.PARTIAL
        assert result.equivalent_commits == 2
        assert result.unique_commits == 1
        git_ops.has_merge_commit_with_parent.assert_not_called()

    def test_failed_merge_evidence_query_is_recorded(self):
        git_ops = Mock()
        git_ops.has_merge_commit_with_parent.side_effect = GitOperationError("rev_list", "main", "boom")

        result = MergeStatusClassifier(git_ops).classify(
            "feat/x", "main", Divergence(0, 0, True), LineChanges(0, 0), tip="abc"
        )

        assert result.status == MergeStatus.ANCESTOR
        assert len(result.errors) == 1
        assert "boom" in result.errors[0]

    def test_failed_cherry_query_is_recorded(self):
        git_ops = Mock()
        git_ops.get_cherry_marks.side_effect = GitOperationError("rev_list", "feat/x", "bad revision")

        result = MergeStatusClassifier(git_ops).classify(
            "feat/x", "main", Divergence(2, 0, False), LineChanges(4, 0)
        )

        assert result.status == MergeStatus.UNMERGED
        assert result.errors


class TestRealRepositoryScenarios:
    """Classification of branches in a real repository."""

    @pytest.fixture
    def janitor(self, scenario_repo, mock_config, output):
        console, _ = output
        return BranchJanitor(scenario_repo.working_dir, mock_config, console=console)

    @pytest.mark.parametrize(
        "branch,expected",
        [
            ("feat/a", MergeStatus.MERGED),
            ("feat/b", MergeStatus.ANCESTOR),
            ("feat/c", MergeStatus.REBASED),
            ("feat/d", MergeStatus.UNMERGED),
            ("feat/e", MergeStatus.PARTIAL),
            ("feat/f", MergeStatus.EMPTY),
        ],
    )
    def test_branch_status(self, janitor, branch, expected):
        details = janitor.analyze_branch(branch)

        assert details.status == expected
        assert not details.is_degraded

    def test_fast_forward_merged_branch_has_nothing_ahead(self, janitor):
        details = janitor.analyze_branch("feat/a")

        assert details.ahead == 0
        assert details.behind > 0
        assert details.equivalent_commits is None

    def test_rebased_branch_counts(self, janitor):
        details = janitor.analyze_branch("feat/c")

        assert details.ahead == 3
        assert details.equivalent_commits == 3
        assert details.unique_commits == 0

    def test_unmerged_branch_counts(self, janitor):
        details = janitor.analyze_branch("feat/d")

        assert details.ahead == 5
        assert details.unique_commits == 5
        assert details.additions == 5
        assert details.deletions == 0

    def test_empty_branch_has_no_line_changes(self, janitor):
        details = janitor.analyze_branch("feat/f")

        assert details.ahead == 2
        assert details.additions == 0
        assert details.deletions == 0

    def test_main_branch_classified_as_merged(self, janitor):
        assert janitor.analyze_branch("main").status == MergeStatus.MERGED

    def test_analyze_branches_covers_every_local_branch(self, janitor):
        names = {details.name for details in janitor.analyze_branches()}

        assert names == {"main", "feat/a", "feat/b", "feat/c", "feat/d", "feat/e", "feat/f"}

    def test_fresh_commits_are_zero_days_old(self, janitor):
        details = janitor.analyze_branch("feat/d")

        assert details.age_days == 0
        assert details.last_commit_timestamp > 0


class TestMergeCommitParent:
    """A branch merged with --no-ff, after which main moved on."""

    @pytest.fixture
    def merged_repo(self, git_repo, commit):
        git_repo.git.checkout("-b", "feat/m")
        commit(git_repo, "m.txt", message="Work on m")
        git_repo.git.checkout("main")
        git_repo.git.merge("--no-ff", "feat/m", "-m", "Merge feat/m")
        commit(git_repo, "after.txt", message="Main moves on")
        return git_repo

    def test_tip_is_a_merge_parent_off_the_first_parent_chain(self, merged_repo):
        git_ops = GitOperations(merged_repo.working_dir)
        tip = git_ops.get_branch_tip("feat/m")

        assert git_ops.has_merge_commit_with_parent("main", tip)
        assert not git_ops.in_first_parent_history("main", tip)

    def test_classified_as_merged(self, merged_repo, mock_config, output):
        console, _ = output
        janitor = BranchJanitor(merged_repo.working_dir, mock_config, console=console)

        details = janitor.analyze_branch("feat/m")

        assert details.status == MergeStatus.MERGED
        assert details.ahead == 0
        assert details.behind == 2
        assert not details.is_degraded


class TestTagShadowingBranch:
    """A tag with the same name as a branch must not stand in for it."""

    @pytest.fixture
    def shadowed_repo(self, git_repo, commit):
        git_repo.git.tag("feat/x")
        git_repo.git.checkout("-b", "feat/x")
        for i in range(1, 4):
            commit(git_repo, f"x{i}.txt", message=f"Work on x part {i}")
        git_repo.git.checkout("main")
        return git_repo

    def test_branch_listed_by_its_own_name(self, shadowed_repo):
        names = GitOperations(shadowed_repo.working_dir).list_local_branches()

        assert "feat/x" in names
        assert "heads/feat/x" not in names

    def test_branch_classified_from_its_own_commits(self, shadowed_repo, mock_config, output):
        console, _ = output
        janitor = BranchJanitor(shadowed_repo.working_dir, mock_config, console=console)

        details = janitor.analyze_branch("feat/x")

        assert details.status == MergeStatus.UNMERGED
        assert details.ahead == 3
        assert details.behind == 0
        assert not details.is_degraded
        assert [c.summary for c in janitor.get_unique_commits("feat/x")] == [
            "Work on x part 3", "Work on x part 2", "Work on x part 1",
        ]

    def test_branch_can_be_planned(self, shadowed_repo, output):
        console, _ = output
        config = Config(fetch=False, include_unmerged=True, branches=("feat/x",))
        janitor = BranchJanitor(shadowed_repo.working_dir, config, console=console)

        assert janitor.build_plan().names == ("feat/x",)
