"""Git operations service"""

import git
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Optional

from git_branch_janitor.exceptions import GitOperationError, NotAGitRepositoryError
from git_branch_janitor.logging_config import get_logger
from git_branch_janitor.models.branch import CommitInfo

logger = get_logger(__name__)


def _command_error_message(error: git.exc.GitCommandError) -> str:
    """Build a one-line description of a failed git command."""
    stderr = (error.stderr or "").strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip().strip("'").strip()
    if stderr:
        return f"exit {error.status}: {stderr}"
    return f"exit {error.status}"


def _head_ref(branch_name: str) -> str:
    """Fully qualified ref, so a tag with the same name never shadows the branch."""
    return f"refs/heads/{branch_name}"


def _symmetric_range(main_branch: str, branch_name: str) -> str:
    return f"{_head_ref(main_branch)}...{_head_ref(branch_name)}"


class GitOperations:
    """Read-only queries against the repository, plus branch deletion.

    Query methods raise GitOperationError when git fails; deciding what a
    failed query means is left to the caller.
    """

    def __init__(self, repo_path: str):
        """Initialize the service.

        Args:
            repo_path: Path inside the git repository

        Raises:
            NotAGitRepositoryError: If repo_path is not inside a repository
        """
        self.in_git_operation = False  # Track if a mutating operation is in progress

        try:
            repo = git.Repo(repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            logger.debug(f"Cannot open repository at {repo_path}: {e!r}")
            raise NotAGitRepositoryError(repo_path) from e

        self.repo_path = repo.working_tree_dir or repo.git_dir
        repo.close()

        logger.debug(f"Git operations initialized for {self.repo_path}")

    def _get_repo(self) -> git.Repo:
        """Open a fresh git.Repo for this call.

        GitPython repos are lightweight - they don't clone, just open the
        existing repo.
        """
        return git.Repo(self.repo_path)

    @contextmanager
    def _git_operation(self):
        """Context manager to track mutating git operations."""
        self.in_git_operation = True
        try:
            yield
        finally:
            self.in_git_operation = False

    # Refs

    def list_local_branches(self) -> List[str]:
        """Local branch names, oldest last commit first."""
        try:
            output = self._get_repo().git.for_each_ref(
                "--sort=committerdate", "--format=%(refname:lstrip=2)", "refs/heads/"
            )
        except git.exc.GitCommandError as e:
            raise GitOperationError("list_branches", message=_command_error_message(e)) from e
        return [line.strip() for line in output.splitlines() if line.strip()]

    def branch_exists(self, branch_name: str) -> bool:
        """Check whether refs/heads/<branch_name> exists."""
        try:
            self._get_repo().git.show_ref("--verify", "--quiet", _head_ref(branch_name))
            return True
        except git.exc.GitCommandError:
            return False

    def get_current_branch(self) -> Optional[str]:
        """Name of the checked-out branch, or None in detached HEAD state."""
        try:
            return self._get_repo().active_branch.name
        except TypeError:
            logger.debug("Repository is in detached HEAD state")
            return None

    def get_branch_tip(self, branch_name: str) -> str:
        """Full SHA of the branch tip."""
        try:
            return self._get_repo().git.rev_parse("--verify", _head_ref(branch_name)).strip()
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev_parse", branch_name, _command_error_message(e)) from e

    # Commit metadata

    def get_last_commit_relative(self, branch_name: str) -> str:
        """Relative date of the last commit, e.g. '3 weeks ago'."""
        try:
            return self._get_repo().git.log("-1", "--format=%cr", _head_ref(branch_name), "--").strip()
        except git.exc.GitCommandError as e:
            raise GitOperationError("log", branch_name, _command_error_message(e)) from e

    def get_last_commit_timestamp(self, branch_name: str) -> str:
        """Committer date of the last commit as raw epoch seconds text."""
        try:
            return self._get_repo().git.log("-1", "--format=%ct", _head_ref(branch_name), "--").strip()
        except git.exc.GitCommandError as e:
            raise GitOperationError("log", branch_name, _command_error_message(e)) from e

    # Ancestry and divergence

    def count_behind_ahead(self, main_branch: str, branch_name: str) -> str:
        """Raw `rev-list --left-right --count main...branch` output ('behind<TAB>ahead')."""
        try:
            return self._get_repo().git.rev_list(
                "--left-right", "--count", _symmetric_range(main_branch, branch_name)
            ).strip()
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev_list", branch_name, _command_error_message(e)) from e

    def is_ancestor(self, branch_name: str, main_branch: str) -> bool:
        """True if the branch tip is reachable from the main branch tip."""
        repo = self._get_repo()
        try:
            return repo.is_ancestor(_head_ref(branch_name), _head_ref(main_branch))
        except git.exc.GitCommandError as e:
            raise GitOperationError("merge_base", branch_name, _command_error_message(e)) from e

    def has_merge_commit_with_parent(self, main_branch: str, commit_sha: str) -> bool:
        """True if a merge commit in main's history has commit_sha as a parent."""
        try:
            output = self._get_repo().git.rev_list("--merges", "--parents", _head_ref(main_branch))
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev_list", main_branch, _command_error_message(e)) from e

        for line in output.splitlines():
            # "<merge> <parent1> <parent2> ..."
            if commit_sha in line.split()[1:]:
                return True
        return False

    def in_first_parent_history(self, main_branch: str, commit_sha: str) -> bool:
        """True if commit_sha is on main's first-parent chain."""
        try:
            output = self._get_repo().git.rev_list("--first-parent", _head_ref(main_branch))
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev_list", main_branch, _command_error_message(e)) from e
        return commit_sha in output.split()

    def get_cherry_marks(self, main_branch: str, branch_name: str) -> List[str]:
        """Cherry marks for the branch's own non-merge commits.

        Each entry is '=' (an equivalent patch exists in main) or '+' (no
        equivalent).
        """
        try:
            output = self._get_repo().git.rev_list(
                "--cherry-mark", "--right-only", "--no-merges", _symmetric_range(main_branch, branch_name)
            )
        except git.exc.GitCommandError as e:
            raise GitOperationError("rev_list", branch_name, _command_error_message(e)) from e
        return [line[0] for line in output.splitlines() if line.strip()]

    def get_unique_commits(self, main_branch: str, branch_name: str) -> List[CommitInfo]:
        """Every commit on the branch that is not reachable from main, newest first."""
        try:
            commits = []
            for commit in self._get_repo().iter_commits(f"{_head_ref(main_branch)}..{_head_ref(branch_name)}"):
                commits.append(
                    CommitInfo(
                        sha=commit.hexsha[:7],
                        summary=commit.message.strip().split("\n")[0],
                        author=commit.author.name,
                        date=datetime.fromtimestamp(
                            commit.committed_date, tz=timezone.utc
                        ).strftime("%Y-%m-%d %H:%M"),
                    )
                )
            return commits
        except git.exc.GitCommandError as e:
            raise GitOperationError("log", branch_name, _command_error_message(e)) from e

    def get_diff_shortstat(self, main_branch: str, branch_name: str) -> str:
        """Raw `git diff --shortstat main...branch` output (empty when no changes)."""
        try:
            return self._get_repo().git.diff("--shortstat", _symmetric_range(main_branch, branch_name)).strip()
        except git.exc.GitCommandError as e:
            raise GitOperationError("diff", branch_name, _command_error_message(e)) from e

    # Mutations

    def delete_branch(self, branch_name: str, force: bool = False) -> None:
        """Delete a local branch (`git branch -d`, or `-D` when force is set).

        Raises:
            GitOperationError: If git refuses, e.g. the branch is not fully merged
        """
        with self._git_operation():
            try:
                self._get_repo().delete_head(branch_name, force=force)
            except git.exc.GitCommandError as e:
                raise GitOperationError(
                    "force_delete" if force else "delete", branch_name, _command_error_message(e)
                ) from e
        logger.debug(f"Deleted branch {branch_name} (force={force})")

    def fetch_prune(self) -> bool:
        """Best-effort `git fetch --prune`. Returns False instead of raising."""
        repo = self._get_repo()
        if not repo.remotes:
            logger.debug("No remotes configured, skipping fetch")
            return False
        try:
            repo.git.fetch("--prune")
            return True
        except git.exc.GitCommandError as e:
            logger.warning(f"Could not fetch from remote ({_command_error_message(e)})")
            return False
