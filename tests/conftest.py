"""Pytest fixtures for git-branch-janitor tests"""
import io
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import git
import pytest
from rich.console import Console

from git_branch_janitor.config import Config
from git_branch_janitor.models.branch import BranchDetails, MergeStatus


def commit_file(repo, filename, content=None, message=None, days_ago=None):
    """Write a file and commit it, optionally back-dated."""
    path = Path(repo.working_dir) / filename
    path.write_text(content if content is not None else f"{filename}\n")
    repo.index.add([filename])
    kwargs = {}
    if days_ago is not None:
        date = (datetime.now() - timedelta(days=days_ago)).strftime("%Y-%m-%dT%H:%M:%S")
        kwargs = {"author_date": date, "commit_date": date}
    return repo.index.commit(message or f"Add {filename}", **kwargs)


def remove_file(repo, filename, message=None):
    """Delete a tracked file and commit the removal."""
    repo.index.remove([filename], working_tree=True)
    return repo.index.commit(message or f"Remove {filename}")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_config():
    """Create a configuration dictionary for a local-only preview run."""
    return {
        "verbose": False,
        "debug": False,
        "dry_run": True,
        "force": False,
        "fetch": False,
        "main_branch": "main",
    }


@pytest.fixture
def config():
    return Config(fetch=False)


@pytest.fixture
def output():
    """A rich console writing to a buffer, for asserting on operator output."""
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, force_terminal=False, color_system=None)
    return console, buffer


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Create initial commit on main branch
    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def scenario_repo(git_repo):
    """Repository with one branch per merge status.

    feat/a  MERGED    fast-forwarded into main
    feat/b  ANCESTOR  points at a commit main reached through another branch
    feat/c  REBASED   all three commits cherry-picked onto main
    feat/d  UNMERGED  five commits main has never seen
    feat/e  PARTIAL   one of two commits cherry-picked onto main
    feat/f  EMPTY     adds a file and removes it again
    """
    repo = git_repo

    # feat/a
    repo.git.checkout("-b", "feat/a")
    commit_file(repo, "a.txt")
    repo.git.checkout("main")
    repo.git.merge("--ff-only", "feat/a")

    # feat/b sits on the first of two commits merged in through "side"
    repo.git.checkout("-b", "side")
    first = commit_file(repo, "b1.txt")
    commit_file(repo, "b2.txt")
    repo.git.branch("feat/b", first.hexsha)
    repo.git.checkout("main")
    repo.git.merge("--no-ff", "side", "-m", "Merge side")
    repo.git.branch("-d", "side")

    # feat/c
    repo.git.checkout("-b", "feat/c")
    c_commits = [commit_file(repo, f"c{i}.txt") for i in range(1, 4)]
    repo.git.checkout("main")
    commit_file(repo, "unrelated.txt")
    for commit in c_commits:
        repo.git.cherry_pick(commit.hexsha)

    # feat/d
    repo.git.checkout("-b", "feat/d")
    for i in range(1, 6):
        commit_file(repo, f"d{i}.txt", message=f"Work on d part {i}")
    repo.git.checkout("main")

    # feat/e
    repo.git.checkout("-b", "feat/e")
    e_first = commit_file(repo, "e1.txt")
    commit_file(repo, "e2.txt")
    repo.git.checkout("main")
    repo.git.cherry_pick(e_first.hexsha)

    # feat/f
    repo.git.checkout("-b", "feat/f")
    commit_file(repo, "f.txt")
    remove_file(repo, "f.txt")
    repo.git.checkout("main")

    yield repo


@pytest.fixture
def make_branch():
    """Factory for BranchDetails with sensible defaults."""

    def _make(name, status=MergeStatus.MERGED, **kwargs):
        kwargs.setdefault("age_days", 100)
        return BranchDetails(name=name, status=status, **kwargs)

    return _make


@pytest.fixture
def commit():
    """The commit_file helper, for tests that build their own history."""
    return commit_file
