"""Custom exceptions for git-branch-janitor"""

from typing import Optional


class GitBranchJanitorError(Exception):
    """Base exception for all git-branch-janitor errors."""
    pass


class GitOperationError(GitBranchJanitorError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class EnvironmentValidationError(GitBranchJanitorError):
    """Raised when the working directory cannot be cleaned up at all."""
    pass


class NotAGitRepositoryError(EnvironmentValidationError):
    """Exception raised when the path is not inside a Git repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not a git repository: {path}")


class MainBranchNotFoundError(EnvironmentValidationError):
    """Exception raised when the reference branch does not exist locally."""

    def __init__(self, branch: str, available: Optional[list] = None):
        self.branch = branch
        self.available = available or []
        super().__init__(f"Main branch '{branch}' does not exist")


class UserQuit(GitBranchJanitorError):
    """Raised when the operator asks to leave the program from a prompt."""

    def __init__(self, message: str = "Exiting program as requested"):
        super().__init__(message)
