"""Services for git-branch-janitor."""
