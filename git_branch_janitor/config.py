"""Configuration handling for git-branch-janitor"""

from dataclasses import dataclass, field, fields
from typing import FrozenSet, Optional, Tuple

from git_branch_janitor.constants import DEFAULT_COMMIT_DISPLAY_LIMIT, PROTECTED_BRANCHES


@dataclass(frozen=True)
class Config:
    """Immutable run configuration, passed explicitly to every service."""

    # Reference branch
    main_branch: str = "main"

    # Execution modes
    dry_run: bool = True  # Preview by default (use --execute to delete)
    force: bool = False
    verbose: bool = False
    debug: bool = False
    fetch: bool = True  # Best-effort `git fetch --prune` before classification

    # Filters
    min_age_days: Optional[int] = None
    include_ancestors: bool = False
    include_diverged: bool = False
    include_unmerged: bool = False
    branches: Tuple[str, ...] = ()  # Explicitly requested branches (empty = all)

    protected_branches: FrozenSet[str] = field(default_factory=lambda: PROTECTED_BRANCHES)
    commit_display_limit: int = DEFAULT_COMMIT_DISPLAY_LIMIT

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_main_branch()
        self._validate_min_age_days()
        self._validate_commit_display_limit()
        self._normalize_collections()

    def _validate_main_branch(self):
        """Validate main_branch is not empty."""
        if not self.main_branch or not self.main_branch.strip():
            raise ValueError("main_branch cannot be empty")
        object.__setattr__(self, "main_branch", self.main_branch.strip())

    def _validate_min_age_days(self):
        """Validate min_age_days is a non-negative integer when set."""
        if self.min_age_days is None:
            return
        if isinstance(self.min_age_days, bool) or not isinstance(self.min_age_days, int):
            raise ValueError(f"min_age_days must be an integer, got {self.min_age_days!r}")
        if self.min_age_days < 0:
            raise ValueError(f"min_age_days must be non-negative, got {self.min_age_days}")

    def _validate_commit_display_limit(self):
        """Validate commit_display_limit is positive."""
        if self.commit_display_limit <= 0:
            raise ValueError(
                f"commit_display_limit must be positive, got {self.commit_display_limit}"
            )

    def _normalize_collections(self):
        """Freeze list arguments so the config stays hashable and immutable."""
        object.__setattr__(self, "branches", tuple(self.branches))
        object.__setattr__(self, "protected_branches", frozenset(self.protected_branches))

    def to_dict(self) -> dict:
        """Convert config to a plain dictionary (debug output)."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
