"""Command-line argument parsing for git-branch-janitor."""

import argparse
from git_branch_janitor.__version__ import __version__


def non_negative_int(value: str) -> int:
    """argparse type for day counts."""
    try:
        days = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid number of days: {value!r} (example: --age 30)"
        )
    if days < 0:
        raise argparse.ArgumentTypeError(
            f"number of days must be zero or more, got {days} (example: --age 30)"
        )
    return days


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-branch-janitor",
        description="Classify local Git branches by how they were merged and delete the safe ones",
        epilog="Runs in preview mode unless --execute is given. "
        "Status meanings: MERGED (merged), ANCESTOR (reachable but never merged), "
        "DIVERGED, REBASED, PARTIAL, EMPTY, UNMERGED.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-branch-janitor {__version__}")
    parser.add_argument(
        "-m",
        "--main",
        "--main-branch",
        dest="main_branch",
        default="main",
        help="Reference branch to compare against (default: main)",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-e", "--execute", action="store_true", help="Actually delete branches (default is preview)"
    )
    mode.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview mode - show what would be deleted without deleting (default)",
    )

    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Skip the bulk confirmation and force delete when a safe delete fails. "
        "Protected and unmerged branches are still confirmed by name",
    )
    parser.add_argument(
        "-a",
        "--age",
        type=non_negative_int,
        metavar="DAYS",
        dest="min_age_days",
        help="Only delete branches whose last commit is at least DAYS days old",
    )
    parser.add_argument(
        "--merged-only",
        action="store_true",
        help="Only delete MERGED branches (the default)",
    )
    parser.add_argument(
        "--include-diverged",
        action="store_true",
        help="Also delete DIVERGED, REBASED and PARTIAL branches",
    )
    parser.add_argument(
        "--include-ancestors",
        action="store_true",
        help="Also delete ANCESTOR branches (reachable from main but never merged)",
    )
    parser.add_argument(
        "--include-unmerged",
        action="store_true",
        help="Also delete UNMERGED and EMPTY branches (each needs its name typed)",
    )
    parser.add_argument(
        "-b",
        "--branch",
        action="append",
        dest="branches",
        default=[],
        metavar="NAME",
        help="Only consider this branch (repeatable). Required to delete a protected branch",
    )
    parser.add_argument(
        "--list-protected", action="store_true", help="List protected branch names and exit"
    )
    parser.add_argument(
        "--no-fetch", action="store_true", help="Skip `git fetch --prune` before analysis"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
