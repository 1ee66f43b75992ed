"""Command-line entry point for git-branch-janitor"""

import os
import sys

from rich.console import Console

from git_branch_janitor.cli.args import parse_args
from git_branch_janitor.config import Config
from git_branch_janitor.core import BranchJanitor
from git_branch_janitor.exceptions import (
    EnvironmentValidationError,
    MainBranchNotFoundError,
    UserQuit,
)
from git_branch_janitor.logging_config import setup_logging
from git_branch_janitor.services.display_service import DisplayService

console = Console()


def main(argv=None, repo_path=None, input_func=None):
    """Main entry point for the application. Returns the exit code."""
    # argparse exits with status 2 on invalid arguments
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        config = Config(
            main_branch=parsed_args.main_branch,
            dry_run=not parsed_args.execute,
            force=parsed_args.force,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
            fetch=not parsed_args.no_fetch,
            min_age_days=parsed_args.min_age_days,
            include_ancestors=parsed_args.include_ancestors,
            include_diverged=parsed_args.include_diverged,
            include_unmerged=parsed_args.include_unmerged,
            branches=tuple(parsed_args.branches),
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 2

    if parsed_args.list_protected:
        DisplayService(console=console).display_protected_list(config.protected_branches)
        return 0

    if parsed_args.debug:
        console.print("[yellow]Debug mode enabled[/yellow]")
        console.print("[yellow]Configuration:[/yellow]")
        for key, value in config.to_dict().items():
            console.print(f"  {key}: {value}")

    janitor = None
    try:
        janitor = BranchJanitor(
            repo_path or os.getcwd(), config, console=console, input_func=input_func
        )
        if config.dry_run:
            console.print("[dim]Preview mode - no branches will be deleted (use --execute)[/dim]")
        janitor.run()
        return 0
    except UserQuit as e:
        console.print(f"\n[yellow]{e}[/yellow]")
        return 0
    except KeyboardInterrupt:
        if janitor is not None and janitor.git_ops.in_git_operation:
            console.print("\n[yellow]Interrupted during a git operation[/yellow]")
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except EnvironmentValidationError as e:
        console.print(f"[red]Error: {e}[/red]")
        if isinstance(e, MainBranchNotFoundError) and e.available:
            console.print(f"[yellow]Available branches: {', '.join(e.available)}[/yellow]")
            console.print("[yellow]Use --main to choose the reference branch[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
