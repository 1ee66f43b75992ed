"""
git-branch-janitor - Classify local Git branches and clean them up safely
"""

from .__version__ import __version__
from .core import BranchJanitor
from .cli.main import main

__all__ = ["BranchJanitor", "main", "__version__"]
