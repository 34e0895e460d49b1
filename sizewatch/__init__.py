"""Sizewatch: build artifact size tracking for pull requests.

Stores per-branch snapshots of build artifact sizes on every push, compares
pull request builds against their base branch, and reports the largest
size regression as a commit status.
"""

__version__ = "0.1.0"
__description__ = "Build artifact size regression checks for GitHub pull requests"

from sizewatch.core.workflow import SizeCheckWorkflow
from sizewatch.cli.app import app as cli

__all__ = ["SizeCheckWorkflow", "cli", "__version__"]
