"""
git-tail - truncate old git history

Collapses every commit older than a cutoff date into one synthetic root
commit that keeps the pre-cutoff tree, message and authorship, rewrites the
remaining history on top of it, and can alias old commit hashes to their
rewritten counterparts.
"""

__version__ = "0.2.0"

from .config import TailConfig, load_config
from .git.commit import Commit, Signature
from .tail.runner import Runner, RunSummary

__all__ = [
    "Runner",  # Main entry point
    "RunSummary",
    "TailConfig",
    "load_config",
    "Commit",
    "Signature",
]
