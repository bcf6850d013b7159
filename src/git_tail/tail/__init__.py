"""History truncation workflow."""

from .engine import BranchOutcome, BranchState, TruncationEngine
from .identity import CommitIdentityMap
from .runner import Runner, RunSummary
from .window import TimeWindow

__all__ = [
    "BranchOutcome",
    "BranchState",
    "TruncationEngine",
    "CommitIdentityMap",
    "Runner",
    "RunSummary",
    "TimeWindow",
]
