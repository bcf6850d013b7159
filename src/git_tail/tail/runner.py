"""Runs every truncation step in the proper order."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ..config import TailConfig
from ..git.command import CommandGateway
from ..git.repository import GitRepository
from ..logging_config import get_logger
from ..output import Output
from .engine import BranchOutcome, TruncationEngine
from .identity import CommitIdentityMap
from .window import TimeWindow

logger = get_logger(__name__)


@dataclass
class RunSummary:
    window: TimeWindow
    outcomes: list[BranchOutcome] = field(default_factory=list)
    aliases: list[tuple[str, str]] = field(default_factory=list)
    started: Optional[datetime] = None
    finished: Optional[datetime] = None

    @property
    def truncated_branches(self) -> list[str]:
        return [outcome.branch for outcome in self.outcomes if outcome.truncated]


class Runner:
    """Truncates every requested branch, repacks, then aliases old hashes.

    Args:
        config: Run settings (cutoff, branches, aliasing, output switches)
        repository: Git operations; built from ``config`` when omitted
        output: Operator-facing renderer; built from ``config`` when omitted
    """

    def __init__(
        self,
        config: TailConfig,
        repository: Optional[GitRepository] = None,
        output: Optional[Output] = None,
    ):
        self.config = config
        self.output = output or Output(config.output)
        self.repository = repository or GitRepository(
            CommandGateway(
                repo_path=config.repo_path,
                output=self.output,
                git_binary=config.git_binary,
            )
        )
        self.engine = TruncationEngine(
            self.repository, output=self.output, alias_hashes=config.alias_hashes
        )

    def run(self) -> RunSummary:
        started = datetime.now(timezone.utc)
        window = TimeWindow.from_boundary(self.repository.resolve_boundary(self.config.since))
        summary = RunSummary(window=window, started=started)

        self.output.out(
            f"Truncating history before {window.cutoff:%Y-%m-%d %H:%M:%S %Z}",
            "Checking local branches...",
        )
        branches = list(self.config.branches) or self.repository.list_branches()
        logger.debug("Branches: %s", ", ".join(branches))

        identities = CommitIdentityMap()
        for branch in branches:
            outcome = self.engine.truncate(branch, window)
            summary.outcomes.append(outcome)
            if outcome.identities is not None:
                identities.merge(outcome.identities)

        self.repack()

        if self.config.alias_hashes:
            summary.aliases = self.alias_hashes(branches, window, identities)

        summary.finished = datetime.now(timezone.utc)
        elapsed = (summary.finished - started).total_seconds()
        self.output.out(
            f"Done: {len(summary.truncated_branches)} of {len(branches)} branches truncated "
            f"in {elapsed:.1f}s."
        )
        return summary

    def repack(self) -> None:
        self.output.out("Expiring reflogs and repacking...")
        self.repository.expire_reflogs()
        self.repository.prune_and_repack()

    def alias_hashes(
        self, branches: list[str], window: TimeWindow, identities: CommitIdentityMap
    ) -> list[tuple[str, str]]:
        """Re-walk the kept side of each branch and alias old hashes to new."""
        self.output.out("Aliasing rewritten commits to their old hashes...")
        for branch in branches:
            identities.record_rewritten(self.repository.list_history(window.kept, branch))

        aliases = list(identities.aliases())
        for original, rewritten in aliases:
            self.repository.register_alias(original, rewritten)
        self.output.out(f"{len(aliases)} aliases registered.", category="detail", indent=2)
        logger.debug("%d of %d identities aliased", len(aliases), len(identities))
        return aliases
