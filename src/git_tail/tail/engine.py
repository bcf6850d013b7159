"""Per-branch truncation.

For one branch the engine lists the commits on either side of the cutoff,
replaces the newest pre-cutoff commit with a parentless copy of itself,
lets ``git filter-branch`` bake that replacement into the branch, and then
deletes every non-branch ref still holding the pre-rewrite tip so the
discarded chain can be garbage collected. Other local branches at that tip
are left for their own turn.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..git.commit import Commit
from ..git.repository import BRANCH_REF_PREFIX, GitRepository
from ..logging_config import get_logger
from ..output import Output
from .identity import CommitIdentityMap
from .window import TimeWindow

logger = get_logger(__name__)


class BranchState(Enum):
    START = "start"
    WINDOWS_COMPUTED = "windows_computed"
    NO_OLD_COMMITS = "no_old_commits"
    INCOMPLETE = "incomplete"
    BASE_IDENTIFIED = "base_identified"
    REWRITTEN = "rewritten"
    REFS_CLEANED = "refs_cleaned"
    DONE = "done"


@dataclass
class BranchOutcome:
    """What happened to one branch."""

    branch: str
    state: BranchState = BranchState.START
    kept: list[Commit] = field(default_factory=list)
    discarded: list[Commit] = field(default_factory=list)
    old_base: Optional[Commit] = None
    new_root: Optional[str] = None
    original_tip: Optional[str] = None
    deleted_refs: list[str] = field(default_factory=list)
    skipped_refs: list[str] = field(default_factory=list)
    identities: Optional[CommitIdentityMap] = None

    @property
    def truncated(self) -> bool:
        return self.state is BranchState.DONE


def drop_boundary_duplicates(kept: list[Commit], discarded: list[Commit]) -> list[Commit]:
    """Discard-side commits that are not also on the kept side.

    A commit dated exactly at the cutoff matches both windows; it belongs to
    the kept side only.
    """
    kept_hashes = {commit.hash for commit in kept}
    return [commit for commit in discarded if commit.hash not in kept_hashes]


def _short(commit_hash: Optional[str]) -> str:
    return (commit_hash or "")[:8]


class TruncationEngine:
    """Runs the truncation workflow on one branch at a time.

    Args:
        repository: Delegated git operations
        output: Operator-facing renderer
        alias_hashes: Snapshot kept-side identities before rewriting
    """

    def __init__(
        self,
        repository: GitRepository,
        output: Optional[Output] = None,
        alias_hashes: bool = False,
    ):
        self.repository = repository
        self.output = output or Output()
        self.alias_hashes = alias_hashes

    def truncate(self, branch: str, window: TimeWindow) -> BranchOutcome:
        outcome = BranchOutcome(branch=branch)
        self.output.out(f"{branch}:", indent=2)

        kept = self.repository.list_history(window.kept, branch)
        discarded = self.repository.list_history(window.discarded, branch)
        outcome.kept = kept
        outcome.discarded = drop_boundary_duplicates(kept, discarded)
        outcome.state = BranchState.WINDOWS_COMPUTED
        logger.debug(
            "%s: %d kept, %d discarded (%d before dedup)",
            branch,
            len(kept),
            len(outcome.discarded),
            len(discarded),
        )

        if self.alias_hashes:
            outcome.identities = CommitIdentityMap()
            outcome.identities.record_original(kept)

        if len(outcome.discarded) <= 1:
            self.output.out(
                "No commits prior to cutoff date. Skipping.", category="detail", indent=4
            )
            outcome.state = BranchState.NO_OLD_COMMITS
            return outcome

        old_base = outcome.discarded[-1]
        outcome.old_base = old_base
        if old_base.hash is None or not old_base.is_complete:
            logger.warning("%s: commit %s is missing metadata", branch, old_base.hash)
            self.output.err(
                f"Commit {_short(old_base.hash)} has incomplete metadata. Skipping.",
                category="detail",
                indent=4,
            )
            outcome.state = BranchState.INCOMPLETE
            return outcome

        tree = self.repository.tree_of(old_base.hash)
        new_root = self.repository.create_commit(
            old_base.message, tree, env=old_base.authorship_env()
        )
        outcome.new_root = new_root
        outcome.state = BranchState.BASE_IDENTIFIED
        self.output.out(
            f"Collapsing {len(outcome.discarded)} commits up to {_short(old_base.hash)} "
            f"into new root {_short(new_root)}",
            category="detail",
            indent=4,
        )

        outcome.original_tip = self.repository.rev_parse(branch)
        self.repository.register_alias(old_base.hash, new_root)
        self.output.out("Rewriting history...", category="detail", indent=4)
        self.repository.bake_aliases(branch)
        self.repository.remove_alias(old_base.hash)
        outcome.state = BranchState.REWRITTEN

        for ref in self.repository.refs_pointing_at(outcome.original_tip):
            if ref.startswith(BRANCH_REF_PREFIX):
                # a sibling branch at the same tip; it is truncated on its own turn
                logger.debug("%s: keeping %s at the old tip", branch, ref)
                outcome.skipped_refs.append(ref)
                continue
            self.repository.delete_ref(ref)
            outcome.deleted_refs.append(ref)
            self.output.out(f"Deleted {ref}", category="detail", indent=4)
        outcome.state = BranchState.REFS_CLEANED

        outcome.state = BranchState.DONE
        return outcome
