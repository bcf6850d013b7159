"""The git operations git-tail relies on, as named methods.

Each method is one delegated plumbing call. None of them interpret history
beyond parsing what git prints; the graph rewrite, garbage collection and
replacement lookup are all git's.
"""

from typing import Mapping, Optional

from ..logging_config import get_logger
from .command import CommandGateway
from .commit import Commit, parse_log

logger = get_logger(__name__)

BRANCH_REF_PREFIX = "refs/heads/"
REPLACE_REF_PREFIX = "refs/replace/"

# filter-branch sleeps and prints a warning banner unless this is set
_FILTER_BRANCH_ENV = {"FILTER_BRANCH_SQUELCH_WARNING": "1"}


class GitRepository:
    """Capability surface over one repository."""

    def __init__(self, gateway: CommandGateway):
        self.gateway = gateway

    def resolve_boundary(self, since: str) -> str:
        """Boundary descriptor for a date expression, e.g. ``--max-age=1700000000``."""
        return self.gateway.execute("rev-parse", [f"--since={since}"]).text.strip()

    def list_history(self, window: str, branch: str) -> list[Commit]:
        """Commits of ``branch`` inside ``window``, oldest first."""
        result = self.gateway.execute(
            "log",
            [window, branch, "--"],
            {"format": "raw", "reverse": True},
        )
        commits = parse_log(result.stdout)
        logger.debug("%s %s: %d commits", branch, window, len(commits))
        return commits

    def rev_parse(self, ref: str) -> str:
        return self.gateway.execute("rev-parse", [ref]).text.strip()

    def tree_of(self, commit_hash: str) -> str:
        return self.rev_parse(f"{commit_hash}^{{tree}}")

    def create_commit(
        self, message: str, tree: str, env: Optional[Mapping[str, str]] = None
    ) -> str:
        """Create a parentless commit and return its hash."""
        result = self.gateway.execute("commit-tree", ["-m", message, tree], env=env)
        return result.text.strip()

    def register_alias(self, old_hash: str, new_hash: str) -> None:
        """Make lookups of ``old_hash`` resolve to ``new_hash``.

        Writes the replace ref directly so the original object need not
        exist any more.
        """
        self.gateway.execute("update-ref", [f"{REPLACE_REF_PREFIX}{old_hash}", new_hash])

    def remove_alias(self, old_hash: str) -> None:
        self.delete_ref(f"{REPLACE_REF_PREFIX}{old_hash}")

    def bake_aliases(self, branch: str) -> None:
        """Rewrite ``branch`` so every active replacement becomes real history."""
        self.gateway.execute(
            "filter-branch", ["--", branch], {"force": True}, env=_FILTER_BRANCH_ENV
        )

    def delete_ref(self, ref: str) -> None:
        self.gateway.execute("update-ref", ["-d", ref])

    def refs_pointing_at(self, commit_hash: str) -> list[str]:
        result = self.gateway.execute(
            "for-each-ref", options={"points_at": commit_hash, "format": "%(refname)"}
        )
        return [line.strip() for line in result.text.splitlines() if line.strip()]

    def list_branches(self) -> list[str]:
        """Local branch names, skipping a detached HEAD entry."""
        result = self.gateway.execute("branch", options={"list": True, "color": False})
        branches = []
        for line in result.text.splitlines():
            name = line[2:].strip() if len(line) > 2 else line.strip()
            if not name or name.startswith("("):
                continue
            branches.append(name)
        return branches

    def expire_reflogs(self) -> None:
        self.gateway.execute("reflog expire", ["--expire=now"], {"all": True})

    def prune_and_repack(self) -> None:
        self.gateway.execute("gc", ["--prune=now"], {"aggressive": True})
