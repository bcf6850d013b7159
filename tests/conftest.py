"""Shared test fixtures for git-tail tests."""

import hashlib
import io
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional

import pytest
from rich.console import Console

from git_tail.git.commit import Commit, Signature
from git_tail.output import Output, OutputConfig


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


# ---------------------------------------------------------------------------
# Commit values
# ---------------------------------------------------------------------------


def fake_hash(seed: str) -> str:
    return hashlib.sha1(seed.encode()).hexdigest()


def make_commit(
    index: int,
    timestamp: int,
    parent: Optional[str] = None,
    message: Optional[str] = None,
    hash_seed: str = "",
) -> Commit:
    """Commit number ``index``; ``hash_seed`` varies the hash only."""
    signature = Signature("Dev", "dev@example.com", f"{timestamp} +0000")
    return Commit(
        hash=fake_hash(f"commit-{index}{hash_seed}"),
        tree=fake_hash(f"tree-{index}"),
        parent=parent,
        author=signature,
        committer=signature,
        message=message if message is not None else f"commit {index}",
    )


@pytest.fixture
def commit_factory():
    return make_commit


# ---------------------------------------------------------------------------
# Output capture
# ---------------------------------------------------------------------------


def _capture_console() -> Console:
    return Console(file=io.StringIO(), color_system=None, width=200, highlight=False)


def captured(console: Console) -> str:
    return console.file.getvalue()


@pytest.fixture
def output():
    """Quiet Output writing into string buffers."""
    return Output(OutputConfig(), stdout=_capture_console(), stderr=_capture_console())


@pytest.fixture
def verbose_output():
    return Output(
        OutputConfig(verbose=True), stdout=_capture_console(), stderr=_capture_console()
    )


# ---------------------------------------------------------------------------
# Fake repository
# ---------------------------------------------------------------------------

MUTATING_OPERATIONS = {
    "create_commit",
    "register_alias",
    "remove_alias",
    "bake_aliases",
    "delete_ref",
    "expire_reflogs",
    "prune_and_repack",
}


class FakeRepository:
    """Stands in for GitRepository and records every call in order.

    ``histories`` maps (window, branch) to the commits git log would list;
    ``on_bake`` may replace them to simulate a rewrite.
    """

    def __init__(self, boundary: str = "--max-age=1600000000"):
        self.boundary = boundary
        self.calls: list[tuple] = []
        self.histories: dict[tuple[str, str], list[Commit]] = {}
        self.branches: list[str] = ["main"]
        self.tips: dict[str, str] = {}
        self.refs: dict[str, list[str]] = {}
        self.on_bake = None
        self._created = 0

    @property
    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]

    @property
    def mutations(self) -> list[tuple]:
        return [call for call in self.calls if call[0] in MUTATING_OPERATIONS]

    def resolve_boundary(self, since):
        self.calls.append(("resolve_boundary", since))
        return self.boundary

    def list_history(self, window, branch):
        self.calls.append(("list_history", window, branch))
        return list(self.histories.get((window, branch), []))

    def rev_parse(self, ref):
        self.calls.append(("rev_parse", ref))
        return self.tips.get(ref, fake_hash(f"tip-{ref}"))

    def tree_of(self, commit_hash):
        self.calls.append(("tree_of", commit_hash))
        return fake_hash(f"tree-of-{commit_hash}")

    def create_commit(self, message, tree, env=None):
        self._created += 1
        self.calls.append(("create_commit", message, tree, dict(env or {})))
        return fake_hash(f"root-{self._created}")

    def register_alias(self, old_hash, new_hash):
        self.calls.append(("register_alias", old_hash, new_hash))

    def remove_alias(self, old_hash):
        self.calls.append(("remove_alias", old_hash))

    def bake_aliases(self, branch):
        self.calls.append(("bake_aliases", branch))
        if self.on_bake is not None:
            self.on_bake(branch)

    def delete_ref(self, ref):
        self.calls.append(("delete_ref", ref))

    def refs_pointing_at(self, commit_hash):
        self.calls.append(("refs_pointing_at", commit_hash))
        return list(self.refs.get(commit_hash, []))

    def list_branches(self):
        self.calls.append(("list_branches",))
        return list(self.branches)

    def expire_reflogs(self):
        self.calls.append(("expire_reflogs",))

    def prune_and_repack(self):
        self.calls.append(("prune_and_repack",))


@pytest.fixture
def fake_repo():
    return FakeRepository()


# ---------------------------------------------------------------------------
# Scratch git repositories
# ---------------------------------------------------------------------------


class ScratchRepo:
    """A throwaway git repository with deterministic commit dates."""

    def __init__(self, path: Path):
        self.path = path
        self.env = dict(os.environ)
        self.env.update(
            {
                "GIT_CONFIG_NOSYSTEM": "1",
                "GIT_CONFIG_GLOBAL": str(path.parent / "gitconfig"),
                "HOME": str(path.parent),
                "GIT_AUTHOR_NAME": "Test",
                "GIT_AUTHOR_EMAIL": "test@test.com",
                "GIT_COMMITTER_NAME": "Test",
                "GIT_COMMITTER_EMAIL": "test@test.com",
            }
        )
        path.mkdir(parents=True)
        self.git("init", "-q")
        self.git("symbolic-ref", "HEAD", "refs/heads/main")
        self.git("config", "user.name", "Test")
        self.git("config", "user.email", "test@test.com")
        self.git("config", "commit.gpgsign", "false")

    def git(self, *args: str, env: Optional[dict] = None) -> str:
        run_env = dict(self.env)
        if env:
            run_env.update(env)
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            env=run_env,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def commit(self, index: int, timestamp: int, message: Optional[str] = None) -> str:
        """Add file<index>.txt and commit it at ``timestamp``."""
        (self.path / f"file{index}.txt").write_text(f"content {index}\n")
        self.git("add", ".")
        date = f"{timestamp} +0000"
        self.git(
            "commit",
            "-q",
            "-m",
            message or f"commit {index}",
            env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
        )
        return self.git("rev-parse", "HEAD")

    def log(self, ref: str = "main", fmt: str = "%H") -> list[str]:
        out = self.git("log", f"--format={fmt}", ref, "--")
        return out.splitlines() if out else []


@pytest.fixture
def scratch_repo(tmp_path):
    if shutil.which("git") is None:
        pytest.skip("git not found")
    return ScratchRepo(tmp_path / "repo")
