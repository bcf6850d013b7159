"""Commit metadata parsed from ``git log --format=raw`` output."""

import re
from dataclasses import dataclass
from typing import Optional

# Lines starting a new record in raw log output
_RECORD_START_RE = re.compile(r"^commit [0-9a-f]{40}\b", re.MULTILINE)

# "Name <email> 1700000000 +0100"; the name may be empty
_SIGNATURE_RE = re.compile(r"^(?P<name>.*?) ?<(?P<email>[^>]*)> (?P<date>\d+(?: [+-]\d{4})?)$")

# git indents every message line by four spaces in log output
_BODY_INDENT = "    "


@dataclass(frozen=True)
class Signature:
    """Author or committer line: who and when."""

    name: str
    email: str
    date: str  # git internal format: "<unix seconds> <+hhmm>"

    @classmethod
    def parse(cls, text: str) -> Optional["Signature"]:
        match = _SIGNATURE_RE.match(text.strip())
        if match is None:
            return None
        return cls(name=match.group("name"), email=match.group("email"), date=match.group("date"))

    @property
    def timestamp(self) -> int:
        return int(self.date.split()[0])

    def as_env(self, role: str) -> dict[str, str]:
        """GIT_<ROLE>_NAME/EMAIL/DATE variables reproducing this signature."""
        prefix = f"GIT_{role.upper()}"
        return {
            f"{prefix}_NAME": self.name,
            f"{prefix}_EMAIL": self.email,
            f"{prefix}_DATE": self.date,
        }


IdentityKey = tuple[Optional[str], ...]


@dataclass(frozen=True)
class Commit:
    """One commit as listed by git log.

    Fields missing from the record are None; only the first parent of a
    merge is kept.
    """

    hash: Optional[str] = None
    tree: Optional[str] = None
    parent: Optional[str] = None
    author: Optional[Signature] = None
    committer: Optional[Signature] = None
    message: str = ""

    @classmethod
    def parse(cls, record: str) -> "Commit":
        """Parse a single raw record into a Commit.

        The header is read line by line on its label prefixes until the
        first blank line; everything after it is the indented message body.
        Unknown labels and continuation lines are ignored.
        """
        fields: dict = {}
        lines = record.split("\n")
        body_start = len(lines)

        for index, line in enumerate(lines):
            if line == "":
                body_start = index + 1
                break
            label, _, value = line.partition(" ")
            if label == "commit" and "hash" not in fields:
                fields["hash"] = value.split()[0] if value.split() else None
            elif label == "tree" and "tree" not in fields:
                fields["tree"] = value.strip() or None
            elif label == "parent" and "parent" not in fields:
                fields["parent"] = value.strip() or None
            elif label == "author" and "author" not in fields:
                fields["author"] = Signature.parse(value)
            elif label == "committer" and "committer" not in fields:
                fields["committer"] = Signature.parse(value)

        body = [line[len(_BODY_INDENT):] if line.startswith(_BODY_INDENT) else line.lstrip(" ")
                for line in lines[body_start:]]
        fields["message"] = "\n".join(body).rstrip()
        return cls(**fields)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_complete(self) -> bool:
        """True when there is enough metadata to replay this commit."""
        return self.tree is not None and self.author is not None and self.committer is not None

    @property
    def identity_key(self) -> IdentityKey:
        """Rewrite-stable identity: tree plus full authorship.

        Two commits with the same content and authorship share this key even
        when a rewrite has changed their hashes.
        """
        author = self.author
        committer = self.committer
        return (
            self.tree,
            author.name if author else None,
            author.email if author else None,
            author.date if author else None,
            committer.name if committer else None,
            committer.email if committer else None,
            committer.date if committer else None,
        )

    def authorship_env(self) -> dict[str, str]:
        """Environment reproducing this commit's author and committer."""
        env: dict[str, str] = {}
        if self.author:
            env.update(self.author.as_env("author"))
        if self.committer:
            env.update(self.committer.as_env("committer"))
        return env


def split_records(log: str) -> list[str]:
    """Split raw log output at each ``commit <hash>`` line."""
    starts = [match.start() for match in _RECORD_START_RE.finditer(log)]
    return [log[start:end] for start, end in zip(starts, starts[1:] + [len(log)])]


def parse_log(log: str) -> list[Commit]:
    """Parse the whole output of ``git log --format=raw``."""
    return [Commit.parse(record) for record in split_records(log)]
