"""Kept-side and discard-side history windows around a cutoff."""

import re
from dataclasses import dataclass
from datetime import datetime, timezone

_EPOCH_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class TimeWindow:
    """Both window expressions derived from one resolved boundary.

    ``git rev-parse --since=<expr>`` prints ``--max-age=<epoch>``, which
    selects commits at or after the cutoff. Flipping ``max`` to ``min``
    selects commits at or before it, so a commit dated exactly at the
    cutoff shows up in both.
    """

    boundary: str
    kept: str
    discarded: str
    timestamp: int

    @classmethod
    def from_boundary(cls, boundary: str) -> "TimeWindow":
        boundary = boundary.strip()
        match = _EPOCH_RE.search(boundary)
        if "max" not in boundary or match is None:
            raise ValueError(f"Unrecognized boundary descriptor: {boundary!r}")
        return cls(
            boundary=boundary,
            kept=boundary,
            discarded=boundary.replace("max", "min"),
            timestamp=int(match.group()),
        )

    @property
    def cutoff(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)
