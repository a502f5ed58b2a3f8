"""Core immutable data structures used throughout mboxclass."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path

STDIN_MARKER = "-"
STDIN_LABEL = "<stdin>"


@dataclass(frozen=True)
class MailSource:
    """A mail collection source: a file on disk or standard input."""

    path: Path | None

    @property
    def is_stdin(self) -> bool:
        return self.path is None

    @property
    def label(self) -> str:
        if self.path is None:
            return STDIN_LABEL
        return str(self.path)


@dataclass(frozen=True)
class ScoreRecord:
    """Relative probability computed for one candidate collection."""

    label: str
    relative: Fraction
    probability: Fraction


@dataclass(frozen=True)
class Classification:
    """Outcome of scoring a target email against every collection."""

    label: str
    scores: tuple[ScoreRecord, ...]
    total_emails: int
    class_count: int
    vocabulary_size: int

    @property
    def winner(self) -> ScoreRecord:
        for record in self.scores:
            if record.label == self.label:
                return record
        raise LookupError(f"No score recorded for {self.label!r}")


__all__ = [
    "STDIN_MARKER",
    "STDIN_LABEL",
    "MailSource",
    "ScoreRecord",
    "Classification",
]
