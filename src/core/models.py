"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to git or console-specific types. All of them are run-scoped values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class StagedFile:
    """One staged path with only its newly added lines."""

    path: str
    lines: Tuple[Tuple[int, str], ...]


@dataclass(frozen=True)
class MatchEntry:
    """A single rule firing on a single added line."""

    file_name: str
    line_number: int
    text: str

    @property
    def location(self) -> str:
        return f"{self.file_name}:{self.line_number}"

    def __str__(self) -> str:
        return self.location


@dataclass(frozen=True)
class MatchGroup:
    """All entries produced by one rule, keyed by the rule message."""

    message: str
    errors: Tuple[MatchEntry, ...]


@dataclass(frozen=True)
class AggregatedResult:
    """Grouped matches for reporting, in rule declaration order."""

    blocking_groups: Tuple[MatchGroup, ...] = ()
    warning_groups: Tuple[MatchGroup, ...] = ()

    @property
    def has_blocking(self) -> bool:
        return len(self.blocking_groups) > 0

    @property
    def error_count(self) -> int:
        return sum(len(group.errors) for group in self.blocking_groups)

    @property
    def warning_count(self) -> int:
        return sum(len(group.errors) for group in self.warning_groups)


@dataclass(frozen=True)
class RunOutcome:
    """What a run produced: the exit code plus whatever was reported."""

    exit_code: int
    result: Optional[AggregatedResult] = None
    skipped_reason: Optional[str] = None
