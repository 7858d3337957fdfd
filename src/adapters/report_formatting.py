"""Shared report formatting helpers.

Keeping formatting here prevents drift between the console output and any
future reporter, and keeps every helper a pure function of its inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from core.models import AggregatedResult, MatchEntry, MatchGroup


@dataclass(frozen=True)
class SeverityProps:
    style: str
    icon: str
    title: str


SEVERITY_PROPS = {
    "error": SeverityProps(style="red", icon="✖", title="oops, something’s wrong!  😱"),
    "warning": SeverityProps(style="yellow", icon="❗", title="there may be something to improve or fix!"),
    "success": SeverityProps(style="green", icon="✔", title="everything went fine! Good job! 👏"),
}


def severity_props(level: str) -> SeverityProps:
    try:
        return SEVERITY_PROPS[level]
    except KeyError:
        raise ValueError(f"Unsupported log level: {level}") from None


def format_entry(entry: MatchEntry, offending_content: bool) -> str:
    """Return ``file:line``, optionally followed by the offending line."""

    if offending_content and entry.text:
        return f"{entry.location} → {entry.text}"
    return entry.location


def format_group(group: MatchGroup, offending_content: bool) -> List[str]:
    """Return the lines printed for one rule, headed by its message."""

    lines = [f"=== {group.message} ==="]
    lines.extend(format_entry(entry, offending_content) for entry in group.errors)
    return lines


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_short_stats(result: AggregatedResult) -> str:
    """Return a one-line count of blocking and non-blocking matches."""

    return (
        f"{_plural(result.error_count, 'error')} "
        f"({_plural(len(result.blocking_groups), 'rule')}), "
        f"{_plural(result.warning_count, 'warning')} "
        f"({_plural(len(result.warning_groups), 'rule')})"
    )
