"""Fatal error taxonomy for the checks run.

A blocking rule match is not an error: it is a normal outcome carried by the
aggregated result. Everything here aborts the run before or during scanning.
"""

from __future__ import annotations

from typing import Optional, Sequence


class PrecommitChecksError(Exception):
    """Base class for conditions that abort a checks run."""


class ConfigLoadError(PrecommitChecksError):
    """Configuration exists but cannot be parsed or validated."""

    def __init__(self, path: Optional[str], reason: str) -> None:
        self.path = path
        self.reason = reason
        location = path or "configuration"
        super().__init__(f"Invalid configuration in {location}: {reason}")


class InvalidPatternError(PrecommitChecksError):
    """A rule pattern or filter does not compile."""

    def __init__(self, message: str, pattern: Optional[str], reason: str) -> None:
        self.message = message
        self.pattern = pattern
        self.reason = reason
        super().__init__(f'Invalid pattern {pattern!r} for rule "{message}": {reason}')


class SourceUnavailableError(PrecommitChecksError):
    """The version-control command used to read staged content failed."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        self.command = list(command)
        self.reason = reason
        super().__init__(f"Couldn't run '{' '.join(self.command)}': {reason}")
