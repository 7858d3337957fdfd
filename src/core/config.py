"""Core configuration dataclasses.

We keep config parsing outside the core (see settings.py), but these
dataclasses define the shape the core expects so adapters and the app layer
can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class RuleSpec:
    """A rule as written by the user, before its patterns are compiled."""

    message: str
    pattern: str
    filter: Optional[str] = None
    blocking: bool = True


@dataclass(frozen=True)
class DisplayConfig:
    """Reporter switches.

    - offending_content: print the matched line next to its location
    - rules_summary: print a table of the loaded rules before scanning
    - short_stats: print error/warning counts after scanning
    - verbose: trace processing through debug logging
    - notifications: accepted for compatibility, desktop notifications are not sent
    """

    offending_content: bool = False
    rules_summary: bool = False
    short_stats: bool = True
    verbose: bool = False
    notifications: bool = False


@dataclass(frozen=True)
class ChecksConfig:
    """Everything loaded from the configuration file."""

    rules: Tuple[RuleSpec, ...] = ()
    display: DisplayConfig = field(default_factory=DisplayConfig)
    source_path: Optional[str] = None
