"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the staged-content source and the
reporter so that the core can be reused with other VCS backends or outputs.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence

from core.models import AggregatedResult
from core.rules_engine import Rule


class StagedFileSource(Protocol):
    """Read-only access to the change set about to be committed."""

    async def list_staged_files(self) -> List[str]:
        ...

    async def fetch_diff(self, path: str) -> str:
        ...


class Reporter(Protocol):
    """Output operations required by the core pipeline.

    Levels are "error", "warning" and "success".
    """

    def notice(self, level: str, title: str, text: str) -> None:
        ...

    def rules_summary(self, rules: Sequence[Rule]) -> None:
        ...

    def report(self, result: AggregatedResult, title: str) -> None:
        ...
