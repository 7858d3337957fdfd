"""Console reporter adapter.

Renders notices and grouped matches with rich. Terminal capability (colors,
width) is decided once by the rich Console, so the core never queries it.
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from adapters.report_formatting import format_group, format_short_stats, severity_props
from core.config import DisplayConfig
from core.models import AggregatedResult, MatchGroup
from core.rules_engine import Rule


class ConsoleReporter:
    """Reporter adapter that writes to the terminal."""

    def __init__(self, display: DisplayConfig, console: Optional[Console] = None) -> None:
        self._display = display
        self._console = console or Console(stderr=True, highlight=False)

    def notice(self, level: str, title: str, text: str) -> None:
        """Print ``<icon>  <title>: <text>`` colored by level."""

        props = severity_props(level)
        line = Text.assemble((f"{props.icon}  {title}", props.style), f": {text}")
        self._console.print(line)

    def rules_summary(self, rules: Sequence[Rule]) -> None:
        """Print the loaded rules as a table."""

        table = Table(title="Pre-commit rules")
        table.add_column("Message")
        table.add_column("Filter")
        table.add_column("Pattern")
        table.add_column("Blocking", justify="center")
        for rule in rules:
            table.add_row(
                Text(rule.message),
                Text(rule.raw_filter or "-"),
                Text(rule.raw_pattern),
                "yes" if rule.blocking else "no",
            )
        self._console.print(table)

    def _print_groups(self, level: str, groups: Sequence[MatchGroup], title: str) -> bool:
        if not groups:
            return False

        props = severity_props(level)
        self.notice(level, title, props.title)
        for group in groups:
            text = "\n".join(format_group(group, self._display.offending_content))
            self._console.print(Text(text + "\n", style=props.style))
        return True

    def report(self, result: AggregatedResult, title: str) -> None:
        """Print stats, warnings then blocking errors, or a success line."""

        if self._display.short_stats:
            self._console.print(Text(format_short_stats(result)))

        self._print_groups("warning", result.warning_groups, title)
        if not self._print_groups("error", result.blocking_groups, title):
            self.notice("success", title, severity_props("success").title)
