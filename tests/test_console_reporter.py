from __future__ import annotations

import io

import pytest
from rich.console import Console

from adapters.console_reporter import ConsoleReporter
from adapters.report_formatting import (
    SEVERITY_PROPS,
    format_entry,
    format_group,
    format_short_stats,
    severity_props,
)
from core.config import DisplayConfig, RuleSpec
from core.models import AggregatedResult, MatchEntry, MatchGroup
from core.rules_engine import build_rules

ENTRY = MatchEntry(file_name="./problem.js", line_number=2, text="what a beautiful FIXME here!")
RESULT = AggregatedResult(
    blocking_groups=(MatchGroup("Conflict markers", (MatchEntry("a.txt", 1, "<<<<<<< HEAD"),)),),
    warning_groups=(MatchGroup("Unfinished", (ENTRY,)),),
)


def _reporter(**display) -> tuple[ConsoleReporter, io.StringIO]:
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, color_system=None, width=200)
    return ConsoleReporter(DisplayConfig(**display), console=console), buffer


def test_format_entry_with_and_without_content() -> None:
    assert format_entry(ENTRY, offending_content=False) == "./problem.js:2"
    assert format_entry(ENTRY, offending_content=True) == "./problem.js:2 → what a beautiful FIXME here!"


def test_format_group_is_headed_by_message() -> None:
    lines = format_group(MatchGroup("Unfinished", (ENTRY,)), offending_content=False)
    assert lines == ["=== Unfinished ===", "./problem.js:2"]


def test_format_short_stats() -> None:
    assert format_short_stats(RESULT) == "1 error (1 rule), 1 warning (1 rule)"
    assert format_short_stats(AggregatedResult()) == "0 errors (0 rules), 0 warnings (0 rules)"


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValueError):
        severity_props("debug")


def test_notice_prints_icon_title_and_text() -> None:
    reporter, buffer = _reporter()
    for level, props in SEVERITY_PROPS.items():
        reporter.notice(level, "contents checks", f"{level} message")
        assert f"{props.icon}  contents checks: {level} message" in buffer.getvalue()


def test_report_prints_warnings_and_errors() -> None:
    reporter, buffer = _reporter(offending_content=True)

    reporter.report(RESULT, "contents checks")

    output = buffer.getvalue()
    assert "1 error (1 rule)" in output
    assert "=== Unfinished ===" in output
    assert "./problem.js:2 → what a beautiful FIXME here!" in output
    assert "=== Conflict markers ===" in output
    assert SEVERITY_PROPS["error"].title in output
    assert SEVERITY_PROPS["success"].title not in output
    assert output.index("Unfinished") < output.index("Conflict markers")


def test_report_without_blocking_groups_ends_with_success() -> None:
    reporter, buffer = _reporter(short_stats=False)

    reporter.report(AggregatedResult(warning_groups=RESULT.warning_groups), "contents checks")

    output = buffer.getvalue()
    assert "error (" not in output
    assert SEVERITY_PROPS["warning"].title in output
    assert SEVERITY_PROPS["success"].title in output


def test_messages_are_not_treated_as_markup() -> None:
    reporter, buffer = _reporter()
    group = MatchGroup("[bold]literal[/bold]", (ENTRY,))

    reporter.report(AggregatedResult(blocking_groups=(group,)), "contents checks")

    assert "=== [bold]literal[/bold] ===" in buffer.getvalue()


def test_rules_summary_lists_every_rule() -> None:
    reporter, buffer = _reporter()
    rules = build_rules(
        [
            RuleSpec(message="Leftover log", pattern=r"console\.log", filter=r"\.js$"),
            RuleSpec(message="Unfinished", pattern="FIXME", blocking=False),
        ]
    )

    reporter.rules_summary(rules)

    output = buffer.getvalue()
    assert "Leftover log" in output
    assert r"console\.log" in output
    assert "Unfinished" in output
