"""Core checks pipeline.

This module is VCS-agnostic. It only relies on ports for staged content and
reporting, and enforces a strict two-phase order:
1) Short-circuit when no rule is configured or nothing is staged
2) Gather every staged diff concurrently, failing fast on any fetch error
3) Parse added lines and match all rules
4) Hand grouped results to the reporter and derive the exit code
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List

from core.diff_parser import parse_staged_diff
from core.models import RunOutcome, StagedFile
from core.ports import Reporter, StagedFileSource
from core.rules_engine import EXIT_OK, Rule, RuleMatches, aggregate_matches, exit_code_for

LOGGER = logging.getLogger(__name__)

HOOK_TITLE = "contents checks"

NO_RULES_TEXT = "no rule is configured, there is nothing to check."
NO_FILES_TEXT = "there is no file to check. Did you forget to `git add…`?"


class ChecksProcessor:
    """Orchestrates gathering, matching and reporting for one commit."""

    def __init__(
        self,
        rules: Iterable[Rule],
        source: StagedFileSource,
        reporter: Reporter,
        title: str = HOOK_TITLE,
        show_rules_summary: bool = False,
    ) -> None:
        self._rules = list(rules)
        self._source = source
        self._reporter = reporter
        self._title = title
        self._show_rules_summary = show_rules_summary

    async def gather(self) -> List[StagedFile]:
        """Fetch and parse every staged file before any rule runs."""

        paths = await self._source.list_staged_files()
        if not paths:
            return []

        # gather() re-raises the first failure, so a broken fetch aborts the
        # run instead of producing a partial scan.
        diffs = await asyncio.gather(*(self._source.fetch_diff(path) for path in paths))
        staged = [
            StagedFile(path=path, lines=tuple(parse_staged_diff(diff)))
            for path, diff in zip(paths, diffs)
        ]
        LOGGER.debug(
            "Gathered %s staged files (%s added lines)",
            len(staged),
            sum(len(item.lines) for item in staged),
        )
        return staged

    async def run(self) -> RunOutcome:
        """Run the checks and return the process outcome."""

        if not self._rules:
            self._reporter.notice("warning", self._title, NO_RULES_TEXT)
            return RunOutcome(exit_code=EXIT_OK, skipped_reason=NO_RULES_TEXT)

        if self._show_rules_summary:
            self._reporter.rules_summary(self._rules)

        staged_files = await self.gather()
        if not staged_files:
            self._reporter.notice("warning", self._title, NO_FILES_TEXT)
            return RunOutcome(exit_code=EXIT_OK, skipped_reason=NO_FILES_TEXT)

        LOGGER.debug("Processing files…")
        result = aggregate_matches(self._rules, staged_files, on_rule=_trace_rule)
        LOGGER.debug("All files were parsed!")

        self._reporter.report(result, self._title)
        return RunOutcome(exit_code=exit_code_for(result), result=result)

    def run_sync(self) -> RunOutcome:
        return asyncio.run(self.run())


def _trace_rule(rule: Rule, matches: RuleMatches) -> None:
    LOGGER.debug(
        'Rule "%s": %s errors, %s warnings',
        rule.message,
        len(matches.errors),
        len(matches.warnings),
    )
