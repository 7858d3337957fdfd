"""Rule compilation and matching logic (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from core.config import RuleSpec
from core.errors import InvalidPatternError
from core.models import AggregatedResult, MatchEntry, MatchGroup, StagedFile

EXIT_OK = 0
EXIT_MATCHES_FOUND = 1

# "/body/flags" with a greedy body, so "/a/b/i" compiles "a/b" with IGNORECASE.
DELIMITED_RE = re.compile(r"^/(.*)/([A-Za-z]*)$", re.DOTALL)

FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}
# Flags with no meaning when searching one line at a time.
IGNORED_FLAGS = frozenset("gud")


@dataclass(frozen=True)
class Rule:
    """Compiled rule used by the matcher."""

    message: str
    pattern: re.Pattern
    filter: Optional[re.Pattern]
    blocking: bool
    raw_pattern: str
    raw_filter: Optional[str] = None


@dataclass(frozen=True)
class RuleMatches:
    """Matcher output for one rule; only one side is ever populated."""

    errors: Tuple[MatchEntry, ...] = ()
    warnings: Tuple[MatchEntry, ...] = ()


def _flags_from_letters(letters: str, message: str, raw: str) -> int:
    flags = 0
    for letter in letters:
        if letter in IGNORED_FLAGS:
            continue
        if letter not in FLAG_MAP:
            raise InvalidPatternError(message, raw, f"unsupported flag '{letter}'")
        flags |= FLAG_MAP[letter]
    return flags


def compile_pattern(raw: Optional[str], *, message: str) -> Optional[re.Pattern]:
    """Compile a rule pattern written as ``/body/flags`` or as a bare body.

    Returns None for an absent pattern, which callers treat as "always pass"
    for filters.
    """

    if not raw:
        return None

    delimited = DELIMITED_RE.match(raw)
    if delimited:
        body, letters = delimited.groups()
        flags = _flags_from_letters(letters, message, raw)
    else:
        body, flags = raw, 0

    try:
        return re.compile(body, flags)
    except re.error as exc:
        raise InvalidPatternError(message, raw, str(exc)) from exc


def build_rules(specs: Iterable[RuleSpec]) -> List[Rule]:
    """Compile every rule up front.

    The first broken pattern aborts the whole load, so no result is ever
    reported while a later rule would have failed.
    """

    compiled: List[Rule] = []
    for spec in specs:
        pattern = compile_pattern(spec.pattern, message=spec.message)
        if pattern is None:
            raise InvalidPatternError(spec.message, spec.pattern, "a pattern is required")
        compiled.append(
            Rule(
                message=spec.message,
                pattern=pattern,
                filter=compile_pattern(spec.filter, message=spec.message),
                blocking=spec.blocking,
                raw_pattern=spec.pattern,
                raw_filter=spec.filter,
            )
        )
    return compiled


def match_rule(rule: Rule, staged_files: Sequence[StagedFile]) -> RuleMatches:
    """Apply one rule to the added lines of every staged file."""

    entries: List[MatchEntry] = []
    for staged in staged_files:
        if rule.filter is not None and not rule.filter.search(staged.path):
            continue
        for line_number, text in staged.lines:
            if rule.pattern.search(text):
                entries.append(MatchEntry(staged.path, line_number, text.lstrip()))

    if rule.blocking:
        return RuleMatches(errors=tuple(entries))
    return RuleMatches(warnings=tuple(entries))


def aggregate_matches(
    rules: Iterable[Rule],
    staged_files: Sequence[StagedFile],
    on_rule: Optional[Callable[[Rule, RuleMatches], None]] = None,
) -> AggregatedResult:
    """Run every rule and group non-empty results by rule message."""

    blocking: List[MatchGroup] = []
    warnings: List[MatchGroup] = []

    for rule in rules:
        matches = match_rule(rule, staged_files)
        if on_rule is not None:
            on_rule(rule, matches)
        if matches.errors:
            blocking.append(MatchGroup(rule.message, matches.errors))
        if matches.warnings:
            warnings.append(MatchGroup(rule.message, matches.warnings))

    return AggregatedResult(blocking_groups=tuple(blocking), warning_groups=tuple(warnings))


def exit_code_for(result: AggregatedResult) -> int:
    """Blocking groups fail the commit; warnings never do."""

    return EXIT_MATCHES_FOUND if result.has_blocking else EXIT_OK
