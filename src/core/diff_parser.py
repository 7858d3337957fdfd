"""Staged diff parsing (core domain).

Turns the zero-context unified diff of one file into the lines it adds, each
paired with the line number it will have once committed.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

# Matches the hunk header, e.g. "@@ -37 +39 @@" or "@@ -118,0 +120,49 @@ func".
# Only the new-file start is captured: with --unified=0 every added line of the
# hunk follows it in order.
HUNK_HEADER_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,\d+)? @@")


def parse_hunk_header(line: str) -> Optional[int]:
    """Return the new-file start line of a hunk header, or None if malformed."""

    match = HUNK_HEADER_RE.match(line)
    if not match:
        return None
    return int(match.group(1))


def parse_staged_diff(diff_text: str) -> List[Tuple[int, str]]:
    """Return ``(line_number, text)`` for every added line of a file diff.

    Header detection is purely syntactic: a raw line starting with ``@@``
    resets the counter, while an added line whose content starts with ``@@``
    still starts with ``+`` and is kept as content. Added lines that follow a
    malformed header, or come before any header, have no known position and
    are skipped until the next valid header. The ``+++ b/path`` file header
    only appears before the first hunk of a file, so inside a hunk a raw
    ``+++i;`` is the added line ``++i;``.
    """

    added: List[Tuple[int, str]] = []
    if not diff_text:
        return added

    line_number: Optional[int] = None
    for raw in diff_text.split("\n"):
        line = raw[:-1] if raw.endswith("\r") else raw
        if line.startswith("diff "):
            line_number = None
            continue
        if line.startswith("@@"):
            line_number = parse_hunk_header(line)
            continue
        if not line.startswith("+") or line_number is None:
            continue
        added.append((line_number, line[1:]))
        line_number += 1

    return added
