"""Git adapter for staged content.

Implements the core StagedFileSource port on top of `git diff --staged`.
Only added, copied or modified files are considered, and only their added
lines are requested (zero context).
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Iterable, List, Optional, Sequence

from core.errors import SourceUnavailableError

LOGGER = logging.getLogger(__name__)

GIT_DIFF_BASE = ["git", "diff", "--staged", "--no-color", "--diff-filter=ACM"]
# Hook scripts themselves are never scanned.
HOOK_SUFFIX = "pre-commit"
# Upper bound on concurrent git processes, each one holds three pipes.
MAX_CONCURRENT_GIT = 16


def top_pathspec(path: str) -> str:
    """Pathspec for a repository-root-relative name, whatever the cwd.

    `literal` keeps names containing `*`, `?` or `[` from acting as globs.
    """

    return f":(top,literal){path}"


class GitStagedFileSource:
    """Thin `git` subprocess wrapper that satisfies the StagedFileSource port."""

    def __init__(
        self,
        cwd: Optional[str] = None,
        excluded_paths: Iterable[str] = (),
        max_concurrency: int = MAX_CONCURRENT_GIT,
    ) -> None:
        self._cwd = cwd
        self._excluded = {os.path.normpath(path) for path in excluded_paths if path}
        self._max_concurrency = max_concurrency
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._semaphore_loop: Optional[asyncio.AbstractEventLoop] = None

    def _limiter(self) -> asyncio.Semaphore:
        # One semaphore per event loop: each asyncio.run() gets a fresh one.
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self._max_concurrency)
            self._semaphore_loop = loop
        return self._semaphore

    async def _git(self, args: Sequence[str]) -> bytes:
        async with self._limiter():
            try:
                process = await asyncio.create_subprocess_exec(
                    *args,
                    cwd=self._cwd,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                raise SourceUnavailableError(args, str(exc)) from exc

            stdout, stderr = await process.communicate()

        if process.returncode != 0:
            reason = stderr.decode("utf-8", errors="replace").strip()
            raise SourceUnavailableError(args, reason or f"exit status {process.returncode}")
        return stdout

    def _is_excluded(self, path: str) -> bool:
        if path.endswith(HOOK_SUFFIX):
            return True
        return os.path.normpath(path) in self._excluded

    async def list_staged_files(self) -> List[str]:
        """Return staged file names, skipping hooks and the checks config.

        Names are NUL-separated and unquoted, relative to the repository root.
        """

        output = await self._git([*GIT_DIFF_BASE, "--name-only", "-z"])
        # surrogateescape round-trips non-UTF-8 names back into the argv.
        names = output.decode("utf-8", errors="surrogateescape").split("\0")
        paths = [name for name in names if name]
        kept = [path for path in paths if not self._is_excluded(path)]
        LOGGER.debug("Staged files: %s (excluded %s)", len(kept), len(paths) - len(kept))
        return kept

    async def fetch_diff(self, path: str) -> str:
        """Return the zero-context staged diff of one file."""

        output = await self._git([*GIT_DIFF_BASE, "--unified=0", "--", top_pathspec(path)])
        return output.decode("utf-8", errors="replace")
