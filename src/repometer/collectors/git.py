"""Git collector - scoped shallow clones for reading current file contents."""

import asyncio
import logging
import shutil
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from git import Repo
from git.exc import GitCommandError

from repometer.collectors.base import BaseCollector
from repometer.errors import CloneFailure

logger = logging.getLogger(__name__)


class GitCollector(BaseCollector):
    """Collector for data that needs a working copy of the repository."""

    def __init__(self, scratch_root: Optional[str] = None):
        """
        Initialize the git collector.

        Args:
            scratch_root: Directory for temporary clones. Defaults to the system temp dir.
        """
        self.scratch_root = scratch_root

    def is_available(self) -> bool:
        """Git collector is always available."""
        return True

    def _clone(self, repo_url: str, dest: Path) -> None:
        # Depth-1 single-branch clone: only the current tree is read.
        Repo.clone_from(repo_url, dest, depth=1, single_branch=True)

    @asynccontextmanager
    async def shallow_clone(self, repo_url: str) -> AsyncIterator[Path]:
        """
        Clone a repository into a fresh scratch directory for the duration of the block.

        The directory name is unique per call, so concurrent clones of the
        same repository do not collide. It is removed on every exit path.

        Args:
            repo_url: Git repository URL

        Yields:
            Path to the working copy

        Raises:
            CloneFailure: If git fails to clone
        """
        if self.scratch_root:
            Path(self.scratch_root).mkdir(parents=True, exist_ok=True)
        workdir = Path(tempfile.mkdtemp(prefix="repometer-", dir=self.scratch_root))
        dest = workdir / "repo"

        try:
            logger.info(f"Cloning {repo_url} (depth 1)")
            clone = asyncio.ensure_future(asyncio.to_thread(self._clone, repo_url, dest))
            try:
                await asyncio.shield(clone)
            except asyncio.CancelledError:
                # The clone thread cannot be interrupted; it must finish before the workdir is removed
                await asyncio.gather(clone, return_exceptions=True)
                raise
            except GitCommandError as e:
                raise CloneFailure(f"Failed to clone {repo_url}: {e}") from e
            yield dest
        finally:
            await asyncio.to_thread(shutil.rmtree, workdir, True)
            logger.info(f"Removed clone directory {workdir}")
