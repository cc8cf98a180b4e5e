"""Ramp-up: presence of onboarding material in the file tree."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from repometer.collectors.github import GitHubClient, TreeEntry
from repometer.collectors.urls import RepositoryRef
from repometer.scoring.base import Metric

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Which tree entries a checklist term may match."""

    FILE = "file"
    DIR = "dir"
    ANY = "any"


@dataclass(frozen=True)
class ChecklistTerm:
    """A case-insensitive name fragment that signals onboarding material."""

    term: str
    kind: EntryKind = EntryKind.ANY

    def matches(self, entry: TreeEntry) -> bool:
        if self.kind == EntryKind.FILE and entry.is_dir:
            return False
        if self.kind == EntryKind.DIR and not entry.is_dir:
            return False
        return self.term.lower() in entry.name.lower()


DEFAULT_CHECKLIST = (
    ChecklistTerm("example", EntryKind.ANY),
    ChecklistTerm("test", EntryKind.ANY),
    ChecklistTerm("readme", EntryKind.FILE),
    ChecklistTerm("doc", EntryKind.ANY),
    ChecklistTerm("makefile", EntryKind.FILE),
)


@dataclass
class TreeWalk:
    """State of one bounded walk over a repository tree."""

    checklist: tuple[ChecklistTerm, ...]
    max_depth: int
    max_dirs: int
    found: set[str] = field(default_factory=set)
    dirs_listed: int = 0

    @property
    def complete(self) -> bool:
        return len(self.found) == len(self.checklist)

    def visit(self, entry: TreeEntry) -> None:
        for item in self.checklist:
            if item.term not in self.found and item.matches(entry):
                self.found.add(item.term)


class RampUpMetric(Metric):
    """Fraction of checklist terms found anywhere in the repository tree."""

    name = "RampUp"

    def __init__(
        self,
        client: GitHubClient,
        checklist: tuple[ChecklistTerm, ...] = DEFAULT_CHECKLIST,
        max_depth: int = 4,
        max_dirs: int = 200,
        timeout: Optional[float] = 120.0,
    ):
        super().__init__(client, timeout)
        if not checklist:
            raise ValueError("Ramp-up checklist must not be empty")
        self.checklist = tuple(checklist)
        self.max_depth = max_depth
        self.max_dirs = max_dirs

    def score_found(self, found: set[str]) -> float:
        return len(found) / len(self.checklist)

    async def _walk(self, ref: RepositoryRef, walk: TreeWalk, path: str = "", depth: int = 0) -> None:
        if walk.dirs_listed >= walk.max_dirs:
            logger.debug(f"{ref.full_name}: directory budget of {walk.max_dirs} reached at {path or '/'}")
            return

        entries = await self.client.get_tree_entries(ref, path)
        walk.dirs_listed += 1

        for entry in entries:
            walk.visit(entry)
        if walk.complete:
            return

        if depth >= walk.max_depth:
            return

        for entry in entries:
            if entry.is_dir:
                await self._walk(ref, walk, entry.path, depth + 1)
                if walk.complete:
                    return

    async def compute(self, ref: RepositoryRef) -> float:
        walk = TreeWalk(self.checklist, self.max_depth, self.max_dirs)
        await self._walk(ref, walk)
        logger.debug(f"{ref.full_name}: found {sorted(walk.found)} in {walk.dirs_listed} directories")
        return self.score_found(walk.found)
