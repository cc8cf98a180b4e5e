"""License: is the project under an allow-listed license?"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Optional

from repometer.collectors.git import GitCollector
from repometer.collectors.github import GitHubClient
from repometer.collectors.urls import RepositoryRef
from repometer.errors import CloneFailure
from repometer.scoring.base import Metric
from repometer.scoring.factors import FAILED

logger = logging.getLogger(__name__)

ALLOWED_LICENSES = (
    "MIT",
    "BSD-2-Clause",
    "BSD-3-Clause",
    "Apache-2.0",
    "GPL-2.0",
    "LGPL-2.1",
    "MPL-1.1",
)

# Substring match: "GPL-2.0" also covers -only, -or-later and "+"
LICENSE_RE = re.compile("|".join(re.escape(name) for name in ALLOWED_LICENSES), re.IGNORECASE)

# "# License", "## Legal notes", or a setext / RST "License" heading
README_SECTION_RE = re.compile(
    r"^(?:#{1,6}[ \t]*(?:licen[cs]e|legal)\b[^\n]*"
    r"|(?:licen[cs]e|legal)\b[^\n]*\n[=\-~^]{3,}[ \t]*)$",
    re.IGNORECASE | re.MULTILINE,
)


def _root_file(root: Path, *prefixes: str) -> Optional[Path]:
    candidates = sorted(
        p for p in root.iterdir() if p.is_file() and p.name.lower().startswith(prefixes)
    )
    return candidates[0] if candidates else None


def extract_license_text(root: Path) -> Optional[str]:
    """
    Collect license-relevant text from a working copy.

    The README contributes everything from its License/Legal heading to the
    end of the file; the LICENSE file contributes all of its content.

    Returns:
        Concatenated text, or None when neither source has any
    """
    parts = []

    readme = _root_file(root, "readme")
    if readme:
        text = readme.read_text(encoding="utf-8", errors="replace")
        match = README_SECTION_RE.search(text)
        if match:
            parts.append(text[match.start():])

    license_file = _root_file(root, "license", "licence")
    if license_file:
        parts.append(license_file.read_text(encoding="utf-8", errors="replace"))

    text = "\n".join(parts)
    return text if text.strip() else None


def score_license_text(text: Optional[str]) -> float:
    """1 if any allow-listed license is named, 0 if not, -1 without text."""
    if text is None or not text.strip():
        return FAILED
    return 1.0 if LICENSE_RE.search(text) else 0.0


class LicenseMetric(Metric):
    """License compatibility read from README and LICENSE of a shallow clone."""

    name = "License"

    def __init__(
        self,
        client: GitHubClient,
        git: Optional[GitCollector] = None,
        timeout: Optional[float] = 120.0,
    ):
        super().__init__(client, timeout)
        self.git = git or GitCollector()

    async def compute(self, ref: RepositoryRef) -> float:
        async with self.git.shallow_clone(ref.clone_url) as path:
            try:
                text = await asyncio.to_thread(extract_license_text, path)
            except OSError as e:
                raise CloneFailure(f"Could not read license files of {ref.full_name}: {e}") from e

        if text is None:
            logger.info(f"{ref.full_name}: no license text in README or LICENSE")
        return score_license_text(text)
