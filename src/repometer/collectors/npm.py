"""npm registry collector - maps package pages to source repositories."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from repometer.collectors.base import BaseCollector

logger = logging.getLogger(__name__)

_NPM_PACKAGE_URL_RE = re.compile(
    r"^https?://(?:www\.)?npmjs\.(?:com|org)/package/(?P<name>(?:@[^/\s]+/)?[^/\s?#]+)"
)


@dataclass
class NpmData:
    """Data collected from npm registry."""

    name: str = ""
    version: str = ""
    repository_url: str = ""


class NpmCollector(BaseCollector):
    """Collector for npm registry data."""

    REGISTRY_URL = "https://registry.npmjs.org"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        """Initialize npm collector."""
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=30.0)

    def is_available(self) -> bool:
        """npm collector is always available."""
        return True

    @staticmethod
    def package_name_from_url(url: str) -> Optional[str]:
        """Return the package name for an npmjs.com package URL, else None."""
        match = _NPM_PACKAGE_URL_RE.match((url or "").strip())
        return match.group("name") if match else None

    @staticmethod
    def clean_repo_url(url: str) -> str:
        """Normalize registry repository URLs (git+https, git://, ssh) to https."""
        url = url.strip()
        if url.startswith("github:"):
            url = f"https://github.com/{url[len('github:'):]}"
        elif re.match(r"^[\w.-]+/[\w.-]+$", url):
            # npm shorthand "owner/repo" means GitHub
            url = f"https://github.com/{url}"
        url = url.replace("git+", "").replace("git://", "https://")
        if url.startswith("ssh://git@"):
            url = url.replace("ssh://git@", "https://")
        url = url.split("#")[0].rstrip("/")
        if url.endswith(".git"):
            url = url[: -len(".git")]
        return url

    async def get_package_info(self, package_name: str) -> Optional[dict]:
        """Get package metadata from npm registry."""
        try:
            response = await self.client.get(f"{self.REGISTRY_URL}/{package_name}")
            if response.status_code == 200:
                data = response.json()
                if isinstance(data, dict):
                    return data
                logger.warning(f"npm registry returned a non-object payload for {package_name}")
            else:
                logger.warning(f"npm registry returned {response.status_code} for {package_name}")
        except httpx.HTTPError as e:
            logger.error(f"npm registry error: {e}")
        except ValueError as e:
            logger.error(f"Malformed JSON from npm registry for {package_name}: {e}")
        return None

    async def collect(self, package_name: str) -> NpmData:
        """
        Collect npm package data.

        Args:
            package_name: npm package name

        Returns:
            NpmData with package information
        """
        data = NpmData(name=package_name)

        pkg_info = await self.get_package_info(package_name)
        if pkg_info:
            data.version = pkg_info.get("dist-tags", {}).get("latest", "")

            repo = pkg_info.get("repository", {})
            if isinstance(repo, dict):
                data.repository_url = repo.get("url", "") or ""
            elif isinstance(repo, str):
                data.repository_url = repo

            if data.repository_url:
                data.repository_url = self.clean_repo_url(data.repository_url)

        return data

    async def close(self):
        """Close the HTTP client."""
        if self._owns_client:
            await self.client.aclose()
