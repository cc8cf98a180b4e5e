"""Repository URL resolution shared by every collector and metric."""

import re
from dataclasses import dataclass

from repometer.errors import InvalidRepositoryUrl

# scheme://[user@]host[:port]/owner/name[.git][/extra] or scp-style user@host:owner/name
_REPO_URL_RE = re.compile(
    r"^(?:(?:git\+)?(?:https?|git|ssh)://)?"
    r"(?:[^@/\s]+@)?"
    r"(?P<host>[^/:\s]+)(?::\d+)?[:/]"
    r"(?P<owner>[^/\s?#]+)/"
    r"(?P<name>[^/\s?#]+?)(?:\.git)?"
    r"(?:[/?#].*)?$"
)


@dataclass(frozen=True)
class RepositoryRef:
    """Identity of a hosted repository."""

    owner: str
    name: str
    host: str = "github.com"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def clone_url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.name}.git"

    def __str__(self) -> str:
        return f"{self.host}/{self.full_name}"


def resolve_repo_url(url: str) -> RepositoryRef:
    """
    Parse owner and name from a repository URL.

    Args:
        url: Repository URL such as https://github.com/owner/name

    Returns:
        RepositoryRef for the URL

    Raises:
        InvalidRepositoryUrl: If the URL does not match host/owner/name
    """
    match = _REPO_URL_RE.match((url or "").strip())
    if not match:
        raise InvalidRepositoryUrl(url)
    return RepositoryRef(
        owner=match.group("owner"),
        name=match.group("name"),
        host=match.group("host").lower(),
    )
