"""Runtime configuration read from the environment."""

import os
from dataclasses import dataclass
from typing import Optional

from repometer.errors import ConfigError

ENV_PREFIX = "REPOMETER_"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Settings shared by the client, the evaluators and the CLI."""

    github_token: str = ""
    log_file: Optional[str] = None
    log_level: int = 0

    # Remote cost ceilings
    max_commit_pages: int = 10
    tree_max_depth: int = 4
    tree_max_dirs: int = 200

    # Per-evaluator deadline in seconds
    evaluator_timeout: float = 120.0

    clone_dir: Optional[str] = None
    max_concurrent: int = 3

    @classmethod
    def from_env(cls, require_token: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            require_token: Raise ConfigError when GITHUB_TOKEN is unset

        Returns:
            Populated Settings
        """
        token = os.getenv("GITHUB_TOKEN", "").strip()
        if require_token and not token:
            raise ConfigError("GITHUB_TOKEN is not set")

        log_level = _int_env("LOG_LEVEL", 0)
        if log_level not in (0, 1, 2):
            raise ConfigError(f"LOG_LEVEL must be 0, 1 or 2, got {log_level}")

        return cls(
            github_token=token,
            log_file=os.getenv("LOG_FILE") or None,
            log_level=log_level,
            max_commit_pages=_int_env(f"{ENV_PREFIX}MAX_COMMIT_PAGES", 10),
            tree_max_depth=_int_env(f"{ENV_PREFIX}TREE_MAX_DEPTH", 4),
            tree_max_dirs=_int_env(f"{ENV_PREFIX}TREE_MAX_DIRS", 200),
            evaluator_timeout=_float_env(f"{ENV_PREFIX}EVALUATOR_TIMEOUT", 120.0),
            clone_dir=os.getenv(f"{ENV_PREFIX}CLONE_DIR") or None,
            max_concurrent=_int_env(f"{ENV_PREFIX}MAX_CONCURRENT", 3),
        )
