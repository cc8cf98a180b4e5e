"""Base collector interface."""

from abc import ABC, abstractmethod


class BaseCollector(ABC):
    """Abstract base class for data collectors."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this collector is available (has required credentials, etc.)."""
        pass

    async def close(self) -> None:
        """Release network resources held by the collector."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
