"""Abstract publisher definition."""

from abc import ABC, abstractmethod
from pathlib import Path


class Publisher(ABC):
    """Base interface for remote store adapters."""

    name: str = "publisher"

    @property
    @abstractmethod
    def configured(self) -> bool:
        """Whether the credentials this backend needs are present."""

    @abstractmethod
    async def publish(self, local_path: Path) -> str:
        """Upload ``local_path`` and return its public URL."""
