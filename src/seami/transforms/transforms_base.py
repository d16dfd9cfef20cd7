"""Abstract transform definition."""

from abc import ABC, abstractmethod
from pathlib import Path


class MediaTransform(ABC):
    """Base interface for transform adapters."""

    output_prefix: str = ""

    @property
    @abstractmethod
    def output_suffix(self) -> str:
        """File suffix of the derivative, including the dot."""

    @abstractmethod
    async def transform(self, raw_path: Path, output_path: Path) -> Path:
        """Write the derivative of ``raw_path`` to ``output_path`` and return it."""
