"""
Adapter base — the contract between the re-encoder and the encoder tool.

The engine only talks to the encoder through this interface. An adapter
writes the transformed asset to the output path it is given; it never
touches the original file. Replacing the original is the engine's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from asset_recode.core.models.action import Receipt
from asset_recode.core.models.asset import Asset


class DependencyError(Exception):
    """Raised when the external encoder is not available."""


class TransformFailure(Exception):
    """A single asset could not be transformed.

    Raised inside an adapter and turned into a failed Receipt before it
    leaves ``execute()``.
    """


class Adapter(ABC):
    """Abstract base class for encoder adapters.

    Adapters perform the external side effect and return receipts.
    They NEVER raise from ``execute()``. Failures are captured in the
    Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'ffmpeg', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool can be invoked.

        Should be fast and never raise.
        """

    @abstractmethod
    def execute(self, asset: Asset, output: Path) -> Receipt:
        """Transform ``asset`` into ``output`` and return a receipt.

        A success receipt guarantees ``output`` exists and is complete.
        """

    def require(self) -> None:
        """Raise DependencyError unless the tool is available."""
        if not self.is_available():
            raise DependencyError(
                f"{self.name} is required but not found in PATH. "
                f"Install {self.name} and retry."
            )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
