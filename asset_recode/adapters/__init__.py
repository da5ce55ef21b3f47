"""Adapters — bindings for the external encoder.

Public re-exports for convenient access.
"""

from asset_recode.adapters.base import Adapter, DependencyError, TransformFailure
from asset_recode.adapters.ffmpeg import FfmpegAdapter
from asset_recode.adapters.mock import MockAdapter

__all__ = [
    "Adapter",
    "DependencyError",
    "FfmpegAdapter",
    "MockAdapter",
    "TransformFailure",
]
