"""
Receipt model — the outcome of re-encoding one asset.

Adapters return Receipts, never exceptions. A failed receipt means the
original file was left exactly as it was.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Result of transforming a single asset."""

    adapter: str
    path: str
    category: str = ""
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    size_before: int | None = None
    size_after: int | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the asset was re-encoded and replaced."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the transform failed (original untouched)."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        adapter: str,
        path: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(adapter=adapter, path=path, status="ok", output=output, **kwargs)

    @classmethod
    def failure(
        cls,
        adapter: str,
        path: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(adapter=adapter, path=path, status="failed", error=error, **kwargs)

    @classmethod
    def skip(
        cls,
        adapter: str,
        path: str,
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt."""
        return cls(adapter=adapter, path=path, status="skipped", output=reason, **kwargs)
