"""
Mock adapter — stand-in encoder for mock mode and tests.

Copies the input to the output instead of re-encoding it, so a whole
run can be exercised without ffmpeg installed. Individual assets can be
configured to fail.
"""

from __future__ import annotations

import shutil
import threading
from pathlib import Path

from asset_recode.adapters.base import Adapter
from asset_recode.core.models.action import Receipt
from asset_recode.core.models.asset import Asset


class MockAdapter(Adapter):
    """Universal mock encoder.

    By default every asset succeeds and the output is a byte copy of the
    input, optionally followed by ``suffix``.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        suffix: bytes = b"",
    ):
        self._name = adapter_name
        self._available = available
        self._suffix = suffix
        self._failures: dict[Path, str] = {}
        self._call_log: list[tuple[Asset, Path]] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[tuple[Asset, Path]]:
        """Every (asset, output) pair this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, path: Path, error: str = "Mock failure") -> None:
        """Configure the asset at ``path`` to fail."""
        self._failures[Path(path)] = error

    def execute(self, asset: Asset, output: Path) -> Receipt:
        with self._lock:
            self._call_log.append((asset, output))

        error = self._failures.get(asset.path)
        if error is not None:
            return Receipt.failure(
                adapter=self._name,
                path=str(asset.path),
                category=asset.category,
                error=error,
                metadata={"mock": True},
            )

        shutil.copyfile(asset.path, output)
        if self._suffix:
            with output.open("ab") as f:
                f.write(self._suffix)

        return Receipt.success(
            adapter=self._name,
            path=str(asset.path),
            category=asset.category,
            output="[mock] copied",
            size_before=asset.path.stat().st_size,
            size_after=output.stat().st_size,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()
