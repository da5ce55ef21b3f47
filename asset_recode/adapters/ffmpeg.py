"""
ffmpeg adapter — re-encode one asset with the category's fixed parameters.

The tool is treated as a black box: it succeeded if it exited with 0 and
left a non-empty file at the output path. Only error-level output is
requested, and it is kept (tail only) for the failure receipt.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import time
from pathlib import Path

from asset_recode.adapters.base import Adapter, DependencyError, TransformFailure
from asset_recode.core.models.action import Receipt
from asset_recode.core.models.asset import Asset, spec_for

logger = logging.getLogger(__name__)

DEFAULT_TOOL = "ffmpeg"

# How much of the tool's stderr ends up in a failure receipt
_STDERR_TAIL = 500


class FfmpegAdapter(Adapter):
    """Run ffmpeg against a single asset.

    Args:
        tool: Executable name or path (resolved through PATH).
        timeout: Seconds before an invocation is killed and counted as
            a failure. ``None`` waits indefinitely.
    """

    def __init__(self, tool: str = DEFAULT_TOOL, timeout: float | None = None):
        self._tool = tool
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "ffmpeg"

    @property
    def tool(self) -> str:
        return self._tool

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def resolve(self) -> str | None:
        """Full path of the tool, or None if it cannot be found."""
        return shutil.which(self._tool)

    def is_available(self) -> bool:
        return self.resolve() is not None

    def version(self) -> str | None:
        """First line of `<tool> -version`, or None if it cannot be run."""
        path = self.resolve()
        if path is None:
            return None
        try:
            result = subprocess.run(
                [path, "-version"],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=10,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug("%s -version failed: %s", path, e)
            return None
        lines = (result.stdout or "").splitlines()
        return lines[0].strip() if lines and result.returncode == 0 else None

    def require(self) -> None:
        if not self.is_available():
            raise DependencyError(
                f"{self._tool} is required but not found in PATH. "
                "Install ffmpeg and retry."
            )

    def build_command(self, asset: Asset, output: Path) -> list[str]:
        """Full argv for transforming ``asset`` into ``output``."""
        return [
            self._tool,
            "-hide_banner",
            "-loglevel", "error",
            "-y",
            "-i", str(asset.path),
            *spec_for(asset.category).args(),
            str(output),
        ]

    def execute(self, asset: Asset, output: Path) -> Receipt:
        cmd = self.build_command(asset, output)
        logger.debug("Executing: %s", shlex.join(cmd))
        size_before = _file_size(asset.path)
        start = time.monotonic()

        try:
            self._run(cmd, output)
        except TransformFailure as e:
            return Receipt.failure(
                adapter=self.name,
                path=str(asset.path),
                category=asset.category,
                error=str(e),
                duration_ms=int((time.monotonic() - start) * 1000),
                size_before=size_before,
                metadata={"command": cmd},
            )

        return Receipt.success(
            adapter=self.name,
            path=str(asset.path),
            category=asset.category,
            duration_ms=int((time.monotonic() - start) * 1000),
            size_before=size_before,
            size_after=_file_size(output),
            metadata={"command": cmd},
        )

    def _run(self, cmd: list[str], output: Path) -> None:
        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise TransformFailure(f"{self._tool} timed out after {self._timeout}s") from e
        except OSError as e:
            raise TransformFailure(f"{self._tool} could not be started: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            detail = stderr[-_STDERR_TAIL:] if stderr else "no error output"
            raise TransformFailure(
                f"{self._tool} exited with code {result.returncode}: {detail}"
            )

        if not output.is_file() or output.stat().st_size == 0:
            raise TransformFailure(f"{self._tool} produced no output file")


def _file_size(path: Path) -> int | None:
    try:
        return path.stat().st_size
    except OSError:
        return None
