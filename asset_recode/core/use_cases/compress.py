"""
Compress use case — resolve configuration, run the re-encoder, map errors.

This is the vertical slice the CLI calls: it never raises for the two
expected fatal conditions. They come back as ``error`` plus the exit
code the command should use.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from asset_recode.adapters.base import Adapter, DependencyError
from asset_recode.adapters.ffmpeg import FfmpegAdapter
from asset_recode.adapters.mock import MockAdapter
from asset_recode.core.config.loader import (
    ConfigError,
    RecodeConfig,
    load_config,
    require_assets_dir,
)
from asset_recode.core.engine.executor import ProcessingReport, ResultCallback, process

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2


@dataclass
class CompressResult:
    """Result of a compress run."""

    report: ProcessingReport | None = None
    config: RecodeConfig | None = None
    error: str | None = None
    exit_code: int = EXIT_OK

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            result["exit_code"] = self.exit_code
            return result

        if self.config:
            result["config"] = self.config.to_dict()
        if self.report:
            result["report"] = self.report.to_dict()

        return result


def build_adapter(config: RecodeConfig, mock_mode: bool = False) -> Adapter:
    """Encoder adapter for the resolved configuration."""
    if mock_mode:
        return MockAdapter()
    return FfmpegAdapter(config.ffmpeg, timeout=config.timeout)


def run_compress(
    config_path: Path | None = None,
    assets_dir: Path | str | None = None,
    tool: str | None = None,
    timeout: float | None = None,
    workers: int | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    on_start: Callable[[RecodeConfig], None] | None = None,
    on_result: ResultCallback | None = None,
) -> CompressResult:
    """Re-encode all assets in the configured directory.

    Args:
        config_path: Optional explicit path to recode.yml.
        assets_dir: Override for the assets directory.
        tool: Override for the encoder executable.
        timeout: Override for the per-file timeout (seconds).
        workers: Override for parallel encodes.
        dry_run: If True, list what would be encoded without doing it.
        mock_mode: If True, copy files instead of running ffmpeg.
        on_start: Called with the resolved configuration before any work.
        on_result: Progress callback, one call per asset.

    Returns:
        CompressResult with the processing report or a fatal error.
    """
    result = CompressResult()

    try:
        config = load_config(
            config_path,
            assets_dir=assets_dir,
            ffmpeg=tool,
            timeout=timeout,
            workers=workers,
        )
        result.config = config

        # Fail fast, before announcing the run
        require_assets_dir(config.assets_dir)
        adapter = build_adapter(config, mock_mode)
        if not dry_run:
            adapter.require()

        if on_start is not None:
            on_start(config)

        result.report = process(
            config.assets_dir,
            config.ffmpeg,
            timeout=config.timeout,
            workers=config.workers,
            dry_run=dry_run,
            adapter=adapter,
            on_result=on_result,
        )
    except ConfigError as e:
        logger.debug("Config error: %s", e)
        result.error = str(e)
        result.exit_code = EXIT_CONFIG_ERROR
    except DependencyError as e:
        logger.debug("Dependency error: %s", e)
        result.error = str(e)
        result.exit_code = EXIT_DEPENDENCY_ERROR

    return result
