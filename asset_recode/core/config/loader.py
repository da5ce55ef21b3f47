"""
Configuration loader — resolves where the assets live and which encoder to run.

Sources, highest precedence first:
    CLI flags  >  RECODE_* environment variables  >  recode.yml  >  defaults

recode.yml is optional. It is searched upward from the working
directory; its directory becomes the project root, and a relative
``assets_dir`` inside it is resolved against that root. Relative paths
given by flag or environment are resolved against the working directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "recode.yml"

DEFAULT_ASSETS_DIR = "assets"
DEFAULT_TOOL = "ffmpeg"

# Environment variable → config key
ENV_OVERRIDES = {
    "RECODE_ASSETS_DIR": "assets_dir",
    "RECODE_FFMPEG": "ffmpeg",
    "RECODE_TIMEOUT": "timeout",
    "RECODE_WORKERS": "workers",
}


class ConfigError(Exception):
    """Raised when configuration is invalid or the assets directory is missing."""


class RecodeConfig(BaseModel):
    """Effective settings for a run."""

    model_config = ConfigDict(extra="forbid")

    assets_dir: Path = Path(DEFAULT_ASSETS_DIR)
    ffmpeg: str = DEFAULT_TOOL
    timeout: float | None = Field(default=None, gt=0)
    workers: int = Field(default=1, ge=1)

    # Where the settings came from (not a user-facing key)
    config_path: Path | None = Field(default=None, exclude=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "config_path": str(self.config_path) if self.config_path else None,
            "assets_dir": str(self.assets_dir),
            "ffmpeg": self.ffmpeg,
            "timeout": self.timeout,
            "workers": self.workers,
        }


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for recode.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to recode.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse recode.yml into a raw mapping.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Allow everything to be nested under a "recode" key
    if isinstance(data.get("recode"), dict):
        data = data["recode"]

    return dict(data)


def load_config(
    config_path: Path | None = None,
    *,
    assets_dir: Path | str | None = None,
    ffmpeg: str | None = None,
    timeout: float | None = None,
    workers: int | None = None,
    environ: dict[str, str] | None = None,
) -> RecodeConfig:
    """Resolve the effective configuration.

    Args:
        config_path: Explicit recode.yml. If None, searches upward.
        assets_dir: Flag override for the assets directory.
        ffmpeg: Flag override for the encoder executable.
        timeout: Flag override for the per-file timeout (seconds).
        workers: Flag override for the number of parallel encodes.
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Validated RecodeConfig with an absolute ``assets_dir``.

    Raises:
        ConfigError: If the config file or any value is invalid.
    """
    env = os.environ if environ is None else environ
    cwd = Path.cwd()

    if config_path is None:
        config_path = find_config_file()

    data: dict[str, Any] = {}
    root = cwd
    if config_path is not None:
        data = read_config_file(config_path)
        root = config_path.parent.resolve()
        if isinstance(data.get("assets_dir"), str):
            data["assets_dir"] = _resolve(root, data["assets_dir"])

    for var, key in ENV_OVERRIDES.items():
        value = env.get(var, "").strip()
        if not value:
            continue
        logger.debug("Using %s from %s", key, var)
        data[key] = _resolve(cwd, value) if key == "assets_dir" else value

    flags = {"assets_dir": assets_dir, "ffmpeg": ffmpeg, "timeout": timeout, "workers": workers}
    for key, value in flags.items():
        if value is None:
            continue
        data[key] = _resolve(cwd, value) if key == "assets_dir" else value

    data.setdefault("assets_dir", root / DEFAULT_ASSETS_DIR)
    data["config_path"] = config_path

    try:
        config = RecodeConfig.model_validate(data)
    except ValidationError as e:
        source = config_path or "environment/flags"
        raise ConfigError(f"Invalid configuration ({source}): {e}") from e

    logger.info("Assets directory: %s (encoder: %s)", config.assets_dir, config.ffmpeg)
    return config


def require_assets_dir(path: Path) -> Path:
    """Return ``path`` if it is an existing directory.

    Raises:
        ConfigError: If it does not exist or is not a directory.
    """
    if not path.is_dir():
        raise ConfigError(f"No assets directory found at: {path}")
    return path


def _resolve(base: Path, value: Path | str) -> Path:
    p = Path(value).expanduser()
    return p if p.is_absolute() else (base / p)
