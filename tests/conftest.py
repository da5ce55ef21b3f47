"""
Shared test fixtures and configuration.

Fake encoders are small POSIX shell scripts that follow ffmpeg's calling
convention closely enough for the engine: the input follows ``-i`` and
the output path is the last argument.
"""

import stat
import tempfile
import textwrap
from pathlib import Path

import pytest


def write_tool(path: Path, body: str) -> Path:
    """Write an executable shell script and return its path."""
    path.write_text("#!/bin/sh\n" + textwrap.dedent(body))
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """No RECODE_* leakage from the developer's shell, no stray recode.yml."""
    for var in (
        "RECODE_ASSETS_DIR",
        "RECODE_FFMPEG",
        "RECODE_TIMEOUT",
        "RECODE_WORKERS",
        "RECODE_LOG_LEVEL",
        "RECODE_LOG_FILE",
        "RECODE_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def assets_dir(tmp_path: Path) -> Path:
    """Return an empty assets directory."""
    d = tmp_path / "assets"
    d.mkdir()
    return d


@pytest.fixture
def scratch_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect tempfile so scratch directories land somewhere we can inspect."""
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture
def fake_encoder(tmp_path: Path) -> Path:
    """An encoder that copies its input and appends a marker."""
    return write_tool(tmp_path / "fake-ffmpeg", """\
        prev=""
        for arg in "$@"; do
          if [ "$prev" = "-i" ]; then src="$arg"; fi
          prev="$arg"
        done
        cp "$src" "$prev" && printf 'recoded' >> "$prev"
    """)


@pytest.fixture
def failing_encoder(tmp_path: Path) -> Path:
    """An encoder that writes half a file and then fails."""
    return write_tool(tmp_path / "broken-ffmpeg", """\
        for arg in "$@"; do out="$arg"; done
        printf 'partial' > "$out"
        echo "Invalid data found when processing input" >&2
        exit 1
    """)


@pytest.fixture
def silent_encoder(tmp_path: Path) -> Path:
    """An encoder that exits 0 without writing anything."""
    return write_tool(tmp_path / "lazy-ffmpeg", "exit 0\n")
