"""
Auto-mark all tests in this directory as integration tests.

These run a real ffmpeg and are skipped when it is not installed.

Run ONLY integration tests:
    pytest tests/integration/ -m integration

Run ONLY unit tests:
    pytest -m "not integration"
"""

import shutil
import subprocess
from pathlib import Path

import pytest

FFMPEG = shutil.which("ffmpeg")
FFPROBE = shutil.which("ffprobe")


def pytest_collection_modifyitems(items):
    """Auto-apply the 'integration' marker to every test in this directory."""
    for item in items:
        if "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


def _has_encoder(name: str) -> bool:
    """True if the installed ffmpeg was built with ``name``."""
    if FFMPEG is None:
        return False
    result = subprocess.run(
        [FFMPEG, "-hide_banner", "-encoders"],
        capture_output=True, text=True, check=False,
    )
    return f" {name} " in result.stdout


def _make_media(path: Path, *lavfi_inputs: str, duration: float | None = None) -> Path:
    cmd = [FFMPEG, "-hide_banner", "-loglevel", "error", "-y"]
    for source in lavfi_inputs:
        cmd += ["-f", "lavfi", "-i", source]
    if duration is not None:
        cmd += ["-t", str(duration)]
    else:
        cmd += ["-frames:v", "1"]
    cmd.append(str(path))
    path.parent.mkdir(parents=True, exist_ok=True)
    subprocess.run(cmd, check=True, capture_output=True)
    return path


def _image_width(path: Path) -> int:
    result = subprocess.run(
        [FFPROBE, "-v", "error", "-select_streams", "v:0",
         "-show_entries", "stream=width", "-of", "csv=p=0", str(path)],
        capture_output=True, text=True, check=True,
    )
    return int(result.stdout.strip())


@pytest.fixture
def make_media():
    """Generate a synthetic media file with ffmpeg's lavfi sources."""
    if FFMPEG is None or FFPROBE is None:
        pytest.skip("ffmpeg/ffprobe not installed")
    return _make_media


@pytest.fixture
def image_width():
    return _image_width


@pytest.fixture
def x264(make_media):
    """Skip unless ffmpeg can produce the fixed video encoding."""
    if not (_has_encoder("libx264") and _has_encoder("aac")):
        pytest.skip("ffmpeg built without libx264/aac")
