"""
Asset and TransformSpec models — what gets re-encoded, and how.

An Asset is one media file plus the category derived from its
extension. A TransformSpec is the fixed ffmpeg parameter set for a
category. The table of specs is a process-wide constant: it is never
derived from the input files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

Category = Literal["image-jpeg", "image-png", "video"]

# ── Extension → category ─────────────────────────────────────────

EXTENSION_CATEGORIES: dict[str, Category] = {
    ".jpg": "image-jpeg",
    ".jpeg": "image-jpeg",
    ".png": "image-png",
    ".mp4": "video",
    ".mov": "video",
    ".webm": "video",
}

# ── Defaults ─────────────────────────────────────────────────────

MAX_WIDTH = 1280           # px — images are never wider than this
JPEG_QUALITY = 3           # ffmpeg -q:v, 1 (best) … 31 (worst)
PNG_COMPRESSION = 3        # ffmpeg -compression_level, 0 … 9
VIDEO_CODEC = "libx264"
VIDEO_PRESET = "slow"
VIDEO_CRF = 28             # H.264 constant rate factor
AUDIO_CODEC = "aac"
AUDIO_BITRATE = "96k"


class Asset(BaseModel):
    """A single media file under the assets directory."""

    model_config = ConfigDict(frozen=True)

    path: Path
    category: Category

    @property
    def name(self) -> str:
        return self.path.name


class TransformSpec(BaseModel):
    """Encoder parameters for one category.

    Image specs set ``max_width`` plus either ``quality`` or
    ``compression_level``. The video spec sets codec, preset, CRF and
    audio settings. ``args()`` renders the ffmpeg flags that sit
    between the input and the output path.
    """

    model_config = ConfigDict(frozen=True)

    category: Category
    max_width: int | None = None
    quality: int | None = None
    compression_level: int | None = None
    video_codec: str | None = None
    preset: str | None = None
    crf: int | None = None
    audio_codec: str | None = None
    audio_bitrate: str | None = None
    faststart: bool = False

    @property
    def scale_filter(self) -> str | None:
        """Downscale to ``max_width`` (never upscale), even height."""
        if self.max_width is None:
            return None
        w = self.max_width
        return f"scale='if(gt(iw,{w}),{w},iw)':-2"

    def args(self) -> list[str]:
        out: list[str] = []
        if self.scale_filter:
            out += ["-vf", self.scale_filter]
        if self.quality is not None:
            out += ["-q:v", str(self.quality)]
        if self.compression_level is not None:
            out += ["-compression_level", str(self.compression_level)]
        if self.video_codec:
            out += ["-c:v", self.video_codec]
        if self.preset:
            out += ["-preset", self.preset]
        if self.crf is not None:
            out += ["-crf", str(self.crf)]
        if self.audio_codec:
            out += ["-c:a", self.audio_codec]
        if self.audio_bitrate:
            out += ["-b:a", self.audio_bitrate]
        if self.faststart:
            out += ["-movflags", "+faststart"]
        return out


TRANSFORM_SPECS: dict[Category, TransformSpec] = {
    "image-jpeg": TransformSpec(
        category="image-jpeg",
        max_width=MAX_WIDTH,
        quality=JPEG_QUALITY,
    ),
    "image-png": TransformSpec(
        category="image-png",
        max_width=MAX_WIDTH,
        compression_level=PNG_COMPRESSION,
    ),
    "video": TransformSpec(
        category="video",
        video_codec=VIDEO_CODEC,
        preset=VIDEO_PRESET,
        crf=VIDEO_CRF,
        audio_codec=AUDIO_CODEC,
        audio_bitrate=AUDIO_BITRATE,
        faststart=True,
    ),
}


def spec_for(category: Category) -> TransformSpec:
    """Look up the transform parameters for a category."""
    return TRANSFORM_SPECS[category]
