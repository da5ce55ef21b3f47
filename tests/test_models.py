"""
Tests for domain models — Asset, TransformSpec table, Receipt.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from asset_recode.core.models import (
    TRANSFORM_SPECS,
    Asset,
    Receipt,
    TransformSpec,
    spec_for,
)

# ── Transform table ──────────────────────────────────────────────────


class TestTransformSpecs:
    def test_every_category_has_a_spec(self):
        assert set(TRANSFORM_SPECS) == {"image-jpeg", "image-png", "video"}

    def test_spec_category_matches_key(self):
        for category, spec in TRANSFORM_SPECS.items():
            assert spec.category == category

    def test_jpeg_args(self):
        assert spec_for("image-jpeg").args() == [
            "-vf", "scale='if(gt(iw,1280),1280,iw)':-2",
            "-q:v", "3",
        ]

    def test_png_args(self):
        assert spec_for("image-png").args() == [
            "-vf", "scale='if(gt(iw,1280),1280,iw)':-2",
            "-compression_level", "3",
        ]

    def test_video_args(self):
        assert spec_for("video").args() == [
            "-c:v", "libx264",
            "-preset", "slow",
            "-crf", "28",
            "-c:a", "aac",
            "-b:a", "96k",
            "-movflags", "+faststart",
        ]

    def test_video_has_no_scale_filter(self):
        assert spec_for("video").scale_filter is None

    def test_scale_filter_never_upscales(self):
        spec = TransformSpec(category="image-png", max_width=640)
        assert spec.scale_filter == "scale='if(gt(iw,640),640,iw)':-2"

    def test_specs_are_frozen(self):
        with pytest.raises(ValidationError):
            spec_for("video").crf = 18


# ── Asset ────────────────────────────────────────────────────────────


class TestAsset:
    def test_name(self):
        asset = Asset(path=Path("/a/b/photo.JPG"), category="image-jpeg")
        assert asset.name == "photo.JPG"

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            Asset(path=Path("x.gif"), category="image-gif")

    def test_frozen(self):
        asset = Asset(path=Path("x.png"), category="image-png")
        with pytest.raises(ValidationError):
            asset.category = "video"

    def test_hashable(self):
        a = Asset(path=Path("x.png"), category="image-png")
        b = Asset(path=Path("x.png"), category="image-png")
        assert {a, b} == {a}


# ── Receipt ──────────────────────────────────────────────────────────


class TestReceipt:
    def test_success(self):
        r = Receipt.success(adapter="ffmpeg", path="a.jpg", category="image-jpeg")
        assert r.ok
        assert not r.failed
        assert r.error is None

    def test_failure(self):
        r = Receipt.failure(adapter="ffmpeg", path="a.jpg", error="boom")
        assert r.failed
        assert not r.ok
        assert r.error == "boom"

    def test_skip(self):
        r = Receipt.skip(adapter="ffmpeg", path="a.jpg", reason="dry run")
        assert r.status == "skipped"
        assert r.output == "dry run"
        assert not r.ok and not r.failed

    def test_json_dump(self):
        r = Receipt.success(adapter="mock", path="a.jpg", size_before=10, size_after=5)
        data = r.model_dump(mode="json")
        assert data["status"] == "ok"
        assert data["size_before"] == 10
        assert data["size_after"] == 5
        assert "started_at" in data
