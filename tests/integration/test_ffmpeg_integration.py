"""
Integration tests — real ffmpeg against generated media.
"""

from pathlib import Path

import pytest

from asset_recode.core.engine.executor import process


class TestImages:
    def test_wide_jpeg_is_downscaled(
        self, assets_dir: Path, scratch_root: Path, make_media, image_width,
    ):
        img = make_media(assets_dir / "wide.jpg", "testsrc=size=2000x1000")

        report = process(assets_dir)

        assert report.processed == 1
        assert image_width(img) == 1280
        assert list(scratch_root.iterdir()) == []

    def test_narrow_png_is_not_upscaled(self, assets_dir: Path, make_media, image_width):
        img = make_media(assets_dir / "icons" / "small.png", "testsrc=size=640x360")

        report = process(assets_dir)

        assert report.processed == 1
        assert image_width(img) == 640

    def test_corrupt_image_left_unchanged(
        self, assets_dir: Path, scratch_root: Path, make_media,
    ):
        bad = assets_dir / "b.png"
        bad.write_bytes(b"this is not a png")
        good = make_media(assets_dir / "a.jpg", "testsrc=size=320x240")

        report = process(assets_dir)

        assert report.processed == 1
        assert report.failed_paths == [str(bad)]
        assert bad.read_bytes() == b"this is not a png"
        assert good.stat().st_size > 0
        assert list(scratch_root.iterdir()) == []


class TestVideo:
    @pytest.mark.parametrize("name", ["c.mp4", "d.mov"])
    def test_video_reencoded(self, assets_dir: Path, name: str, make_media, x264):
        clip = make_media(
            assets_dir / name,
            "testsrc=size=320x240:rate=10",
            "sine=frequency=440",
            duration=1,
        )

        report = process(assets_dir)

        assert report.processed == 1
        assert report.failed == 0
        assert clip.stat().st_size > 0
