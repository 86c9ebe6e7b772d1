"""Tests for the FFmpeg time-lapse encoder."""

import numpy as np
import pytest

from iconscope.io.encoder import encode_video, ffmpeg_available

pytestmark = pytest.mark.skipif(not ffmpeg_available(), reason="ffmpeg not installed")


def _ramp_frames(n: int, width: int, height: int):
    """Generate N frames brightening from black."""
    for i in range(n):
        yield np.full((height, width, 3), i * 20, dtype=np.uint8)


class TestEncoder:
    def test_produces_mp4(self, tmp_path):
        output = tmp_path / "timelapse.mp4"
        result = encode_video(
            frame_iterator=_ramp_frames(10, 64, 48),
            output_path=output,
            width=64,
            height=48,
            fps=10,
            quality="fast",
        )
        assert result.exists()
        assert result.stat().st_size > 0

    def test_progress_callback(self, tmp_path):
        progress = []
        encode_video(
            frame_iterator=_ramp_frames(6, 32, 32),
            output_path=tmp_path / "p.mp4",
            width=32,
            height=32,
            fps=10,
            quality="fast",
            total_frames=6,
            progress_callback=lambda c, t: progress.append((c, t)),
        )
        assert progress[-1] == (6, 6)
        assert len(progress) == 6
