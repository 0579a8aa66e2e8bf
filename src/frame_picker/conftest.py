"""Shared fixtures: a short MPEG-4 clip written with PyAV."""

from fractions import Fraction
from pathlib import Path

import av
import numpy as np
import pytest

CLIP_FRAMES = 50
CLIP_RATE = 25
CLIP_WIDTH = 64
CLIP_HEIGHT = 48


def write_clip(path: Path, frame_count: int = CLIP_FRAMES, rate: int = CLIP_RATE) -> Path:
    """Write a clip whose frame i is a flat gray of level (i * 5) % 256."""
    with av.open(str(path), mode="w") as container:
        stream = container.add_stream("mpeg4", rate=rate)
        stream.codec_context.width = CLIP_WIDTH
        stream.codec_context.height = CLIP_HEIGHT
        stream.codec_context.pix_fmt = "yuv420p"
        stream.codec_context.gop_size = 10

        for i in range(frame_count):
            image = np.full((CLIP_HEIGHT, CLIP_WIDTH, 3), (i * 5) % 256, dtype=np.uint8)
            frame = av.VideoFrame.from_ndarray(image, format="rgb24")
            frame.pts = i
            frame.time_base = Fraction(1, rate)
            for packet in stream.encode(frame):
                container.mux(packet)

        for packet in stream.encode():
            container.mux(packet)
    return path


@pytest.fixture(scope="session")
def sample_video(tmp_path_factory) -> Path:
    return write_clip(tmp_path_factory.mktemp("clips") / "sample.mp4")
