from pathlib import Path

import av
import numpy as np
import pytest
from PIL import Image

from frame_picker.errors import ConverterUnavailable, UnsupportedCodec
from frame_picker.utils.image_encoder import EncoderConfig, ImageEncoder


def gray_frame(level: int, width: int = 64, height: int = 48) -> av.VideoFrame:
    image = np.full((height, width, 3), level, dtype=np.uint8)
    return av.VideoFrame.from_ndarray(image, format="rgb24")


def test_save_writes_jpeg(tmp_path: Path):
    with ImageEncoder(64, 48, "rgb24") as encoder:
        assert encoder.save(gray_frame(120), tmp_path, "still.jpg") is True

    data = (tmp_path / "still.jpg").read_bytes()
    assert data[:2] == b"\xff\xd8"
    with Image.open(tmp_path / "still.jpg") as img:
        assert img.format == "JPEG"
        assert img.size == (64, 48)
        assert abs(np.asarray(img.convert("L")).mean() - 120) < 4


def test_frames_are_encoded_independently(tmp_path: Path):
    with ImageEncoder(64, 48, "rgb24") as encoder:
        for i, level in enumerate((10, 200, 90)):
            assert encoder.save(gray_frame(level), tmp_path, f"f{i}.jpg")

    means = []
    for i in range(3):
        with Image.open(tmp_path / f"f{i}.jpg") as img:
            means.append(np.asarray(img.convert("L")).mean())
    assert [round(m / 10) for m in means] == [1, 20, 9]


def test_png_encoder_config(tmp_path: Path):
    config = EncoderConfig(encoder="png", format="rgb24")
    with ImageEncoder(64, 48, "yuv420p", config) as encoder:
        frame = gray_frame(60).reformat(format="yuv420p")
        assert encoder.save(frame, tmp_path, "still.png")

    with Image.open(tmp_path / "still.png") as img:
        assert img.format == "PNG"


def test_unknown_encoder():
    with pytest.raises(UnsupportedCodec):
        ImageEncoder(64, 48, "rgb24", EncoderConfig(encoder="no-such-codec"))


def test_audio_encoder_is_rejected():
    with pytest.raises(UnsupportedCodec):
        ImageEncoder(64, 48, "rgb24", EncoderConfig(encoder="aac"))


@pytest.mark.parametrize("source_format, target_format", [
    (None, "yuvj420p"),
    ("not-a-format", "yuvj420p"),
    ("rgb24", "not-a-format"),
])
def test_converter_unavailable(source_format, target_format):
    with pytest.raises(ConverterUnavailable):
        ImageEncoder(64, 48, source_format, EncoderConfig(format=target_format))


def test_closed_encoder_refuses_frames(tmp_path: Path):
    encoder = ImageEncoder(64, 48, "rgb24")
    encoder.close()
    assert encoder.closed
    with pytest.raises(ValueError):
        encoder.save(gray_frame(0), tmp_path, "x.jpg")
