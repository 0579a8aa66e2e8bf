"""Convert decoded frames to the target pixel format and encode them as still images."""

import logging
from fractions import Fraction
from pathlib import Path

import av
from av.codec import Codec, CodecContext
from av.error import FFmpegError
from av.video.format import VideoFormat
from av.video.reformatter import VideoReformatter
from pydantic import BaseModel, ConfigDict

from frame_picker.errors import (
    ContextAllocationFailed,
    ConverterUnavailable,
    UnsupportedCodec,
    translate_av_error,
)

logger = logging.getLogger(__name__)


class EncoderConfig(BaseModel):
    """Still-image codec and the pixel format it is fed with."""

    model_config = ConfigDict(frozen=True)

    encoder: str = "mjpeg"
    format: str = "yuvj420p"


class ImageEncoder:
    def __init__(self, width: int, height: int, source_format: str | None, config: EncoderConfig | None = None):
        self.config = config or EncoderConfig()
        self.width = width
        self.height = height

        try:
            codec = Codec(self.config.encoder, "w")
        except ValueError as e:
            raise UnsupportedCodec(f"No encoder registered for '{self.config.encoder}'") from e
        if codec.type != "video":
            raise UnsupportedCodec(f"'{self.config.encoder}' is not a video encoder")

        self._reformatter = self._build_converter(source_format)

        try:
            codec_context = CodecContext.create(codec, "w")
            codec_context.width = width
            codec_context.height = height
            codec_context.pix_fmt = self.config.format
            codec_context.time_base = Fraction(1, 25)
            codec_context.open()
        except (FFmpegError, ValueError) as e:
            raise ContextAllocationFailed(f"Cannot open encoder {self.config.encoder}: {e}") from e
        self._codec_context = codec_context

        logger.debug(
            f"Encoder ready: {self.config.encoder}, {source_format} -> {self.config.format}, {width}x{height}"
        )

    def _build_converter(self, source_format: str | None) -> VideoReformatter:
        if not source_format:
            raise ConverterUnavailable("Source pixel format is unknown")
        for name in (source_format, self.config.format):
            try:
                VideoFormat(name)
            except ValueError as e:
                raise ConverterUnavailable(f"Unsupported pixel format '{name}'") from e
        return VideoReformatter()

    def __enter__(self) -> "ImageEncoder":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    @property
    def closed(self) -> bool:
        return self._codec_context is None

    def save(self, frame: av.VideoFrame, output_directory: str | Path, filename: str) -> bool:
        """Encode `frame` into `output_directory/filename`.

        Returns:
            True if a file was written, False if the encoder produced no packet
            for this frame.
        """
        if self.closed:
            raise ValueError("ImageEncoder is closed")

        try:
            converted = self._reformatter.reformat(
                frame,
                width=self.width,
                height=self.height,
                format=self.config.format,
                interpolation="BILINEAR",
            )
            packets = self._codec_context.encode(converted)
        except FFmpegError as e:
            raise translate_av_error(e) from e
        if not packets:
            logger.debug(f"Encoder produced no packet for {filename}, skipping")
            return False

        output_path = Path(output_directory) / filename
        output_path.write_bytes(b"".join(bytes(packet) for packet in packets))
        return True

    def close(self) -> None:
        # PyAV frees the encoder context and the scaler when the last reference goes
        self._codec_context = None
        self._reformatter = None
