import logging
from fractions import Fraction
from pathlib import Path
from typing import Optional

import av
from av.error import FFmpegError
from pydantic import ValidationError

from frame_picker.errors import InputNotFound, NoSuitableStream, UnsupportedCodec, translate_av_error
from frame_picker.models.video_info import VideoInfo
from frame_picker.utils.library import library_session

logger: logging.Logger = logging.getLogger(__name__)

AV_TIME_BASE = 1_000_000


def check_input_file(path: str | Path) -> Path:
    """Make sure the input exists before handing it to libav."""
    p = Path(path)
    if not p.exists():
        raise InputNotFound(f"Input file does not exist: {path}")
    if not p.is_file():
        raise InputNotFound(f"Input path is not a file: {path}")
    return p


def _stream_duration(stream, container, time_base: Optional[Fraction]) -> Optional[int]:
    if stream.duration is not None:
        return stream.duration
    if container.duration is None or not time_base:
        return None
    # Container duration is expressed in AV_TIME_BASE units (microseconds)
    return int(Fraction(container.duration, AV_TIME_BASE) / time_base)


def probe_video(filename: str | Path) -> VideoInfo:
    """Open a container read-only and describe its best video stream.

    Raises:
        InputNotFound: If the file does not exist or cannot be opened.
        NoSuitableStream: If no video stream with usable timing is present.
        UnsupportedCodec: If no decoder is registered for the stream's codec.
        LibraryError: For any other libav failure.
    """
    path = check_input_file(filename)

    with library_session():
        try:
            container = av.open(str(path), mode="r")
        except FFmpegError as e:
            raise translate_av_error(e) from e

        try:
            stream = container.streams.best("video")
            if stream is None:
                raise NoSuitableStream(f"No video stream found in {path.name}")

            codec_context = stream.codec_context
            if codec_context is None:
                raise UnsupportedCodec(f"No decoder available for stream #{stream.index} of {path.name}")

            frame_rate = stream.average_rate or stream.guessed_rate
            time_base = stream.time_base

            try:
                video_info = VideoInfo(
                    stream_index=stream.index,
                    width=codec_context.width,
                    height=codec_context.height,
                    pixel_format=codec_context.pix_fmt,
                    frame_rate=frame_rate,
                    time_base=time_base,
                    start_time=stream.start_time,
                    duration=_stream_duration(stream, container, time_base),
                    frame_count=stream.frames or None,
                    codec_name=codec_context.name,
                )
            except ValidationError as e:
                raise NoSuitableStream(
                    f"Video stream #{stream.index} of {path.name} has no usable timing "
                    f"(frame rate {frame_rate}, time base {time_base})"
                ) from e
        finally:
            container.close()

    duration_str = f", {video_info.duration} ticks" if video_info.duration is not None else ""
    frames_str = f", {video_info.frame_count} frames" if video_info.frame_count else ""
    logger.info(
        f"Video detected: {video_info.width}x{video_info.height}, "
        f"{video_info.pixel_format}, {float(video_info.frame_rate):.2f} fps, "
        f"time base {video_info.time_base}{duration_str}{frames_str}"
    )
    return video_info
