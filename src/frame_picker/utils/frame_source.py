"""
Frame source: streaming decode of one video stream with seeking.

Responsibilities:
- own the container and the decoder bound to the selected stream
- keyframe-aligned backward seek followed by a decoder flush
- drain frames the decoder already produced before reading new packets
- report end of stream as None, never as an error
"""

import errno
import logging
from collections import deque
from pathlib import Path
from typing import Deque, Iterator, Optional

import av
from av.error import FFmpegError, InvalidDataError

from frame_picker.errors import (
    ContextAllocationFailed,
    NoSuitableStream,
    UnsupportedCodec,
    translate_av_error,
)
from frame_picker.models.video_info import VideoInfo
from frame_picker.utils.library import acquire, release
from frame_picker.utils.video import check_input_file

logger = logging.getLogger(__name__)


class FrameSource(Iterator[av.VideoFrame]):
    def __init__(self, path: str | Path, info: VideoInfo, thread_count: int = 0) -> None:
        path = check_input_file(path)
        self._info = info
        self._closed = False
        self._packets: Optional[Iterator[av.Packet]] = None
        self._pending: Deque[av.VideoFrame] = deque()

        acquire()
        try:
            self._container = av.open(str(path), mode="r")
        except FFmpegError as e:
            release()
            raise translate_av_error(e) from e

        try:
            self._stream = self._open_stream(thread_count)
        except BaseException:
            self.close()
            raise

        logger.debug(
            f"Opened {path.name}: stream #{info.stream_index}, "
            f"decoder {self._codec_context.name}, thread_count={thread_count or 'auto'}"
        )

    def _open_stream(self, thread_count: int):
        try:
            stream = self._container.streams[self._info.stream_index]
        except IndexError:
            raise NoSuitableStream(f"Stream #{self._info.stream_index} does not exist")
        if stream.type != "video":
            raise NoSuitableStream(f"Stream #{self._info.stream_index} is not a video stream")

        codec_context = stream.codec_context
        if codec_context is None:
            raise UnsupportedCodec(f"No decoder available for stream #{stream.index}")

        # 0 lets libav pick the thread count
        codec_context.thread_count = thread_count
        codec_context.thread_type = "AUTO"
        try:
            codec_context.open()
        except (FFmpegError, ValueError) as e:
            raise ContextAllocationFailed(f"Cannot open decoder {codec_context.name}: {e}") from e

        self._codec_context = codec_context
        return stream

    # ---------------------------------------------------------------------

    @property
    def info(self) -> VideoInfo:
        return self._info

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "FrameSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def __iter__(self) -> "FrameSource":
        return self

    def __next__(self) -> av.VideoFrame:
        frame = self.next_frame()
        if frame is None:
            raise StopIteration
        return frame

    # ---------------------------------------------------------------------

    def seek(self, timestamp: int) -> None:
        """Seek to the last keyframe at or before `timestamp` and reset the decoder."""
        self._ensure_open()
        try:
            self._container.seek(timestamp, backward=True, any_frame=False, stream=self._stream)
        except FFmpegError as e:
            raise translate_av_error(e) from e

        self._codec_context.flush_buffers()
        self._pending.clear()
        self._packets = None
        logger.debug(f"Seeked to timestamp {timestamp}")

    def next_frame(self) -> Optional[av.VideoFrame]:
        """Return the next decoded frame, or None once the stream is exhausted."""
        self._ensure_open()

        # Frames produced by an earlier packet must go out before new input
        if self._pending:
            return self._pending.popleft()

        if self._packets is None:
            self._packets = self._container.demux()

        while True:
            try:
                packet = next(self._packets, None)
            except FFmpegError as e:
                raise translate_av_error(e) from e
            if packet is None:
                return None

            if packet.stream_index != self._info.stream_index:
                continue

            # The demuxer ends with an empty packet that drains delayed frames
            self._pending.extend(self._decode(packet))
            if self._pending:
                return self._pending.popleft()

    def _decode(self, packet: av.Packet) -> list:
        try:
            return self._codec_context.decode(packet)
        except EOFError:
            # Decoder already drained; nothing more to emit for this scan
            return []
        except InvalidDataError as e:
            logger.debug(f"Dropping undecodable packet at dts {packet.dts}: {e}")
            return []
        except FFmpegError as e:
            if e.errno == errno.EAGAIN:
                return []
            raise translate_av_error(e) from e

    def _ensure_open(self) -> None:
        if self._closed:
            raise ValueError("FrameSource is closed")

    # ---------------------------------------------------------------------

    def close(self) -> None:
        if self._closed:
            return

        self._closed = True
        self._pending.clear()
        self._packets = None
        try:
            self._container.close()
        finally:
            release()
