"""Conversions between frame indices, milliseconds and stream timestamps.

All arithmetic is done on exact fractions and floored once at the end, in
both directions, so a frame-aligned index survives a round trip unchanged.
"""

import math
from fractions import Fraction

from frame_picker.models.video_info import TimeKind, TimeSpec, VideoInfo

# Stands for "until the end of the stream"; never goes through the arithmetic.
STREAM_END = 2**63 - 1


def seconds_to_timestamp(seconds: Fraction, info: VideoInfo) -> int:
    """Convert a non-negative offset in seconds to an absolute stream timestamp."""
    return math.floor(seconds / info.time_base) + info.start_offset


def frame_to_timestamp(frame_index: int, info: VideoInfo) -> int:
    return seconds_to_timestamp(Fraction(frame_index) / info.frame_rate, info)


def milliseconds_to_timestamp(ms: int, info: VideoInfo) -> int:
    return seconds_to_timestamp(Fraction(ms, 1000), info)


def timestamp_to_frame(timestamp: int, info: VideoInfo) -> int:
    if timestamp == STREAM_END:
        raise ValueError("STREAM_END has no frame index")
    ticks = timestamp - info.start_offset
    return math.floor(ticks * info.time_base * info.frame_rate)


def timestamp_to_milliseconds(timestamp: int, info: VideoInfo) -> int:
    ticks = timestamp - info.start_offset
    return math.floor(ticks * info.time_base * 1000)


def resolve_timestamp(spec: TimeSpec, info: VideoInfo) -> int:
    """Turn a frame, millisecond or end bound into a stream timestamp."""
    if spec.kind == TimeKind.END:
        return STREAM_END
    if spec.kind == TimeKind.FRAME:
        return frame_to_timestamp(spec.value, info)
    return milliseconds_to_timestamp(spec.value, info)
