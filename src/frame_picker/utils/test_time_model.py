from fractions import Fraction

import pytest

from frame_picker.models.video_info import TimeKind, TimeSpec, VideoInfo
from frame_picker.utils.time_model import (
    STREAM_END,
    frame_to_timestamp,
    milliseconds_to_timestamp,
    resolve_timestamp,
    timestamp_to_frame,
    timestamp_to_milliseconds,
)


def make_info(frame_rate=Fraction(30), time_base=Fraction(1, 15360), start_time=None, duration=None) -> VideoInfo:
    return VideoInfo(
        stream_index=0,
        width=64,
        height=48,
        pixel_format="yuv420p",
        frame_rate=frame_rate,
        time_base=time_base,
        start_time=start_time,
        duration=duration,
    )


@pytest.mark.parametrize("info", [
    make_info(),
    make_info(frame_rate=Fraction(30000, 1001), time_base=Fraction(1, 90000), start_time=126000),
    make_info(frame_rate=Fraction(25), time_base=Fraction(1, 12800)),
])
def test_round_trip_for_aligned_frames(info: VideoInfo):
    for i in range(0, 500):
        assert timestamp_to_frame(frame_to_timestamp(i, info), info) == i


def test_unaligned_round_trip_loses_at_most_one_frame():
    # 1/30 s is 33.3 ticks at 1 ms, so the floor may land on the previous frame
    info = make_info(time_base=Fraction(1, 1000))
    for i in range(200):
        back = timestamp_to_frame(frame_to_timestamp(i, info), info)
        assert i - 1 <= back <= i


def test_timestamps_are_monotonic():
    info = make_info(frame_rate=Fraction(24000, 1001), time_base=Fraction(1, 1000), start_time=40)
    timestamps = [frame_to_timestamp(i, info) for i in range(300)]
    assert timestamps == sorted(timestamps)


def test_start_time_is_applied_only_when_known():
    unknown = make_info(start_time=None)
    known = make_info(start_time=1024)
    assert frame_to_timestamp(3, unknown) == 3 * 512
    assert frame_to_timestamp(3, known) == 1024 + 3 * 512
    assert timestamp_to_frame(1024 + 3 * 512, known) == 3
    assert timestamp_to_frame(3 * 512, unknown) == 3


def test_negative_start_time_stays_signed():
    info = make_info(start_time=-1024)
    assert frame_to_timestamp(0, info) == -1024
    assert timestamp_to_frame(-1024, info) == 0


def test_milliseconds_conversion():
    info = make_info(time_base=Fraction(1, 90000), start_time=900)
    assert milliseconds_to_timestamp(1500, info) == 900 + 135000
    assert timestamp_to_milliseconds(900 + 135000, info) == 1500


def test_resolve_timestamp_dispatches_on_kind():
    info = make_info()
    assert resolve_timestamp(TimeSpec(kind=TimeKind.FRAME, value=30), info) == 15360
    assert resolve_timestamp(TimeSpec(kind=TimeKind.MILLISECOND, value=500), info) == 7680
    assert resolve_timestamp(TimeSpec(kind=TimeKind.END), info) == STREAM_END


def test_stream_end_has_no_frame_index():
    with pytest.raises(ValueError):
        timestamp_to_frame(STREAM_END, make_info())


@pytest.mark.parametrize("field", ["frame_rate", "time_base"])
@pytest.mark.parametrize("value", [Fraction(0), Fraction(-1, 25)])
def test_non_positive_timing_is_rejected(field, value):
    with pytest.raises(ValueError):
        make_info(**{field: value})
