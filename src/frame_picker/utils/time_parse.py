"""Parsing of the range bounds and thread count accepted on the command line.

Accepted bound syntax:
    end             the end of the stream
    120             a frame index
    12.5s           seconds
    01:02.250       minutes:seconds[.millis]
    1:01:02.250     hours:minutes:seconds[.millis]
"""

import re
from decimal import Decimal, InvalidOperation

from frame_picker.models.video_info import TimeKind, TimeSpec

MAX_THREAD_COUNT = 65535

_CLOCK_PATTERN = re.compile(r"^(?:(\d+):)?(\d+):(\d+)(?:\.(\d+))?$")


def parse_time(text: str) -> TimeSpec:
    """Parse a range bound into a TimeSpec.

    Raises:
        ValueError: If the text matches none of the accepted forms.
    """
    value = text.strip()
    if value.lower() == "end":
        return TimeSpec(kind=TimeKind.END)

    if value.isascii() and value.isdigit():
        return TimeSpec(kind=TimeKind.FRAME, value=int(value))

    if value.lower().endswith("s"):
        seconds = value[:-1]
        try:
            parsed = Decimal(seconds)
        except InvalidOperation:
            raise ValueError(f"Wrong second format: '{seconds}'")
        if not parsed.is_finite() or parsed < 0:
            raise ValueError(f"Wrong second format: '{seconds}'")
        return TimeSpec(kind=TimeKind.MILLISECOND, value=int(parsed * 1000))

    match = _CLOCK_PATTERN.match(value)
    if not match:
        raise ValueError(f"Wrong time format: '{value}' (expected frame index, xx.xxs, [hh:]mm:ss[.mmm] or end)")

    hours, minutes, seconds, millis = match.groups()
    if millis is not None and len(millis) > 3:
        raise ValueError("Milliseconds must have at most 3 digits")

    total_ms = (int(hours or 0) * 3600 + int(minutes) * 60 + int(seconds)) * 1000
    total_ms += int(millis.ljust(3, "0")) if millis else 0
    return TimeSpec(kind=TimeKind.MILLISECOND, value=total_ms)


def parse_thread_count(text: str) -> int:
    """Parse 'auto' or an explicit decoder thread count; 0 means auto."""
    value = text.strip()
    if value.lower() == "auto":
        return 0
    if not (value.isascii() and value.isdigit()) or int(value) > MAX_THREAD_COUNT:
        raise ValueError(f"Thread count must be 'auto' or an integer between 0 and {MAX_THREAD_COUNT}")
    return int(value)
