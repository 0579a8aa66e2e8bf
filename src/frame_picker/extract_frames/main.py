#!/usr/bin/env python3
"""
Extract a range of frames from a video as still images using container seeking
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Protocol

import av
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeElapsedColumn

from frame_picker.errors import InvalidFilenamePattern, InvalidRange
from frame_picker.models.video_info import ExtractionSummary, TimeSpec, VideoInfo
from frame_picker.utils.frame_source import FrameSource
from frame_picker.utils.image_encoder import EncoderConfig, ImageEncoder
from frame_picker.utils.time_model import STREAM_END, resolve_timestamp, timestamp_to_frame
from frame_picker.utils.video import probe_video

DEFAULT_PATTERN = "frame-%d.jpg"
MAX_FILENAME_LENGTH = 255

# Get logger for this module
logger = logging.getLogger(__name__)


class FrameSaver(Protocol):
    def save(self, frame: av.VideoFrame, output_directory: str | Path, filename: str) -> bool: ...


def format_filename(pattern: str, index: int) -> str:
    """Substitute the frame index into a printf-style filename pattern."""
    try:
        name = pattern % index
    except (TypeError, ValueError) as e:
        raise InvalidFilenamePattern(
            f"Filename pattern '{pattern}' must contain exactly one integer placeholder such as %d: {e}"
        ) from e
    if len(name) > MAX_FILENAME_LENGTH:
        raise InvalidFilenamePattern(f"Formatted filename exceeds {MAX_FILENAME_LENGTH} characters: {name[:40]}...")
    if not name or os.sep in name or (os.altsep and os.altsep in name):
        raise InvalidFilenamePattern(f"Formatted filename is not a plain file name: '{name}'")
    return name


def check_filename_pattern(pattern: str) -> None:
    format_filename(pattern, 0)


def validate_range(from_ts: int, to_ts: int, info: VideoInfo) -> None:
    """Reject ranges that are negative, reversed or past the end of the stream."""
    if from_ts < 0:
        raise InvalidRange(f"Range start {from_ts} is negative")
    if from_ts == STREAM_END:
        raise InvalidRange("Range start cannot be the end of the stream")
    if from_ts > to_ts:
        raise InvalidRange(f"Range start {from_ts} is after range end {to_ts}")
    end = info.end_timestamp
    if end is None:
        return
    if from_ts > end:
        raise InvalidRange(f"Range start {from_ts} is past the end of the stream ({end})")
    if to_ts != STREAM_END and to_ts > end:
        raise InvalidRange(f"Range end {to_ts} is past the end of the stream ({end})")


def extract_range(
    frames: Iterable[av.VideoFrame],
    saver: FrameSaver,
    from_ts: int,
    to_ts: int,
    first_index: int,
    output_directory: Path,
    pattern: str = DEFAULT_PATTERN,
    progress: Optional[Progress] = None,
    task: Optional[TaskID] = None,
) -> ExtractionSummary:
    """Emit every frame whose timestamp lies in [from_ts, to_ts].

    Frames before `from_ts` are what a backward seek lands on and are dropped.
    The first frame past `to_ts` ends the loop, as does the end of the stream.
    """
    summary = ExtractionSummary(from_timestamp=from_ts, to_timestamp=to_ts, first_index=first_index)
    frame_index = first_index

    for frame in frames:
        pts = frame.pts
        if pts is None:
            logger.debug("Dropping frame without timestamp")
            summary.discarded += 1
            continue
        if pts > to_ts:
            break
        if pts < from_ts:
            summary.discarded += 1
            continue

        name = format_filename(pattern, frame_index)
        if saver.save(frame, output_directory, name):
            logger.debug(f"Save: {name} (pts {pts})")
            summary.saved += 1
        else:
            summary.skipped += 1
        frame_index += 1

        if progress is not None and task is not None:
            progress.update(task, completed=pts - from_ts)

    return summary


def extract_frames(
    input_file: str | Path,
    output_folder: str | Path,
    start: TimeSpec,
    end: TimeSpec,
    pattern: str = DEFAULT_PATTERN,
    thread_count: int = 0,
    encoder_config: Optional[EncoderConfig] = None,
    progress: Optional[Progress] = None,
) -> ExtractionSummary:
    """
    Extract frames between two bounds of a video into a folder.

    Args:
        input_file: Path to the input video file
        output_folder: Folder receiving one image per frame (created if missing)
        start: First frame to extract
        end: Last frame to extract
        pattern: printf-style file name with one integer placeholder
        thread_count: Decoder thread count, 0 lets libav decide
        encoder_config: Still-image codec and pixel format
        progress: Optional rich progress display to report into
    """
    info = probe_video(input_file)

    from_ts = resolve_timestamp(start, info)
    to_ts = resolve_timestamp(end, info)
    validate_range(from_ts, to_ts, info)
    check_filename_pattern(pattern)
    logger.info(f"Range: timestamps {from_ts} to {'end' if to_ts == STREAM_END else to_ts}")

    output_path = Path(output_folder)
    output_path.mkdir(parents=True, exist_ok=True)

    with FrameSource(input_file, info, thread_count=thread_count) as source, \
            ImageEncoder(info.width, info.height, info.pixel_format, encoder_config) as encoder:
        source.seek(from_ts)
        first_index = timestamp_to_frame(from_ts, info)

        task = None
        total = None
        if progress is not None:
            last_ts = to_ts if to_ts != STREAM_END else info.end_timestamp
            total = max(last_ts - from_ts, 0) if last_ts is not None else None
            task = progress.add_task("Extracting frames...", total=total)

        summary = extract_range(source, encoder, from_ts, to_ts, first_index, output_path, pattern, progress, task)

        if progress is not None and task is not None and total is not None:
            progress.update(task, completed=total)

    if summary.skipped:
        logger.warning(f"Encoder produced no image for {summary.skipped} frame(s); they were not written")
    logger.info(f"Saved {summary.saved} frames to {output_path} (discarded {summary.discarded} before range start)")
    return summary


def main(
    input_file: str,
    output_folder: str,
    start: TimeSpec,
    end: TimeSpec,
    pattern: str = DEFAULT_PATTERN,
    thread_count: int = 0,
    encoder_config: Optional[EncoderConfig] = None,
) -> ExtractionSummary:
    console = Console(stderr=True)
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        return extract_frames(input_file, output_folder, start, end, pattern, thread_count, encoder_config, progress)
