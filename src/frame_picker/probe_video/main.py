"""Core logic for probe: describe the video stream frames would be extracted from."""

from rich.console import Console
from rich.table import Table

from frame_picker.models.video_info import VideoInfo
from frame_picker.utils.time_model import timestamp_to_milliseconds
from frame_picker.utils.video import probe_video


def build_table(info: VideoInfo) -> Table:
    table = Table(title="Video stream", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    end = info.end_timestamp
    duration = f"{info.duration} ticks ({timestamp_to_milliseconds(end, info) / 1000:.3f}s)" if end is not None else "unknown"

    table.add_row("Stream index", str(info.stream_index))
    table.add_row("Codec", info.codec_name)
    table.add_row("Resolution", f"{info.width}x{info.height}")
    table.add_row("Pixel format", info.pixel_format or "unknown")
    table.add_row("Frame rate", f"{info.frame_rate} ({float(info.frame_rate):.3f} fps)")
    table.add_row("Time base", str(info.time_base))
    table.add_row("Start time", str(info.start_time) if info.start_time is not None else "unknown")
    table.add_row("Duration", duration)
    table.add_row("Frame count", str(info.frame_count) if info.frame_count is not None else "unknown")
    return table


def main(input_file: str, as_json: bool = False) -> VideoInfo:
    """Entry point called from cli.py."""
    info = probe_video(input_file)
    console = Console()
    if as_json:
        console.print_json(info.model_dump_json())
    else:
        console.print(build_table(info))
    return info
