"""CLI command for extract."""

import logging

import typer

from frame_picker.extract_frames.main import DEFAULT_PATTERN, main
from frame_picker.utils.cli import cli_error_handler, setup_logging, stderr_console
from frame_picker.utils.image_encoder import EncoderConfig
from frame_picker.utils.time_parse import parse_thread_count, parse_time

EXIT_BAD_ARGUMENT = 2

TIME_HELP = "possible format: [frame index, xx.xxs, [hh:]mm:ss[.mmm], end]"


@cli_error_handler
def extract_frames(
    input_file: str = typer.Argument(..., help="Path to the input video file"),
    output_folder: str = typer.Argument(".", help="Path to the output folder"),
    start: str = typer.Option("0", "--from", "-f", help=f"First frame to extract, {TIME_HELP}"),
    end: str = typer.Option("end", "--to", "-t", help=f"Last frame to extract, {TIME_HELP}"),
    pattern: str = typer.Option(DEFAULT_PATTERN, "--format", help="Filename format with one integer placeholder"),
    thread_count: str = typer.Option("auto", "--thread-count", metavar="auto|num", help="Thread count for the decoder"),
    encoder: str = typer.Option("mjpeg", "--encoder", help="Still-image encoder name"),
    pixel_format: str = typer.Option("yuvj420p", "--pixel-format", help="Pixel format fed to the encoder"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Extract a range of frames from a video as still images.

    The decoder seeks to the keyframe before the range start, so only the
    frames needed to reach the range are decoded.
    """
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        start_spec = parse_time(start)
        end_spec = parse_time(end)
        threads = parse_thread_count(thread_count)
    except ValueError as e:
        stderr_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=EXIT_BAD_ARGUMENT)

    logger.info(f"input: {input_file}, output: {output_folder}")
    summary = main(
        input_file,
        output_folder,
        start_spec,
        end_spec,
        pattern=pattern,
        thread_count=threads,
        encoder_config=EncoderConfig(encoder=encoder, format=pixel_format),
    )
    stderr_console.print(f"\n[bold green]Success![/bold green] {summary.saved} frames saved to: {output_folder}")
