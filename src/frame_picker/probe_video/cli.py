"""CLI command for probe."""

import typer

from frame_picker.probe_video.main import main
from frame_picker.utils.cli import cli_error_handler, setup_logging


@cli_error_handler
def probe_video(
    input_file: str = typer.Argument(..., help="Path to the input video file"),
    as_json: bool = typer.Option(False, "--json", help="Print the stream description as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Show the video stream that frames would be extracted from.
    """
    setup_logging(verbose)
    main(input_file, as_json=as_json)
