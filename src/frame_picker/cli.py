"""Console script for frame_picker."""

import typer

from frame_picker.extract_frames.cli import extract_frames
from frame_picker.probe_video.cli import probe_video

VERSION = "0.1.0"

app = typer.Typer(help="A simple video frame picker")


@app.command()
def version():
    """Display version information."""
    typer.echo(f"Frame Picker v{VERSION}")
    raise typer.Exit()


app.command("extract")(extract_frames)
app.command("probe")(probe_video)


if __name__ == "__main__":
    app()
