"""Error kinds raised by the probe, decode and encode stages."""

from av.error import DecoderNotFoundError, EncoderNotFoundError, FFmpegError


class FramePickerError(Exception):
    """Base class for every error surfaced by frame_picker."""


class InputNotFound(FramePickerError):
    """The input path does not exist or is not a readable file."""


class InvalidRange(FramePickerError):
    """The resolved frame range is empty, negative or past the stream end."""


class InvalidFilenamePattern(FramePickerError):
    """The output filename pattern cannot format a single frame index."""


class NoSuitableStream(FramePickerError):
    """No usable video stream was found in the container."""


class UnsupportedCodec(FramePickerError):
    """No decoder or encoder is registered for the requested codec."""


class ContextAllocationFailed(FramePickerError):
    """A decoder or encoder context could not be created or opened."""


class ConverterUnavailable(FramePickerError):
    """The pixel format converter cannot handle the source/target pair."""


class LibraryError(FramePickerError):
    """Any other failure reported by libav, with its code and description."""

    def __init__(self, code: int | None, description: str):
        self.code = code
        self.description = description
        super().__init__(f"libav error {code}: {description}" if code is not None else description)


def translate_av_error(exc: FFmpegError) -> FramePickerError:
    """Map a PyAV exception onto the frame_picker error kinds."""
    description = exc.strerror or str(exc)
    if isinstance(exc, FileNotFoundError):
        return InputNotFound(f"Cannot open input: {exc.filename or description}")
    if isinstance(exc, (DecoderNotFoundError, EncoderNotFoundError)):
        return UnsupportedCodec(description)
    return LibraryError(exc.errno, description)
