"""Shared Pydantic models for stream metadata and range selection."""

from enum import Enum
from fractions import Fraction
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class VideoInfo(BaseModel):
    """Video stream information extracted by the probe."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    stream_index: int = Field(..., ge=0, description="Index of the selected video stream")
    width: int = Field(..., ge=0, description="Frame width in pixels")
    height: int = Field(..., ge=0, description="Frame height in pixels")
    pixel_format: Optional[str] = Field(None, description="Decoder pixel format (e.g., yuv420p)")
    frame_rate: Fraction = Field(..., description="Average frames per second")
    time_base: Fraction = Field(..., description="Seconds per timestamp tick")
    start_time: Optional[int] = Field(None, description="First presented timestamp, None if unknown")
    duration: Optional[int] = Field(None, ge=0, description="Stream duration in ticks")
    frame_count: Optional[int] = Field(None, ge=0, description="Container reported frame count")
    codec_name: str = Field("unknown", description="Decoder name")

    @field_validator("frame_rate", "time_base")
    @classmethod
    def must_be_positive(cls, value: Fraction) -> Fraction:
        if value <= 0:
            raise ValueError("must be strictly positive")
        return value

    @field_serializer("frame_rate", "time_base")
    def serialize_fraction(self, value: Fraction) -> str:
        return str(value)

    @property
    def start_offset(self) -> int:
        return self.start_time if self.start_time is not None else 0

    @property
    def end_timestamp(self) -> Optional[int]:
        """Last valid timestamp of the stream, or None when the duration is unknown."""
        if self.duration is None:
            return None
        return self.start_offset + self.duration


class TimeKind(str, Enum):
    """How a range bound is expressed."""
    FRAME = "frame"
    MILLISECOND = "millisecond"
    END = "end"


class TimeSpec(BaseModel):
    """A resolved range bound as handed over by the CLI."""

    model_config = ConfigDict(frozen=True)

    kind: TimeKind
    value: int = Field(0, ge=0)


class ExtractionSummary(BaseModel):
    """Outcome of one extraction run."""
    from_timestamp: int
    to_timestamp: int
    first_index: int
    saved: int = 0
    skipped: int = 0
    discarded: int = 0
