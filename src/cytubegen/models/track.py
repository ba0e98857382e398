"""Media track data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TrackKind(Enum):
    """Stream kinds the planner knows how to handle."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"

    @classmethod
    def parse(cls, value: str) -> Optional["TrackKind"]:
        """Map an ffprobe codec_type to a TrackKind.

        Returns None for data, attachment and other non-media streams.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Track:
    """Represents one stream reported by ffprobe."""

    index: int  # FFprobe stream index, used by ffmpeg's -map
    kind: TrackKind
    codec: str  # Codec name (e.g., "h264", "aac")
    scanline_count: Optional[int] = None  # Coded height, video only
    language: Optional[str] = None  # Language tag (e.g., "eng", "jpn")
    title: Optional[str] = None  # Track title/name

    def __str__(self) -> str:
        """Human-readable representation."""
        lang_part = f" {self.language}" if self.language else ""
        title_part = f" ({self.title})" if self.title else ""
        return f"Track {self.index}: {self.kind.value}{lang_part} {self.codec}{title_part}"


@dataclass(frozen=True)
class ProbeResult:
    """Container-level facts and tracks of one input file."""

    tracks: tuple[Track, ...] = field(default_factory=tuple)
    title: Optional[str] = None
    duration: float = 0.0  # Seconds
    bitrate: int = 0  # Overall bitrate in kbps (ffprobe reports bit/s)
