"""Transcode plan data models."""

from dataclasses import dataclass, field
from typing import Literal, Optional

from cytubegen.models.track import TrackKind


@dataclass(frozen=True)
class StreamOperation:
    """One input stream routed into one output file."""

    index: int  # Source stream index
    kind: TrackKind
    action: Literal["copy", "encode"]
    destination: str  # File name relative to the output directory
    codec: Optional[str] = None  # Target encoder for "encode"
    channels: Optional[int] = None  # Downmix target for "encode"
    allow_experimental: bool = False  # e.g. FLAC inside MP4
    output_format: Optional[str] = None  # ffmpeg muxer, when the extension picks the wrong one

    @property
    def map_spec(self) -> str:
        """ffmpeg -map argument selecting this stream from the first input."""
        return f"0:{self.index}"

    @property
    def is_copy(self) -> bool:
        return self.action == "copy"

    @classmethod
    def copy(
        cls,
        index: int,
        kind: TrackKind,
        destination: str,
        allow_experimental: bool = False,
        output_format: Optional[str] = None,
    ) -> "StreamOperation":
        """Remux a stream without touching its bits."""
        return cls(
            index=index,
            kind=kind,
            action="copy",
            destination=destination,
            allow_experimental=allow_experimental,
            output_format=output_format,
        )

    @classmethod
    def encode(
        cls,
        index: int,
        kind: TrackKind,
        destination: str,
        codec: str,
        channels: Optional[int] = None,
    ) -> "StreamOperation":
        """Re-encode a stream with the given encoder."""
        return cls(
            index=index,
            kind=kind,
            action="encode",
            destination=destination,
            codec=codec,
            channels=channels,
        )

    def __str__(self) -> str:
        """Human-readable representation."""
        if self.is_copy:
            how = "copy"
        else:
            how = f"encode {self.codec}"
            if self.channels:
                how += f" {self.channels}ch"
        return f"{self.map_spec} -> {self.destination} ({how})"


@dataclass
class TranscodePlan:
    """Ordered stream operations for a single ffmpeg invocation."""

    operations: list[StreamOperation] = field(default_factory=list)

    def add(self, operation: StreamOperation) -> None:
        self.operations.append(operation)

    def destinations(self) -> list[str]:
        """Output file names in order of first appearance."""
        return list(self.by_destination())

    def by_destination(self) -> dict[str, list[StreamOperation]]:
        """Group operations per output file, preserving plan order."""
        outputs: dict[str, list[StreamOperation]] = {}
        for operation in self.operations:
            outputs.setdefault(operation.destination, []).append(operation)
        return outputs

    def __len__(self) -> int:
        return len(self.operations)

    def __bool__(self) -> bool:
        return bool(self.operations)
