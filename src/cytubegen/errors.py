"""Exceptions raised while probing, planning and transcoding media files.

Structural problems (unreadable input, ffprobe failures, malformed probe
output) abort the whole operation. ``UnsupportedTrack`` is the only
non-fatal error: the planner catches it and drops the offending track.
"""

from typing import Optional


class CytubeGenError(Exception):
    """Base exception for cytubegen errors."""

    def __init__(self, message: str) -> None:
        """Initialize error.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class ProbeUnavailable(CytubeGenError):
    """Raised when the input file cannot be read before invoking ffprobe."""

    def __init__(self, file_path: str, reason: str) -> None:
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Cannot probe '{file_path}': {reason}")


class ProbeFailed(CytubeGenError):
    """Raised when ffprobe exits with a non-zero status or times out."""

    def __init__(
        self, file_path: str, returncode: Optional[int], stderr: Optional[str] = None
    ) -> None:
        self.file_path = file_path
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            message = f"ffprobe timed out on '{file_path}'"
        else:
            message = f"ffprobe returned {returncode} for '{file_path}'"
        super().__init__(message)


class ParseError(CytubeGenError):
    """Raised when a mandatory stream field is missing or unparsable."""

    def __init__(self, field: str, line: str) -> None:
        """Initialize parse error.

        Args:
            field: Name of the missing or malformed field.
            line: The offending probe output line.
        """
        self.field = field
        self.line = line
        super().__init__(f"Missing or invalid '{field}' in probe line: {line!r}")


class UnsupportedTrack(CytubeGenError):
    """Raised when a track's codec has no accepted container.

    Non-fatal: the track is dropped and planning continues.
    """

    def __init__(self, index: int, codec: str, reason: str) -> None:
        self.index = index
        self.codec = codec
        self.reason = reason
        super().__init__(f"Track {index} ({codec}) is unsupported: {reason}")


class MissingScanlineCount(CytubeGenError):
    """Raised when the primary video track reports no coded height."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Video track {index} has no coded height")


class UnsupportedQuality(CytubeGenError):
    """Raised under the strict quality policy for a non-tier scanline count."""

    def __init__(self, scanline_count: int, accepted: tuple[int, ...]) -> None:
        self.scanline_count = scanline_count
        self.accepted = accepted
        tiers = ", ".join(str(q) for q in accepted)
        super().__init__(
            f"Quality {scanline_count} is not one of the accepted values ({tiers})"
        )


class TranscodeFailed(CytubeGenError):
    """Raised when ffmpeg cannot be run, exits with an error or times out."""

    def __init__(
        self,
        file_path: str,
        returncode: Optional[int],
        stderr: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.file_path = file_path
        self.returncode = returncode
        self.stderr = stderr
        if reason is not None:
            message = f"Cannot transcode '{file_path}': {reason}"
        elif returncode is None:
            message = f"ffmpeg timed out on '{file_path}'"
        else:
            message = f"ffmpeg returned {returncode} for '{file_path}'"
        super().__init__(message)
