"""Stream inspection using ffprobe."""

import os
import subprocess
from pathlib import Path

from cytubegen.config import ToolsConfig
from cytubegen.core.parser import parse_probe_output
from cytubegen.errors import ProbeFailed, ProbeUnavailable
from cytubegen.models.track import ProbeResult
from cytubegen.utils.logger import get_logger

logger = get_logger(__name__)

SHOW_ENTRIES = (
    "stream_tags=title,language"
    ":stream=index,codec_type,codec_name,coded_height"
    ":stream_disposition="
    ":format=duration,bit_rate"
    ":format_tags=title"
)


class Prober:
    """Run ffprobe on a media file and parse its output."""

    def __init__(self, config: ToolsConfig):
        """Initialize prober.

        Args:
            config: External tool configuration
        """
        self.ffprobe = config.ffprobe
        self.timeout_seconds = config.probe_timeout_seconds

    def build_command(self, file_path: Path) -> list[str]:
        """Build the ffprobe command line for a file."""
        return [
            self.ffprobe,
            str(file_path),
            "-of",
            "compact",
            "-hide_banner",
            "-show_streams",
            "-show_format",
            "-show_entries",
            SHOW_ENTRIES,
        ]

    def run(self, file_path: Path) -> str:
        """Run ffprobe and return its raw output.

        Raises:
            ProbeUnavailable: If the file is missing or unreadable
            ProbeFailed: If ffprobe fails or times out
        """
        # ffprobe must never see a missing or unreadable input
        if not file_path.exists():
            raise ProbeUnavailable(str(file_path), "file not found")
        if not file_path.is_file():
            raise ProbeUnavailable(str(file_path), "not a regular file")
        if not os.access(file_path, os.R_OK):
            raise ProbeUnavailable(str(file_path), "permission denied")

        cmd = self.build_command(file_path)
        logger.debug("Running ffprobe", file=str(file_path), command=cmd)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            logger.error("ffprobe timeout", file=str(file_path), timeout=self.timeout_seconds)
            raise ProbeFailed(str(file_path), None) from None
        except FileNotFoundError:
            raise ProbeUnavailable(str(file_path), f"{self.ffprobe} not found") from None

        if result.returncode != 0:
            logger.error(
                "ffprobe failed",
                file=str(file_path),
                returncode=result.returncode,
                stderr=result.stderr[:500],
            )
            raise ProbeFailed(str(file_path), result.returncode, result.stderr)

        return result.stdout

    def probe(self, file_path: Path) -> ProbeResult:
        """Extract track and format facts from a media file.

        Args:
            file_path: Path to media file

        Returns:
            ProbeResult for the file

        Raises:
            ProbeUnavailable: If the file is missing or unreadable
            ProbeFailed: If ffprobe fails or times out
            ParseError: If ffprobe's output lacks mandatory fields
        """
        logger.debug("Probing file", file=str(file_path))

        result = parse_probe_output(self.run(file_path))

        logger.info(
            "File probed",
            file=str(file_path),
            track_count=len(result.tracks),
            codecs=[t.codec for t in result.tracks],
            languages=[t.language for t in result.tracks if t.language],
            duration=result.duration,
        )
        return result
