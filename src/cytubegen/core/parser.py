"""Parsing of ffprobe compact output.

ffprobe is run with ``-of compact``, which prints one record per line::

    stream|index=0|codec_name=h264|codec_type=video|coded_height=1080
    stream|index=1|codec_name=aac|codec_type=audio|tag:language=jpn
    format|duration=1420.032000|bit_rate=5120344|tag:title=Episode 1

These functions are pure: no I/O besides logging.
"""

from typing import Iterator, Optional

from cytubegen.errors import ParseError
from cytubegen.models.track import ProbeResult, Track, TrackKind
from cytubegen.utils.logger import get_logger

logger = get_logger(__name__)

NOT_AVAILABLE = "N/A"
MAX_LANGUAGE_LENGTH = 4

# Escapes written by ffprobe's default "c" escaping mode
UNESCAPES = {"n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f"}


def split_fields(text: str) -> list[str]:
    """Split on unescaped ``|`` and undo ffprobe's backslash escapes."""
    fields: list[str] = []
    current: list[str] = []
    chars = iter(text)
    for char in chars:
        if char == "\\":
            escaped = next(chars, "\\")
            current.append(UNESCAPES.get(escaped, escaped))
        elif char == "|":
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def split_record(line: str) -> tuple[str, Iterator[tuple[str, str]]]:
    """Split a compact record into its kind and key/value pairs.

    Tokens without ``=`` are logged and skipped. Values may themselves
    contain ``=``; only the first one separates key from value. Escaped
    pipes (``\\|``) stay inside their value.
    """
    kind, *tokens = split_fields(line)

    def pairs() -> Iterator[tuple[str, str]]:
        for token in tokens:
            key, sep, value = token.partition("=")
            if not sep:
                logger.debug("Skipping malformed probe token", token=token, line=line)
                continue
            yield key, value

    return kind, pairs()


def _parse_int(value: str) -> Optional[int]:
    if value == NOT_AVAILABLE:
        return None
    return int(value)


def _parse_format(pairs: Iterator[tuple[str, str]], facts: dict) -> None:
    for key, value in pairs:
        try:
            if key == "duration":
                if value != NOT_AVAILABLE:
                    facts["duration"] = float(value)
            elif key == "bit_rate":
                bitrate = _parse_int(value)
                if bitrate is not None:
                    if bitrate < 0:
                        raise ValueError("negative bitrate")
                    facts["bitrate"] = bitrate // 1000
            elif key == "tag:title":
                facts["title"] = value
            else:
                logger.debug("Unrecognized format key", key=key)
        except ValueError:
            logger.warning("Ignoring unparsable format value", key=key, value=value)


def parse_stream_line(line: str, pairs: Iterator[tuple[str, str]]) -> Optional[Track]:
    """Build a Track from the pairs of a ``stream`` record.

    Returns:
        Track, or None when the stream is not video, audio or subtitle

    Raises:
        ParseError: If codec_type, index or codec_name is missing or invalid
    """
    kind: Optional[TrackKind] = None
    saw_kind = False
    index: Optional[int] = None
    codec: Optional[str] = None
    scanline_count: Optional[int] = None
    language: Optional[str] = None
    title: Optional[str] = None

    for key, value in pairs:
        if key == "codec_type":
            saw_kind = True
            kind = TrackKind.parse(value)
            if kind is None:
                # data, attachment, etc.
                logger.debug("Skipping non-media stream", codec_type=value)
                return None
        elif key == "index":
            try:
                index = int(value)
            except ValueError:
                raise ParseError("index", line) from None
            if index < 0:
                raise ParseError("index", line)
        elif key == "codec_name":
            codec = value.lower()
        elif key == "coded_height":
            try:
                scanline_count = _parse_int(value)
            except ValueError:
                logger.warning("Ignoring unparsable coded_height", value=value)
                scanline_count = None
            if scanline_count is not None and scanline_count <= 0:
                scanline_count = None
        elif key == "tag:language":
            language = value[:MAX_LANGUAGE_LENGTH] or None
        elif key == "tag:title":
            title = value
        else:
            logger.debug("Unrecognized stream key", key=key)

    if not saw_kind:
        raise ParseError("codec_type", line)
    if index is None:
        raise ParseError("index", line)
    if not codec or codec == NOT_AVAILABLE.lower():
        raise ParseError("codec_name", line)

    return Track(
        index=index,
        kind=kind,
        codec=codec,
        scanline_count=scanline_count if kind is TrackKind.VIDEO else None,
        language=language,
        title=title,
    )


def parse_probe_output(output: str) -> ProbeResult:
    """Parse ffprobe compact output into a ProbeResult.

    Args:
        output: Text printed by ffprobe

    Returns:
        ProbeResult with tracks in probe order

    Raises:
        ParseError: If a media stream lacks a mandatory field
    """
    tracks: list[Track] = []
    facts: dict = {}

    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        kind, pairs = split_record(line)
        if kind == "format":
            _parse_format(pairs, facts)
        elif kind == "stream":
            track = parse_stream_line(line, pairs)
            if track is not None:
                tracks.append(track)
        else:
            logger.debug("Ignoring probe record", kind=kind)

    result = ProbeResult(tracks=tuple(tracks), **facts)

    logger.debug(
        "Probe output parsed",
        track_count=len(result.tracks),
        duration=result.duration,
        bitrate=result.bitrate,
        title=result.title,
    )
    return result
