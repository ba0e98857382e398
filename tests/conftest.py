"""Shared pytest fixtures for cytubegen tests."""

from pathlib import Path

import pytest

from cytubegen.config import Config, ManifestConfig
from cytubegen.models.track import ProbeResult, Track, TrackKind


SAMPLE_PROBE_OUTPUT = """\
stream|index=0|codec_name=h264|codec_type=video|coded_height=1080
stream|index=1|codec_name=aac|codec_type=audio|tag:language=jpn
stream|index=2|codec_name=ac3|codec_type=audio|tag:language=eng|tag:title=Dub
stream|index=3|codec_name=opus|codec_type=audio|tag:language=eng|tag:title=Commentary
stream|index=4|codec_name=ass|codec_type=subtitle|tag:language=eng
stream|index=5|codec_name=hdmv_pgs_subtitle|codec_type=subtitle|tag:language=eng
stream|index=6|codec_name=ttf|codec_type=attachment|tag:filename=font.ttf
format|duration=1420.032000|bit_rate=5120344|tag:title=Episode 1
"""


@pytest.fixture
def default_config():
    """Create a default configuration for testing."""
    return Config(manifest=ManifestConfig(url_prefix="https://media.example.com/ep1/"))


@pytest.fixture
def english_config():
    """Create a configuration preferring English audio."""
    return Config(
        manifest=ManifestConfig(
            url_prefix="https://media.example.com/ep1/",
            preferred_language="eng",
        )
    )


@pytest.fixture
def media_file():
    """Path of the input file being planned (never opened)."""
    return Path("/media/anime/Episode 1.mkv")


@pytest.fixture
def sample_probe_output():
    """ffprobe compact output for a typical anime episode."""
    return SAMPLE_PROBE_OUTPUT


@pytest.fixture
def sample_tracks():
    """Tracks matching SAMPLE_PROBE_OUTPUT (minus the attachment)."""
    return (
        Track(0, TrackKind.VIDEO, "h264", scanline_count=1080),
        Track(1, TrackKind.AUDIO, "aac", language="jpn"),
        Track(2, TrackKind.AUDIO, "ac3", language="eng", title="Dub"),
        Track(3, TrackKind.AUDIO, "opus", language="eng", title="Commentary"),
        Track(4, TrackKind.SUBTITLE, "ass", language="eng"),
        Track(5, TrackKind.SUBTITLE, "hdmv_pgs_subtitle", language="eng"),
    )


@pytest.fixture
def sample_probe(sample_tracks):
    """ProbeResult matching SAMPLE_PROBE_OUTPUT."""
    return ProbeResult(
        tracks=sample_tracks,
        title="Episode 1",
        duration=1420.032,
        bitrate=5120,
    )
