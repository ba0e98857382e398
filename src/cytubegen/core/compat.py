"""Codec and container compatibility tables for CyTube playback.

CyTube never inspects the media it is pointed at: it only sees the content
type declared in the manifest. These tables decide which container a stream
can be remuxed into and what the manifest may truthfully declare for it.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional

# Quality values CyTube accepts for a video source
CYTUBE_QUALITY_TIERS: tuple[int, ...] = (240, 360, 480, 540, 720, 1080, 1440, 2160)

# Image-based subtitles; ffmpeg cannot OCR them into WebVTT
BITMAP_SUBTITLE_CODECS = frozenset({
    "dvb_subtitle",
    "dvd_subtitle",
    "hdmv_pgs_subtitle",
    "xsub",
})

SUBTITLE_ENCODER = "webvtt"
SUBTITLE_EXTENSION = "vtt"
SUBTITLE_MIMETYPE = "text/vtt"

# Used when the source video codec fits no browser-playable container
FALLBACK_VIDEO_ENCODER = "libsvtav1"
FALLBACK_AUDIO_ENCODER = "libopus"
FALLBACK_EXTENSION = "webm"
FALLBACK_MIMETYPE = "video/webm"

# Re-encoded audio is downmixed to stereo to keep transcodes fast
ENCODE_CHANNELS = 2


class VideoContainer(Enum):
    """Video containers CyTube accepts."""

    MP4 = "mp4"
    WEBM = "webm"
    OGG = "ogg"

    @property
    def spec(self) -> "VideoContainerSpec":
        return VIDEO_CONTAINER_SPECS[self]

    @property
    def extension(self) -> str:
        return self.spec.extension

    @property
    def mimetype(self) -> str:
        return self.spec.mimetype

    @property
    def acceptable_audio_codecs(self) -> frozenset[str]:
        return self.spec.audio_codecs

    @property
    def preferred_audio_encoder(self) -> str:
        return self.spec.audio_encoder

    def accepts_audio(self, codec: str) -> bool:
        """Whether an audio stream of this codec can be copied in as-is."""
        return codec in self.spec.audio_codecs


@dataclass(frozen=True)
class VideoContainerSpec:
    """Static facts about a video container."""

    extension: str
    mimetype: str
    audio_codecs: frozenset[str]
    audio_encoder: str


VIDEO_CONTAINER_SPECS = MappingProxyType({
    VideoContainer.MP4: VideoContainerSpec(
        extension="mp4",
        mimetype="video/mp4",
        audio_codecs=frozenset({"aac", "alac", "flac", "opus", "mp3"}),
        audio_encoder="aac",
    ),
    VideoContainer.WEBM: VideoContainerSpec(
        extension="webm",
        mimetype="video/webm",
        audio_codecs=frozenset({"opus", "vorbis"}),
        audio_encoder="libopus",
    ),
    VideoContainer.OGG: VideoContainerSpec(
        extension="ogv",
        mimetype="video/ogg",
        audio_codecs=frozenset({"opus", "vorbis", "flac"}),
        audio_encoder="libopus",
    ),
})

VIDEO_CODEC_CONTAINERS = MappingProxyType({
    "av1": VideoContainer.WEBM,
    "vp8": VideoContainer.WEBM,
    "vp9": VideoContainer.WEBM,
    "h264": VideoContainer.MP4,
    "hevc": VideoContainer.MP4,
    "mpeg4": VideoContainer.MP4,  # MPEG-4 Part 2
    "mpeg2video": VideoContainer.MP4,
    "theora": VideoContainer.OGG,
})


class AudioContainer(Enum):
    """Audio-only containers CyTube accepts.

    PSEUDO_M4A is a plain MP4 file holding only audio. ffmpeg refuses to
    put anything but AAC/ALAC in a real M4A, but browsers happily play an
    MP4-branded file declared as audio/mp4, which lets MP3 through.
    """

    M4A = "m4a"
    OGG = "ogg"
    PSEUDO_M4A = "pseudo_m4a"

    @property
    def extension(self) -> str:
        return AUDIO_CONTAINER_FORMATS[self][0]

    @property
    def mimetype(self) -> str:
        return AUDIO_CONTAINER_FORMATS[self][1]

    @property
    def muxer(self) -> Optional[str]:
        """ffmpeg muxer to force, or None to let the extension decide."""
        return AUDIO_CONTAINER_FORMATS[self][2]


AUDIO_CONTAINER_FORMATS = MappingProxyType({
    AudioContainer.M4A: ("m4a", "audio/mp4", None),
    AudioContainer.OGG: ("ogg", "audio/ogg", None),
    # .m4a selects the ipod muxer, which rejects MP3
    AudioContainer.PSEUDO_M4A: ("m4a", "audio/mp4", "mp4"),
})

# FLAC has no accepted container of its own, but Ogg carries it fine
AUDIO_CODEC_CONTAINERS = MappingProxyType({
    "aac": AudioContainer.M4A,
    "alac": AudioContainer.M4A,
    "aac_latm": AudioContainer.M4A,
    "opus": AudioContainer.OGG,
    "vorbis": AudioContainer.OGG,
    "flac": AudioContainer.OGG,
    "mp3": AudioContainer.PSEUDO_M4A,
})


def find_video_container(codec: str) -> Optional[VideoContainer]:
    """Container a video stream of this codec can be remuxed into, if any."""
    return VIDEO_CODEC_CONTAINERS.get(codec)


def find_audio_container(codec: str) -> Optional[AudioContainer]:
    """Audio-only container for a stream of this codec, if any."""
    return AUDIO_CODEC_CONTAINERS.get(codec)


def is_bitmap_subtitle(codec: str) -> bool:
    return codec in BITMAP_SUBTITLE_CODECS


def needs_experimental(container: VideoContainer, audio_codec: str) -> bool:
    """ffmpeg treats FLAC in MP4 as experimental and wants explicit consent."""
    return container is VideoContainer.MP4 and audio_codec == "flac"


def snap_quality(scanline_count: int) -> int:
    """Nearest accepted quality tier; ties go to the lower tier."""
    return min(CYTUBE_QUALITY_TIERS, key=lambda tier: (abs(tier - scanline_count), tier))
