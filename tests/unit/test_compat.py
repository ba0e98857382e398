"""Unit tests for codec/container compatibility tables."""

import pytest

from cytubegen.core.compat import (
    BITMAP_SUBTITLE_CODECS,
    CYTUBE_QUALITY_TIERS,
    AudioContainer,
    VideoContainer,
    find_audio_container,
    find_video_container,
    is_bitmap_subtitle,
    needs_experimental,
    snap_quality,
)


class TestVideoContainer:
    """Test video codec to container mapping."""

    @pytest.mark.parametrize("codec", ["av1", "vp8", "vp9"])
    def test_webm_codecs(self, codec):
        assert find_video_container(codec) is VideoContainer.WEBM

    @pytest.mark.parametrize("codec", ["h264", "hevc", "mpeg4", "mpeg2video"])
    def test_mp4_codecs(self, codec):
        assert find_video_container(codec) is VideoContainer.MP4

    def test_theora_is_ogg(self):
        assert find_video_container("theora") is VideoContainer.OGG

    @pytest.mark.parametrize("codec", ["vc1", "wmv3", "prores", ""])
    def test_unknown_codec_has_no_container(self, codec):
        """Unknown codecs resolve to nothing instead of raising."""
        assert find_video_container(codec) is None

    def test_accepted_audio(self):
        assert VideoContainer.MP4.acceptable_audio_codecs == {
            "aac", "alac", "flac", "opus", "mp3"
        }
        assert VideoContainer.WEBM.acceptable_audio_codecs == {"opus", "vorbis"}
        assert VideoContainer.OGG.acceptable_audio_codecs == {"opus", "vorbis", "flac"}

    def test_preferred_encoders(self):
        assert VideoContainer.MP4.preferred_audio_encoder == "aac"
        assert VideoContainer.WEBM.preferred_audio_encoder == "libopus"
        assert VideoContainer.OGG.preferred_audio_encoder == "libopus"

    def test_extension_and_mimetype(self):
        assert (VideoContainer.MP4.extension, VideoContainer.MP4.mimetype) == (
            "mp4", "video/mp4"
        )
        assert (VideoContainer.WEBM.extension, VideoContainer.WEBM.mimetype) == (
            "webm", "video/webm"
        )
        assert (VideoContainer.OGG.extension, VideoContainer.OGG.mimetype) == (
            "ogv", "video/ogg"
        )

    def test_flac_in_mp4_is_experimental(self):
        assert needs_experimental(VideoContainer.MP4, "flac")
        assert not needs_experimental(VideoContainer.OGG, "flac")
        assert not needs_experimental(VideoContainer.MP4, "aac")


class TestAudioContainer:
    """Test audio codec to audio-only container mapping."""

    @pytest.mark.parametrize(
        "codec,expected",
        [
            ("aac", AudioContainer.M4A),
            ("alac", AudioContainer.M4A),
            ("aac_latm", AudioContainer.M4A),
            ("opus", AudioContainer.OGG),
            ("vorbis", AudioContainer.OGG),
            ("flac", AudioContainer.OGG),
            ("mp3", AudioContainer.PSEUDO_M4A),
        ],
    )
    def test_known_codecs(self, codec, expected):
        assert find_audio_container(codec) is expected

    @pytest.mark.parametrize("codec", ["ac3", "eac3", "dts", "truehd", "pcm_s16le"])
    def test_unsupported_codecs(self, codec):
        assert find_audio_container(codec) is None

    def test_pseudo_m4a_is_labelled_as_mp4_audio(self):
        """PSEUDO_M4A only differs from M4A in how the file is produced."""
        assert AudioContainer.PSEUDO_M4A.extension == "m4a"
        assert AudioContainer.PSEUDO_M4A.mimetype == "audio/mp4"
        assert AudioContainer.OGG.mimetype == "audio/ogg"


class TestSubtitlesAndQuality:
    """Test subtitle and quality helpers."""

    def test_bitmap_subtitles(self):
        assert BITMAP_SUBTITLE_CODECS == {
            "dvb_subtitle", "dvd_subtitle", "hdmv_pgs_subtitle", "xsub"
        }
        for codec in BITMAP_SUBTITLE_CODECS:
            assert is_bitmap_subtitle(codec)
        assert not is_bitmap_subtitle("subrip")
        assert not is_bitmap_subtitle("ass")

    @pytest.mark.parametrize("tier", CYTUBE_QUALITY_TIERS)
    def test_tiers_snap_to_themselves(self, tier):
        assert snap_quality(tier) == tier

    @pytest.mark.parametrize(
        "height,expected",
        [(1088, 1080), (816, 720), (200, 240), (4320, 2160), (600, 540)],
    )
    def test_snap_to_nearest(self, height, expected):
        assert snap_quality(height) == expected

    def test_snap_tie_goes_to_lower_tier(self):
        assert snap_quality(900) == 720
        assert snap_quality(510) == 480
        assert snap_quality(630) == 540
