"""Transcode planning and manifest generation.

Given the tracks of one input file, decide which streams are copied and
which are re-encoded, which output files they land in, and what the CyTube
manifest must declare for each of them.
"""

from pathlib import Path
from typing import Optional, Sequence

from cytubegen.config import Config
from cytubegen.core.classifier import classify_tracks
from cytubegen.core.compat import (
    CYTUBE_QUALITY_TIERS,
    ENCODE_CHANNELS,
    FALLBACK_AUDIO_ENCODER,
    FALLBACK_EXTENSION,
    FALLBACK_MIMETYPE,
    FALLBACK_VIDEO_ENCODER,
    SUBTITLE_ENCODER,
    SUBTITLE_EXTENSION,
    SUBTITLE_MIMETYPE,
    AudioContainer,
    VideoContainer,
    find_audio_container,
    find_video_container,
    is_bitmap_subtitle,
    needs_experimental,
    snap_quality,
)
from cytubegen.errors import MissingScanlineCount, UnsupportedQuality, UnsupportedTrack
from cytubegen.models.manifest import AudioTrack, CytubeVideo, Source, TextTrack
from cytubegen.models.plan import StreamOperation, TranscodePlan
from cytubegen.models.track import ProbeResult, Track, TrackKind
from cytubegen.utils.language import (
    build_language_label,
    languages_match,
    normalize_language_code,
    to_cytube_language,
)
from cytubegen.utils.logger import get_logger

logger = get_logger(__name__)

UNKNOWN_LANGUAGE = "unknown"
UNKNOWN_SUBTITLE_NAME = "Unknown"


def score_audio(
    track: Track, container: Optional[VideoContainer], preferred_language: Optional[str]
) -> int:
    """Score an audio track as a candidate for the primary output.

    One point for a codec the video container accepts as-is (or when there
    is no container), one point for the preferred language (or when there
    is no preference).
    """
    score = 0
    if container is None or container.accepts_audio(track.codec):
        score += 1
    if preferred_language is None or languages_match(track.language, preferred_language):
        score += 1
    return score


def select_primary_audio(
    tracks: Sequence[Track],
    container: Optional[VideoContainer],
    preferred_language: Optional[str] = None,
) -> Optional[Track]:
    """Pick the audio track to mux alongside the video.

    The first track with the highest score wins; a later track only
    replaces the current pick with a strictly higher score.

    Args:
        tracks: Audio tracks in probe order
        container: Container chosen for the video stream, if any
        preferred_language: Requested language tag, if any

    Returns:
        Selected track, or None when there are no audio tracks
    """
    if not tracks:
        return None

    chosen = tracks[0]
    highest_score = 0
    for track in tracks:
        score = score_audio(track, container, preferred_language)
        if score > highest_score:
            chosen = track
            highest_score = score

    return chosen


class PlanBuilder:
    """Build the transcode plan and manifest for one probed file."""

    def __init__(self, config: Config):
        """Initialize plan builder.

        Args:
            config: Application configuration
        """
        self.url_prefix = config.manifest.url_prefix
        self.preferred_language = normalize_language_code(config.manifest.preferred_language)
        self.quality_policy = config.manifest.quality_policy

    def url_for(self, filename: str) -> str:
        """Manifest URL of an output file; the prefix is used verbatim."""
        return self.url_prefix + filename

    def build(
        self, probe: ProbeResult, media_file: Path
    ) -> tuple[TranscodePlan, CytubeVideo]:
        """Plan the transcode of a probed file and describe its outputs.

        Audio tracks other than the one muxed into ``main.<ext>`` become
        alternate audio files. This also happens when there is no main
        output at all (audio-only input, or video without audio), so such
        files still yield their audio tracks.

        Args:
            probe: Parsed ffprobe output of the file
            media_file: The input file, used for the fallback title

        Returns:
            Tuple of (plan, manifest)

        Raises:
            MissingScanlineCount: If the primary video track has no height
            UnsupportedQuality: If the height is not a CyTube quality tier
                and the quality policy is "strict"
        """
        classified = classify_tracks(probe.tracks)
        plan = TranscodePlan()
        sources: list[Source] = []
        audio_tracks: list[AudioTrack] = []
        text_tracks: list[TextTrack] = []

        primary_audio: Optional[Track] = None
        if classified.video:
            video = classified.video[0]
            if len(classified.video) > 1:
                logger.info(
                    "Ignoring additional video tracks",
                    used=video.index,
                    ignored=[t.index for t in classified.video[1:]],
                )

            container = find_video_container(video.codec)
            primary_audio = select_primary_audio(
                classified.audio, container, self.preferred_language
            )
            if primary_audio is None:
                logger.warning(
                    "No audio track to pair with video, skipping video source",
                    video_index=video.index,
                )
            else:
                sources.append(
                    self._plan_primary(plan, probe, video, primary_audio, container)
                )

        for track in classified.audio:
            if primary_audio is not None and track.index == primary_audio.index:
                # already muxed into the main output
                continue
            try:
                audio_tracks.append(self._plan_secondary_audio(plan, track))
            except UnsupportedTrack as e:
                logger.info("Dropping audio track", index=e.index, codec=e.codec, reason=e.reason)

        for track in classified.subtitle:
            if is_bitmap_subtitle(track.codec):
                logger.debug("Dropping bitmap subtitle", index=track.index, codec=track.codec)
                continue
            text_tracks.append(self._plan_subtitle(plan, track))

        manifest = CytubeVideo(
            title=probe.title if probe.title is not None else media_file.stem,
            duration=probe.duration,
            sources=sources,
            audioTracks=audio_tracks,
            textTracks=text_tracks,
        )

        logger.info(
            "Transcode plan built",
            file=str(media_file),
            operations=len(plan),
            outputs=plan.destinations(),
            sources=len(sources),
            audio_tracks=len(audio_tracks),
            text_tracks=len(text_tracks),
        )
        return plan, manifest

    def _plan_primary(
        self,
        plan: TranscodePlan,
        probe: ProbeResult,
        video: Track,
        audio: Track,
        container: Optional[VideoContainer],
    ) -> Source:
        """Plan ``main.<ext>`` holding the video and the chosen audio."""
        quality = self._quality(video)

        if container is None:
            # No browser-playable container for this codec, re-encode to AV1
            filename = f"main.{FALLBACK_EXTENSION}"
            plan.add(StreamOperation.encode(
                video.index, TrackKind.VIDEO, filename, FALLBACK_VIDEO_ENCODER
            ))
            plan.add(StreamOperation.encode(
                audio.index, TrackKind.AUDIO, filename, FALLBACK_AUDIO_ENCODER,
                channels=ENCODE_CHANNELS,
            ))
            logger.info(
                "Unsupported video codec, re-encoding",
                video_codec=video.codec,
                video_encoder=FALLBACK_VIDEO_ENCODER,
                audio_encoder=FALLBACK_AUDIO_ENCODER,
            )
            content_type = FALLBACK_MIMETYPE
        else:
            filename = f"main.{container.extension}"
            plan.add(StreamOperation.copy(video.index, TrackKind.VIDEO, filename))
            if container.accepts_audio(audio.codec):
                plan.add(StreamOperation.copy(
                    audio.index, TrackKind.AUDIO, filename,
                    allow_experimental=needs_experimental(container, audio.codec),
                ))
            else:
                plan.add(StreamOperation.encode(
                    audio.index, TrackKind.AUDIO, filename,
                    container.preferred_audio_encoder, channels=ENCODE_CHANNELS,
                ))
            logger.debug(
                "Remuxing video",
                video_codec=video.codec,
                audio_codec=audio.codec,
                container=container.value,
                audio_copied=container.accepts_audio(audio.codec),
            )
            content_type = container.mimetype

        return Source(
            url=self.url_for(filename),
            contentType=content_type,
            quality=quality,
            # TODO: probe the video stream's own bitrate instead of the container's
            bitrate=probe.bitrate,
        )

    def _quality(self, video: Track) -> int:
        """Manifest quality for a video track, per the quality policy."""
        if video.scanline_count is None:
            raise MissingScanlineCount(video.index)

        height = video.scanline_count
        if height in CYTUBE_QUALITY_TIERS:
            return height
        if self.quality_policy == "strict":
            raise UnsupportedQuality(height, CYTUBE_QUALITY_TIERS)

        quality = snap_quality(height)
        logger.info("Snapped quality to accepted tier", coded_height=height, quality=quality)
        return quality

    def _audio_container(self, track: Track) -> AudioContainer:
        container = find_audio_container(track.codec)
        if container is None:
            raise UnsupportedTrack(track.index, track.codec, "no accepted audio container")
        return container

    def _plan_secondary_audio(self, plan: TranscodePlan, track: Track) -> AudioTrack:
        """Plan an alternate audio file, remuxed without re-encoding."""
        container = self._audio_container(track)
        language = track.language or UNKNOWN_LANGUAGE
        filename = f"audio_{track.index}_{language}.{container.extension}"

        plan.add(StreamOperation.copy(
            track.index, TrackKind.AUDIO, filename, output_format=container.muxer
        ))
        return AudioTrack(
            url=self.url_for(filename),
            label=build_language_label(language, track.title),
            language=to_cytube_language(language),
            contentType=container.mimetype,
        )

    def _plan_subtitle(self, plan: TranscodePlan, track: Track) -> TextTrack:
        """Plan a WebVTT conversion of a text subtitle."""
        language = track.language or UNKNOWN_LANGUAGE
        filename = f"sub_{track.index}_{language}.{SUBTITLE_EXTENSION}"

        plan.add(StreamOperation.encode(
            track.index, TrackKind.SUBTITLE, filename, SUBTITLE_ENCODER
        ))

        if track.language:
            name = build_language_label(track.language, track.title)
        elif track.title:
            name = track.title
        else:
            name = UNKNOWN_SUBTITLE_NAME

        return TextTrack(
            url=self.url_for(filename),
            name=name,
            contentType=SUBTITLE_MIMETYPE,
        )
