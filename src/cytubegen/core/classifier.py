"""Track partitioning by kind."""

from dataclasses import dataclass, field
from typing import Iterable

from cytubegen.models.track import Track, TrackKind


@dataclass(frozen=True)
class ClassifiedTracks:
    """Tracks grouped by kind, each group in probe order."""

    video: tuple[Track, ...] = field(default_factory=tuple)
    audio: tuple[Track, ...] = field(default_factory=tuple)
    subtitle: tuple[Track, ...] = field(default_factory=tuple)


def classify_tracks(tracks: Iterable[Track]) -> ClassifiedTracks:
    """Stable partition of tracks into video, audio and subtitle groups."""
    groups: dict[TrackKind, list[Track]] = {kind: [] for kind in TrackKind}
    for track in tracks:
        groups[track.kind].append(track)

    return ClassifiedTracks(
        video=tuple(groups[TrackKind.VIDEO]),
        audio=tuple(groups[TrackKind.AUDIO]),
        subtitle=tuple(groups[TrackKind.SUBTITLE]),
    )
