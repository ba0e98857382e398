"""Pydantic models for the CyTube custom media manifest.

Field names follow CyTube's camelCase convention so that ``model_dump``
produces the document the server expects without aliasing.
"""

from typing import List

from pydantic import BaseModel, Field


class Source(BaseModel):
    """A playable video source."""

    url: str
    contentType: str
    quality: int
    bitrate: int  # kbps

    @property
    def content_type(self) -> str:
        """Get content type (snake_case property)."""
        return self.contentType


class AudioTrack(BaseModel):
    """An alternate audio track."""

    url: str
    label: str
    language: str
    contentType: str

    @property
    def content_type(self) -> str:
        """Get content type (snake_case property)."""
        return self.contentType


class TextTrack(BaseModel):
    """A subtitle track."""

    url: str
    name: str
    contentType: str

    @property
    def content_type(self) -> str:
        """Get content type (snake_case property)."""
        return self.contentType


class CytubeVideo(BaseModel):
    """Custom media manifest for one input file."""

    title: str
    duration: float
    sources: List[Source] = Field(default_factory=list)
    audioTracks: List[AudioTrack] = Field(default_factory=list)
    textTracks: List[TextTrack] = Field(default_factory=list)

    @property
    def audio_tracks(self) -> List[AudioTrack]:
        """Get audio tracks (snake_case property)."""
        return self.audioTracks

    @property
    def text_tracks(self) -> List[TextTrack]:
        """Get text tracks (snake_case property)."""
        return self.textTracks

    def urls(self) -> List[str]:
        """All URLs referenced by the manifest."""
        return (
            [s.url for s in self.sources]
            + [a.url for a in self.audioTracks]
            + [t.url for t in self.textTracks]
        )

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize to the JSON document CyTube consumes."""
        return self.model_dump_json(indent=indent)
