# sponsor_detector/transcription/schema.py
"""
Shared contracts for the transcription subsystem.
Single responsibility: define the transcript line model and provider interface.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field


class TranscriptLine(BaseModel):
    """One caption line, offset in seconds from the start of the video."""
    offset: float = Field(ge=0)
    text: str
    duration: Optional[float] = None
    lang: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class TranscriptProvider(Protocol):
    """Anything that turns a video_id into ordered transcript lines."""

    def fetch(self, video_id: str) -> List[TranscriptLine]:
        ...
