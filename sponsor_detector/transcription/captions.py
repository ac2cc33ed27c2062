# sponsor_detector/transcription/captions.py
"""
Caption strategy using youtube_transcript_api.
Single responsibility: fetch captions and map them to TranscriptLine.
"""

from __future__ import annotations

from typing import List, Sequence

from youtube_transcript_api import CouldNotRetrieveTranscript, NoTranscriptFound, YouTubeTranscriptApi

from sponsor_detector.transcription.schema import TranscriptLine


DEFAULT_LANGUAGES = ("en",)


class TranscriptUnavailableError(RuntimeError):
    """Raised when YouTube has no usable captions for a video."""

    def __init__(self, video_id: str, reason: str) -> None:
        super().__init__(f"Transcript unavailable for {video_id}: {reason}")
        self.video_id = video_id
        self.reason = reason


class CaptionsProvider:
    """Fetches YouTube captions, preferring the configured languages in order.

    Languages are a preference only: a video captioned solely in other
    languages still yields its first listed track.
    """

    def __init__(self, languages: Sequence[str] = DEFAULT_LANGUAGES, api: YouTubeTranscriptApi | None = None) -> None:
        self.languages = tuple(languages) or DEFAULT_LANGUAGES
        self._api = api or YouTubeTranscriptApi()

    def fetch(self, video_id: str) -> List[TranscriptLine]:
        try:
            fetched = self._fetch_preferred(video_id)
        except CouldNotRetrieveTranscript as exc:
            raise TranscriptUnavailableError(video_id, type(exc).__name__) from exc

        lang = getattr(fetched, "language_code", None)
        return [
            TranscriptLine(
                offset=snippet.start,
                text=snippet.text,
                duration=snippet.duration,
                lang=lang,
            )
            for snippet in fetched
        ]

    def _fetch_preferred(self, video_id: str):
        try:
            return self._api.fetch(video_id, languages=self.languages)
        except NoTranscriptFound:
            # No track in a preferred language: take the first one YouTube lists
            for transcript in self._api.list(video_id):
                return transcript.fetch()
            raise
