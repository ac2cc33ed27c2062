from sponsor_detector.transcription.captions import CaptionsProvider, TranscriptUnavailableError
from sponsor_detector.transcription.schema import TranscriptLine, TranscriptProvider

__all__ = ["CaptionsProvider", "TranscriptLine", "TranscriptProvider", "TranscriptUnavailableError"]
