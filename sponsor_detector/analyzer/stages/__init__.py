from sponsor_detector.analyzer.stages import (
    detect_ads,
    fetch_transcript,
    sanitize_response,
    validate_input,
)

__all__ = ["detect_ads", "fetch_transcript", "sanitize_response", "validate_input"]
