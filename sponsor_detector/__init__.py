"""Sponsor Detector: finds sponsored segments in YouTube transcripts with Gemini."""

__version__ = "0.1.0"
