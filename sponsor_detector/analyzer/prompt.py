# sponsor_detector/analyzer/prompt.py
"""
Versioned ad-detection prompt and transcript formatting.

The cue phrases and JSON shape are part of the contract with the model.
Change only with justification: wording changes detection quality.
"""

from __future__ import annotations

from typing import Iterable

from sponsor_detector.transcription.schema import TranscriptLine


AD_DETECTION_PROMPT = """You are an AI trained to analyze YouTube video transcripts and identify sponsored segments or advertisements.

Task: Analyze the following transcript and identify any sponsored segments or advertisements.

Instructions:
1. Look for phrases like:
   - "this video is sponsored by"
   - "thanks to our sponsor"
   - "special thanks to"
   - "check out"
   - "use code"
   - "discount code"
   - "affiliate link"
2. For each ad segment found, note:
   - The start timestamp (as a number in seconds, without "s" suffix)
   - The end timestamp (as a number in seconds, without "s" suffix)
   - The relevant text mentioning the sponsorship

Format your response as ONLY a JSON object with this exact structure:
{
  "adSegments": [
    {
      "start": 295.32,    // seconds as a number, no "s" suffix
      "end": 359.16,      // seconds as a number, no "s" suffix
      "text": "string"    // the sponsorship text
    }
  ]
}

Do not include any other text in your response, only the JSON object.
Do not add "s" suffix to timestamps - they should be plain numbers.

Transcript:"""


def format_seconds(value: float) -> str:
    """Render like a JS number: 12.0 -> '12', 12.5 -> '12.5'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_transcript(lines: Iterable[TranscriptLine]) -> str:
    return "\n".join(f"[{format_seconds(line.offset)}s]: {line.text}" for line in lines)


def build_prompt(lines: Iterable[TranscriptLine]) -> str:
    return f"{AD_DETECTION_PROMPT}\n{format_transcript(lines)}"
