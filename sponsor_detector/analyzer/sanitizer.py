# sponsor_detector/analyzer/sanitizer.py
"""
Turns the model's free-text reply into a validated AnalysisResult.

Pipeline (order matters):
1. trim + strip anchored code fences
2. extract the outermost {...} span
3. textual repairs (ms suffix on start/end, double-escaped HTML entities)
4. strict JSON parse
5. per-segment coercion + AdSegment validation, invalid segments dropped

sanitize_response() is total: whatever the input, it returns an AnalysisResult.
Malformed model output is not an error, it is an empty result.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from pydantic import ValidationError

from sponsor_detector.analyzer.schema import AdSegment, AnalysisResult


_LEADING_JSON_FENCE = re.compile(r"^```json\s*")
_LEADING_FENCE = re.compile(r"^```\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")
_JSON_OBJECT_SPAN = re.compile(r"\{.*\}", re.DOTALL)
_MS_SUFFIX = {
    field: re.compile(rf'"{field}":\s*(\d+\.?\d*)ms')
    for field in ("start", "end")
}
# Ordered: the bare &amp; rule must run last
_HTML_ENTITY_REPAIRS = (
    ("&amp;#39;", "'"),
    ("&amp;quot;", '"'),
    ("&amp;", "&"),
)
# Leading numeric prefix, as accepted by JavaScript's parseFloat
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


def strip_code_fences(text: str) -> str:
    text = _LEADING_JSON_FENCE.sub("", text)
    text = _LEADING_FENCE.sub("", text)
    return _TRAILING_FENCE.sub("", text)


def extract_json_span(text: str) -> Optional[str]:
    """First '{' through last '}', or None if there is no such span."""
    match = _JSON_OBJECT_SPAN.search(text)
    return match.group(0) if match else None


def repair_time_units(span: str) -> str:
    for field, pattern in _MS_SUFFIX.items():
        span = pattern.sub(rf'"{field}": \1', span)
    return span


def unescape_html_entities(span: str) -> str:
    for entity, replacement in _HTML_ENTITY_REPAIRS:
        span = span.replace(entity, replacement)
    return span


REPAIR_STEPS: Tuple[Callable[[str], str], ...] = (
    repair_time_units,
    unescape_html_entities,
)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_float(value: str) -> float:
    """parseFloat semantics: leading numeric prefix, NaN when there is none."""
    match = _FLOAT_PREFIX.match(value)
    if not match:
        return math.nan
    return float(match.group(1))


def coerce_seconds(value: Any) -> float:
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, str):
        return parse_float(value)
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.inf
    return math.nan


def validate_segments(items: List[Any]) -> Tuple[List[AdSegment], int]:
    """Return the valid segments in input order and the number dropped."""
    valid: List[AdSegment] = []
    for item in items:
        # one bad element never discards its neighbours
        if not isinstance(item, dict):
            continue
        try:
            valid.append(
                AdSegment.model_validate(
                    {
                        "start": coerce_seconds(item.get("start")),
                        "end": coerce_seconds(item.get("end")),
                        "text": item.get("text"),
                    }
                )
            )
        except ValidationError:
            continue
    return valid, len(items) - len(valid)


@dataclass(frozen=True)
class SanitizeReport:
    """What happened to one reply. For logging only, never sent to callers."""
    result: AnalysisResult
    outcome: str  # ok | not_text | no_json | invalid_json | bad_shape | error
    dropped: int = 0
    cleaned: Optional[str] = None


def inspect_response(raw: Any) -> SanitizeReport:
    """Run the full sanitizer pipeline and report how it ended."""
    empty = AnalysisResult()
    try:
        if not isinstance(raw, str):
            return SanitizeReport(empty, "not_text")

        span = extract_json_span(strip_code_fences(raw.strip()))
        if span is None:
            return SanitizeReport(empty, "no_json")

        for step in REPAIR_STEPS:
            span = step(span)

        try:
            parsed = json.loads(span, parse_constant=_reject_constant)
        except ValueError:
            return SanitizeReport(empty, "invalid_json", cleaned=span)

        segments = parsed.get("adSegments") if isinstance(parsed, dict) else None
        if not isinstance(segments, list):
            return SanitizeReport(empty, "bad_shape", cleaned=span)

        valid, dropped = validate_segments(segments)
        return SanitizeReport(AnalysisResult(ad_segments=valid), "ok", dropped=dropped, cleaned=span)
    except Exception:  # pylint: disable=broad-except
        # RecursionError on pathological nesting, anything else unforeseen
        return SanitizeReport(empty, "error")


def sanitize_response(raw: Any) -> AnalysisResult:
    return inspect_response(raw).result
