# sponsor_detector/analyzer/schema.py
"""
Authoritative schema definitions for the ad-detection pipeline.

This module defines:
- The AdSegment / AnalysisResult models produced by the sanitizer
- The ResponsePayload returned to HTTP and CLI callers
- The StageResult contract returned by every pipeline stage
- Typed failure categories and their HTTP status mapping

All other modules MUST conform to these contracts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator

from sponsor_detector.transcription.schema import TranscriptLine


UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred while analyzing the video"


class FailureType(str, Enum):
    """Typed failure categories for machine-parsable diagnostics."""
    INPUT_ERROR = "input_error"
    TRANSCRIPT_ERROR = "transcript_error"
    ANALYSIS_ERROR = "analysis_error"
    UNEXPECTED_ERROR = "unexpected_error"


HTTP_STATUS_BY_FAILURE: Dict[FailureType, int] = {
    FailureType.INPUT_ERROR: 400,
    FailureType.TRANSCRIPT_ERROR: 404,
    FailureType.ANALYSIS_ERROR: 500,
    FailureType.UNEXPECTED_ERROR: 500,
}


class StageFailure(BaseModel):
    """Structured representation of a single failure.

    `message` is shown to the caller; `cause` is a machine-readable code for logs.
    """
    stage: str
    type: FailureType
    cause: str
    message: str

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_FAILURE[self.type]


class StageResult(BaseModel):
    """
    Standardized result returned by every pipeline stage.

    Success is False if the stage could not produce what later stages need;
    the runner stops at the first such result.
    """
    stage_name: str
    success: bool
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    failures: List[StageFailure] = Field(default_factory=list)
    execution_time_ms: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class AdSegment(BaseModel):
    """A detected sponsorship span, in seconds."""
    start: float = Field(ge=0, allow_inf_nan=False)
    end: float = Field(allow_inf_nan=False)
    text: StrictStr

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_end_after_start(self) -> "AdSegment":
        if self.end <= self.start:
            raise ValueError("end must be greater than start")
        return self


class AnalysisResult(BaseModel):
    """Sole output of the sanitizer. Order is the order the model returned."""
    ad_segments: List[AdSegment] = Field(default_factory=list, alias="adSegments")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ResponsePayload(BaseModel):
    """Body of every /analyze-video response, success or failure."""
    error: Optional[str] = None
    transcript: List[TranscriptLine] = Field(default_factory=list)
    ad_segments: List[AdSegment] = Field(default_factory=list, alias="adSegments")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @classmethod
    def failure(cls, message: str) -> "ResponsePayload":
        return cls(error=message)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class AnalysisOutcome:
    """What the runner hands back to an adapter (HTTP route, CLI)."""
    status_code: int
    payload: ResponsePayload

    @property
    def ok(self) -> bool:
        return self.status_code == 200



# High-Level Intent
# schema.py is the single contract shared by the sanitizer, the stages, the runner and the adapters.
# Pydantic does the validation work: an AdSegment that cannot be constructed is, by definition,
# a segment the sanitizer drops.

# Data Flow
# sanitizer → AnalysisResult(adSegments=[AdSegment...])
# stages → StageResult (+ StageFailure on failure)
# runner → AnalysisOutcome(status_code, ResponsePayload)
# adapter → payload.to_json() with camelCase aliases

# Edge Cases
# NaN / infinite timestamps → rejected by allow_inf_nan=False
# start == end → rejected by validate_end_after_start
# non-string text → rejected by StrictStr (no int → str coercion)
