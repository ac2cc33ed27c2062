# sponsor_detector/analyzer/stages/sanitize_response.py
"""
Stage 4 (Final): Turn the raw model reply into an AnalysisResult.

Never fails: malformed output degrades to an empty segment list.
Dropped segments are reported as warnings in the logs only.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

from sponsor_detector.analyzer.sanitizer import inspect_response
from sponsor_detector.analyzer.schema import StageResult
from sponsor_detector.analyzer.stages.base import Collaborators, timer
from sponsor_detector.logging_core.logger import get_logger, log_event


def process(context: Dict[str, Any], run_id: uuid.UUID, collaborators: Collaborators) -> Tuple[Dict[str, Any], StageResult]:
    stage_name = "sanitize_response"
    logger = get_logger(run_id)

    with timer() as end:
        report = inspect_response(context.get("raw_response"))
        context["analysis"] = report.result

        warnings = []
        if report.outcome != "ok":
            warnings.append(f"AI response unusable ({report.outcome}); no segments returned")
        if report.dropped:
            warnings.append(f"Dropped {report.dropped} invalid segment(s)")

        result = StageResult(
            stage_name=stage_name,
            success=True,
            warnings=warnings,
            execution_time_ms=end(),
        )

    log_event(
        logger,
        logging.WARNING if warnings else logging.INFO,
        "AI response sanitized",
        stage_name=stage_name,
        event_type="success",
        metadata={
            "outcome": report.outcome,
            "segment_count": len(report.result.ad_segments),
            "dropped": report.dropped,
        },
    )
    if report.cleaned is not None:
        log_event(
            logger,
            logging.DEBUG,
            "Cleaned JSON string",
            stage_name=stage_name,
            event_type="progress",
            metadata={"cleaned": report.cleaned[:1000]},
        )

    return context, result
