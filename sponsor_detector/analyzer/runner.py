# sponsor_detector/analyzer/runner.py
"""
Orchestration runner for the ad-detection pipeline.

Responsibilities:
- Initialize traceability (run_id, logger, diagnostics)
- Execute stages in fixed order, stopping at the first failure
- Map the failure (or success) to an AnalysisOutcome

No business logic lives here, only orchestration.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from sponsor_detector.analyzer.diagnostics.collector import DiagnosticsCollector
from sponsor_detector.analyzer.schema import (
    HTTP_STATUS_BY_FAILURE,
    UNEXPECTED_ERROR_MESSAGE,
    AnalysisOutcome,
    FailureType,
    ResponsePayload,
)
from sponsor_detector.analyzer.stages import (
    detect_ads,
    fetch_transcript,
    sanitize_response,
    validate_input,
)
from sponsor_detector.analyzer.stages.base import Collaborators
from sponsor_detector.logging_core.logger import get_logger, log_event


STAGES = [
    validate_input.process,
    fetch_transcript.process,
    detect_ads.process,
    sanitize_response.process,
]


def _unexpected_outcome() -> AnalysisOutcome:
    return AnalysisOutcome(
        status_code=HTTP_STATUS_BY_FAILURE[FailureType.UNEXPECTED_ERROR],
        payload=ResponsePayload.failure(UNEXPECTED_ERROR_MESSAGE),
    )


def run_analysis(
    video_url: Any,
    collaborators: Collaborators,
    run_id: Optional[uuid.UUID] = None,
) -> AnalysisOutcome:
    """
    Execute the full pipeline for one requested video URL.

    Args:
        video_url: the raw `videoUrl` value from the request (may be anything)
        collaborators: transcript provider and AI client built at startup
        run_id: optional request id for log correlation

    Returns:
        AnalysisOutcome. Never raises: every failure becomes a status code and
        an error payload.
    """
    run_id = run_id or uuid.uuid4()
    logger = get_logger(run_id)

    log_event(
        logger,
        logging.INFO,
        "Analyzing video",
        event_type="pipeline_start",
        metadata={"video_url": video_url if isinstance(video_url, str) else repr(video_url)},
    )

    context: Dict[str, Any] = {"video_url": video_url}
    collector = DiagnosticsCollector(run_id)

    for stage_func in STAGES:
        stage_name = stage_func.__module__.split(".")[-1]
        try:
            context, stage_result = stage_func(context, run_id, collaborators)
        except Exception as exc:  # pylint: disable=broad-except
            log_event(
                logger,
                logging.ERROR,
                "Unhandled exception in stage",
                stage_name=stage_name,
                event_type="pipeline_failure",
                metadata={"exception": str(exc), **collector.summary()},
                exc_info=True,
            )
            return _unexpected_outcome()

        collector.add_stage_result(stage_result)
        if not stage_result.success:
            break

    if collector.has_failure():
        failure = collector.first_failure()
        if failure is None:
            # Stage reported failure without a structured cause
            outcome = _unexpected_outcome()
        else:
            outcome = AnalysisOutcome(
                status_code=failure.status_code,
                payload=ResponsePayload.failure(failure.message),
            )
        log_event(
            logger,
            logging.WARNING if outcome.status_code < 500 else logging.ERROR,
            "Pipeline stopped",
            event_type="pipeline_failure",
            metadata={"status_code": outcome.status_code, **collector.summary()},
        )
        return outcome

    try:
        payload = ResponsePayload(
            transcript=context["transcript"],
            ad_segments=context["analysis"].ad_segments,
        )
    except Exception as exc:  # pylint: disable=broad-except
        log_event(
            logger,
            logging.ERROR,
            "Could not assemble response payload",
            event_type="pipeline_failure",
            metadata={"exception": str(exc)},
            exc_info=True,
        )
        return _unexpected_outcome()

    log_event(
        logger,
        logging.INFO,
        "Pipeline completed successfully",
        event_type="pipeline_success",
        metadata={
            "transcript_length": len(payload.transcript),
            "ad_segment_count": len(payload.ad_segments),
            **collector.summary(),
        },
    )
    return AnalysisOutcome(status_code=200, payload=payload)



# High-Level Intent
# runner.py is the request state machine: validate → fetch transcript → ask the model → sanitize.
# The first failed stage is terminal; its StageFailure decides status code and message.
# An exception escaping a stage is a bug, not a user error → generic 500.

# Data Flow
# adapter → run_analysis(videoUrl, collaborators)
# → context = {"video_url": ...}
# → each stage mutates context and returns StageResult
# → collector keeps results for the final log line
# → AnalysisOutcome(status_code, ResponsePayload)

# Edge Cases & Failure Scenarios
# Missing/blank/non-string videoUrl → 400 from validate_input
# Provider raises or returns nothing → 404 from fetch_transcript
# Model call raises → 500 with generic message, detail logged
# Model returns garbage → 200 with empty adSegments (sanitizer absorbs it)
