# sponsor_detector/analyzer/stages/fetch_transcript.py
"""
Stage 2: Fetch the transcript through the injected provider.

Any provider error and an empty transcript both map to TRANSCRIPT_ERROR
(HTTP 404), with different messages.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

from sponsor_detector.analyzer.schema import FailureType, StageFailure, StageResult
from sponsor_detector.analyzer.stages.base import Collaborators, timer
from sponsor_detector.logging_core.logger import get_logger, log_event


FETCH_FAILED_MESSAGE = "Could not fetch video transcript. The video might not have captions available."
EMPTY_TRANSCRIPT_MESSAGE = "No transcript available for this video"


def process(context: Dict[str, Any], run_id: uuid.UUID, collaborators: Collaborators) -> Tuple[Dict[str, Any], StageResult]:
    """Fetch captions for context["video_id"] into context["transcript"]."""
    stage_name = "fetch_transcript"
    logger = get_logger(run_id)
    video_id = context["video_id"]

    log_event(
        logger,
        logging.INFO,
        "Fetching transcript",
        stage_name=stage_name,
        event_type="start",
        metadata={"video_id": video_id},
    )

    with timer() as end:
        try:
            transcript = collaborators.transcript_provider.fetch(video_id)
        except Exception as exc:  # pylint: disable=broad-except
            log_event(
                logger,
                logging.ERROR,
                "Transcript fetch failed",
                stage_name=stage_name,
                event_type="failure",
                metadata={"video_id": video_id, "exception": str(exc), "exception_type": type(exc).__name__},
            )
            return context, StageResult(
                stage_name=stage_name,
                success=False,
                errors=[str(exc)],
                failures=[
                    StageFailure(
                        stage=stage_name,
                        type=FailureType.TRANSCRIPT_ERROR,
                        cause="fetch_failed",
                        message=FETCH_FAILED_MESSAGE,
                    )
                ],
                execution_time_ms=end(),
            )

        if not transcript:
            log_event(
                logger,
                logging.WARNING,
                "Transcript is empty",
                stage_name=stage_name,
                event_type="failure",
                metadata={"video_id": video_id},
            )
            return context, StageResult(
                stage_name=stage_name,
                success=False,
                errors=["Provider returned no transcript lines"],
                failures=[
                    StageFailure(
                        stage=stage_name,
                        type=FailureType.TRANSCRIPT_ERROR,
                        cause="empty_transcript",
                        message=EMPTY_TRANSCRIPT_MESSAGE,
                    )
                ],
                execution_time_ms=end(),
            )

        context["transcript"] = list(transcript)

        result = StageResult(
            stage_name=stage_name,
            success=True,
            execution_time_ms=end(),
        )

        log_event(
            logger,
            logging.INFO,
            "Transcript fetched",
            stage_name=stage_name,
            event_type="success",
            metadata={"video_id": video_id, "line_count": len(transcript)},
        )

    return context, result
