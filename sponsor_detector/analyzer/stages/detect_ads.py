# sponsor_detector/analyzer/stages/detect_ads.py
"""
Stage 3: Ask the model for sponsor segments.

Responsibility:
- Build the versioned prompt from the transcript
- Invoke the injected AI client once (no retries)
- Store the raw reply for the sanitizer

A failed call is ANALYSIS_ERROR (HTTP 500). The caller only ever sees a
generic message; the exception detail goes to the logs.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

from sponsor_detector.analyzer.prompt import build_prompt
from sponsor_detector.analyzer.schema import (
    UNEXPECTED_ERROR_MESSAGE,
    FailureType,
    StageFailure,
    StageResult,
)
from sponsor_detector.analyzer.stages.base import Collaborators, timer
from sponsor_detector.logging_core.logger import get_logger, log_event


def process(context: Dict[str, Any], run_id: uuid.UUID, collaborators: Collaborators) -> Tuple[Dict[str, Any], StageResult]:
    """Send context["transcript"] to the model; set context["raw_response"]."""
    stage_name = "detect_ads"
    logger = get_logger(run_id)

    prompt = build_prompt(context["transcript"])

    log_event(
        logger,
        logging.INFO,
        "Requesting ad segment analysis",
        stage_name=stage_name,
        event_type="start",
        metadata={"prompt_chars": len(prompt)},
    )

    with timer() as end:
        try:
            raw_response = collaborators.ai_client.generate(prompt)
        except Exception as exc:  # pylint: disable=broad-except
            log_event(
                logger,
                logging.ERROR,
                "Ad analysis failed: LLM error",
                stage_name=stage_name,
                event_type="failure",
                metadata={"exception": str(exc), "exception_type": type(exc).__name__},
            )
            return context, StageResult(
                stage_name=stage_name,
                success=False,
                errors=[f"LLM error: {exc}"],
                failures=[
                    StageFailure(
                        stage=stage_name,
                        type=FailureType.ANALYSIS_ERROR,
                        cause="llm_invocation_failed",
                        message=UNEXPECTED_ERROR_MESSAGE,
                    )
                ],
                execution_time_ms=end(),
            )

        context["raw_response"] = raw_response

        result = StageResult(
            stage_name=stage_name,
            success=True,
            execution_time_ms=end(),
        )

        log_event(
            logger,
            logging.DEBUG,
            "AI response received",
            stage_name=stage_name,
            event_type="success",
            metadata={"raw_response": str(raw_response)[:1000]},
        )

    return context, result
