# sponsor_detector/analyzer/stages/validate_input.py
"""
Stage 1: Input validation and video_id extraction.

Responsibility:
- Confirm a non-empty videoUrl string was provided
- Extract the `v` query parameter as video_id

Fails with INPUT_ERROR (HTTP 400) if either check fails.
No external network calls. Pure deterministic validation.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple
from urllib.parse import parse_qs, urlsplit

from sponsor_detector.analyzer.schema import (
    FailureType,
    StageFailure,
    StageResult,
)
from sponsor_detector.analyzer.stages.base import Collaborators, timer
from sponsor_detector.logging_core.logger import get_logger, log_event


MISSING_URL_MESSAGE = "Video URL is required"
INVALID_URL_MESSAGE = "Invalid YouTube URL"


class InvalidUrlError(ValueError):
    """Raised when a URL cannot be parsed or carries no usable `v` parameter."""


def extract_video_id(url: Any) -> str:
    """
    Return the value of the `v` query parameter of an absolute URL.

    An empty `v` is rejected exactly like a missing one.
    """
    if not isinstance(url, str):
        raise InvalidUrlError("URL must be a string")

    try:
        parts = urlsplit(url.strip())
        # Accessing .port validates the authority component
        parts.port
    except ValueError as exc:
        raise InvalidUrlError(f"Unparseable URL: {exc}") from exc

    if not parts.scheme or not parts.netloc:
        raise InvalidUrlError("URL must be absolute")

    values = parse_qs(parts.query, keep_blank_values=True).get("v")
    if not values or not values[0]:
        raise InvalidUrlError("URL has no 'v' query parameter")
    return values[0]


def _fail(stage_name: str, cause: str, message: str, elapsed_ms: float, error: str) -> StageResult:
    return StageResult(
        stage_name=stage_name,
        success=False,
        errors=[error],
        failures=[
            StageFailure(
                stage=stage_name,
                type=FailureType.INPUT_ERROR,
                cause=cause,
                message=message,
            )
        ],
        execution_time_ms=elapsed_ms,
    )


def process(context: Dict[str, Any], run_id: uuid.UUID, collaborators: Collaborators) -> Tuple[Dict[str, Any], StageResult]:
    """
    Validate the requested URL and extract video_id.

    Sets context["video_id"] on success.
    """
    stage_name = "validate_input"
    logger = get_logger(run_id)

    video_url = context.get("video_url")

    log_event(
        logger,
        logging.INFO,
        "Validating video URL",
        stage_name=stage_name,
        event_type="start",
        metadata={"raw_url": video_url if isinstance(video_url, str) else repr(video_url)},
    )

    with timer() as end:
        if not isinstance(video_url, str) or not video_url:
            log_event(
                logger,
                logging.WARNING,
                "Validation failed: missing URL",
                stage_name=stage_name,
                event_type="failure",
            )
            return context, _fail(stage_name, "missing_url", MISSING_URL_MESSAGE, end(), "No videoUrl provided")

        try:
            video_id = extract_video_id(video_url)
        except InvalidUrlError as exc:
            log_event(
                logger,
                logging.WARNING,
                "Validation failed: invalid YouTube URL",
                stage_name=stage_name,
                event_type="failure",
                metadata={"url": video_url, "reason": str(exc)},
            )
            return context, _fail(stage_name, "invalid_youtube_url", INVALID_URL_MESSAGE, end(), str(exc))

        context["video_id"] = video_id

        result = StageResult(
            stage_name=stage_name,
            success=True,
            execution_time_ms=end(),
        )

        log_event(
            logger,
            logging.INFO,
            "URL validated and video_id extracted",
            stage_name=stage_name,
            event_type="success",
            metadata={"video_id": video_id},
        )

    return context, result
