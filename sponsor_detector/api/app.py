# sponsor_detector/api/app.py
"""
HTTP adapter: one route, POST /analyze-video.

Thin adapter with no business logic. Parses the body, calls the runner,
serializes the outcome. Collaborators are built once here from AppConfig
unless injected (tests).
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from sponsor_detector.analyzer.runner import run_analysis
from sponsor_detector.analyzer.schema import ResponsePayload
from sponsor_detector.analyzer.stages.base import Collaborators
from sponsor_detector.config import AppConfig
from sponsor_detector.llm.gemini import GeminiClient
from sponsor_detector.logging_core.logger import configure_logging, get_logger, log_event
from sponsor_detector.transcription.captions import CaptionsProvider


INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def build_collaborators(config: AppConfig) -> Collaborators:
    """Construct the process-wide transcript provider and AI client."""
    return Collaborators(
        transcript_provider=CaptionsProvider(languages=config.transcript_languages),
        ai_client=GeminiClient(api_key=config.gemini_api_key, model=config.model_name),
    )


def _request_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def create_app(config: Optional[AppConfig] = None, collaborators: Optional[Collaborators] = None) -> Flask:
    """Application factory."""
    config = config or AppConfig.from_env()
    configure_logging(config.log_level)
    collaborators = collaborators or build_collaborators(config)

    app = Flask(__name__)
    app.json.sort_keys = False

    CORS(
        app,
        origins=list(config.cors_origins),
        methods=["GET", "POST"],
        allow_headers=["Content-Type"],
        supports_credentials=config.cors_credentials,
    )

    @app.post("/analyze-video")
    def analyze_video():
        outcome = run_analysis(_request_body().get("videoUrl"), collaborators, run_id=uuid.uuid4())
        return jsonify(outcome.payload.to_json()), outcome.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        log_event(
            get_logger(uuid.uuid4()),
            logging.ERROR,
            "Unhandled error outside the pipeline",
            event_type="failure",
            metadata={"path": request.path, "exception": str(exc)},
            exc_info=True,
        )
        return jsonify(ResponsePayload.failure(INTERNAL_ERROR_MESSAGE).to_json()), 500

    return app
