# sponsor_detector/analyzer/stages/base.py
"""
Shared base definitions and utilities for all pipeline stages.

This module defines:
- The Stage function contract
- The collaborators every stage may use (injected, never global)
- A lightweight timer for consistent execution_time_ms measurement

All stages MUST conform to the defined interface.
No business logic belongs here.
"""

from __future__ import annotations

import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Tuple, TypeAlias

from sponsor_detector.analyzer.schema import StageResult
from sponsor_detector.llm.gemini import CompletionClient
from sponsor_detector.transcription.schema import TranscriptProvider


@dataclass(frozen=True)
class Collaborators:
    """External services, constructed once at startup."""
    transcript_provider: TranscriptProvider
    ai_client: CompletionClient


Stage: TypeAlias = Callable[[Dict[str, Any], uuid.UUID, Collaborators], Tuple[Dict[str, Any], StageResult]]
"""
Type alias for stage functions.

Signature:
    stage(context: dict, run_id: uuid.UUID, collaborators) -> (updated_context: dict, StageResult)
"""


@contextmanager
def timer() -> Iterator[Callable[[], float]]:
    """
    Context manager that provides an end() function returning elapsed time in milliseconds.

    Usage:
        with timer() as end:
            # do work
            pass
        execution_time_ms = end()
    """
    start = time.perf_counter()

    def end() -> float:
        return (time.perf_counter() - start) * 1000

    yield end
