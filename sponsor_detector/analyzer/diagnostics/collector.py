# sponsor_detector/analyzer/diagnostics/collector.py
"""
Diagnostics aggregation for the ad-detection pipeline.

Collects StageResults for one request and summarizes them for the final
log line. Nothing collected here is returned to the caller.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

from sponsor_detector.analyzer.schema import StageFailure, StageResult


class DiagnosticsCollector:
    """
    Accumulates StageResult objects for a single run.

    Thread-safe not required (one collector per request).
    """

    def __init__(self, run_id: UUID) -> None:
        self.run_id = run_id
        self._stage_status: Dict[str, StageResult] = {}
        self._warnings: List[str] = []
        self._errors: List[str] = []

    def add_stage_result(self, result: StageResult) -> None:
        """Add a stage result and merge global fields."""
        if result.stage_name in self._stage_status:
            raise ValueError(f"Duplicate stage result for {result.stage_name}")

        self._stage_status[result.stage_name] = result
        self._warnings.extend(result.warnings)
        self._errors.extend(result.errors)

    def first_failure(self) -> Optional[StageFailure]:
        """Return the first structured failure reported, in stage order."""
        for result in self._stage_status.values():
            if not result.success and result.failures:
                return result.failures[0]
        return None

    def has_failure(self) -> bool:
        return any(not result.success for result in self._stage_status.values())

    def summary(self) -> Dict[str, Any]:
        """Compact, JSON-safe view for the pipeline_success / pipeline_failure log event."""
        return {
            "stages": {
                name: {
                    "success": result.success,
                    "execution_time_ms": round(result.execution_time_ms or 0.0, 2),
                }
                for name, result in self._stage_status.items()
            },
            "warnings": list(self._warnings),
            "errors": list(self._errors),
        }
