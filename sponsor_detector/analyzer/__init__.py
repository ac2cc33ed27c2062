from sponsor_detector.analyzer.runner import run_analysis
from sponsor_detector.analyzer.sanitizer import sanitize_response
from sponsor_detector.analyzer.stages.base import Collaborators

__all__ = ["Collaborators", "run_analysis", "sanitize_response"]
