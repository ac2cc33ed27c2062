from sponsor_detector.api.app import build_collaborators, create_app

__all__ = ["build_collaborators", "create_app"]
