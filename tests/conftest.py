"""Shared fixtures: in-memory collaborators and a Flask test client."""

from __future__ import annotations

from typing import List

import pytest

from sponsor_detector.analyzer.stages.base import Collaborators
from sponsor_detector.api.app import create_app
from sponsor_detector.config import AppConfig
from sponsor_detector.transcription.schema import TranscriptLine
from tests.fixtures.fakes import FakeCompletionClient, FakeTranscriptProvider


@pytest.fixture
def transcript_lines() -> List[TranscriptLine]:
    return [
        TranscriptLine(offset=0.0, text="welcome back to the channel"),
        TranscriptLine(offset=12.5, text="this video is sponsored by Acme VPN"),
        TranscriptLine(offset=30.0, text="use code ACME for 20% off"),
        TranscriptLine(offset=45.2, text="now let's get into it"),
    ]


@pytest.fixture
def provider(transcript_lines: List[TranscriptLine]) -> FakeTranscriptProvider:
    return FakeTranscriptProvider(lines=transcript_lines)


@pytest.fixture
def ai_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def collaborators(provider: FakeTranscriptProvider, ai_client: FakeCompletionClient) -> Collaborators:
    return Collaborators(transcript_provider=provider, ai_client=ai_client)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(gemini_api_key="test-key")


@pytest.fixture
def client(app_config: AppConfig, collaborators: Collaborators):
    app = create_app(app_config, collaborators=collaborators)
    app.testing = True
    return app.test_client()
