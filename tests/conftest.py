"""
Root conftest.py - shared fixtures for the entire test suite.

Guidelines:
    • No __init__.py in test sub-directories (avoids shadowing root packages).
    • pytest.ini_options lives in pyproject.toml with pythonpath=["."].
    • Markers: integration.
"""

import json
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest
import requests

from adapters.fireflies_client import FirefliesClient
from domain.models import Transcript, TranscriptSummary
from shared_utils.logging_utils import NullLogger


# ---------------------------------------------------------------------------
# Marker registration
# ---------------------------------------------------------------------------

def pytest_configure(config):
    config.addinivalue_line("markers", "integration: mark test as integration test")


# ---------------------------------------------------------------------------
# Minimal required settings kwargs for Settings(**BASE_SETTINGS_KWARGS)
# ---------------------------------------------------------------------------

BASE_SETTINGS_KWARGS: Dict[str, str] = {
    "fireflies_api_key": "test-key",
    "environment": "development",
}


@pytest.fixture()
def base_settings_kwargs() -> Dict[str, str]:
    """Provide the minimal kwargs needed to instantiate ``Settings``."""
    return {**BASE_SETTINGS_KWARGS}


# ---------------------------------------------------------------------------
# Backend payload fixtures
# ---------------------------------------------------------------------------

API_URL = "https://api.fireflies.ai/graphql"

SAMPLE_TRANSCRIPT: Dict[str, Any] = {
    "id": "t-1",
    "title": "Q3 Budget Review",
    "date": 1718035200000,
    "dateString": "2024-06-10T16:00:00.000Z",
    "duration": 1800.0,
    "transcript_url": "https://app.fireflies.ai/view/t-1",
    "participants": ["alice@example.com", "bob@example.com"],
    "speakers": [{"id": 0, "name": "Alice"}, {"id": 1, "name": "Bob"}],
    "sentences": [
        {
            "index": 0,
            "speaker_name": "Alice",
            "text": "Let's walk through the numbers.",
            "raw_text": "let's walk through the numbers",
            "start_time": 0.5,
            "end_time": 2.1,
        },
        {
            "index": 1,
            "speaker_name": "Bob",
            "text": "Marketing spend is over plan.",
            "raw_text": "marketing spend is over plan",
            "start_time": 2.4,
            "end_time": 4.0,
        },
    ],
    "summary": {
        "overview": "The team reviewed Q3 spending.",
        "action_items": ["Alice to revise forecast", "Bob to cut ad spend"],
        "keywords": ["budget", "forecast"],
        "topics_discussed": ["Marketing spend", "Hiring plan"],
    },
    "meeting_attendees": [{"displayName": "Alice", "email": "alice@example.com"}],
}


def make_response(
    status: int = 200,
    payload: Optional[Any] = None,
    raw: Optional[bytes] = None,
) -> requests.Response:
    """Build a real ``requests.Response`` with the given status and body."""
    response = requests.Response()
    response.status_code = status
    response._content = raw if raw is not None else json.dumps(payload).encode()
    response.url = API_URL
    return response


@pytest.fixture()
def sample_transcript_payload() -> Dict[str, Any]:
    """Raw detail-query transcript as the backend returns it."""
    return json.loads(json.dumps(SAMPLE_TRANSCRIPT))


@pytest.fixture()
def sample_transcript(sample_transcript_payload) -> Transcript:
    return Transcript.model_validate(sample_transcript_payload)


@pytest.fixture()
def full_summary() -> TranscriptSummary:
    return TranscriptSummary(
        overview="The team reviewed Q3 spending.",
        action_items=["Alice to revise forecast", "Bob to cut ad spend"],
        topics_discussed=["Marketing spend", "Hiring plan"],
        keywords=["budget", "forecast"],
    )


# ---------------------------------------------------------------------------
# Mock adapter factories
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_session() -> MagicMock:
    """requests.Session stand-in returning an empty transcript page."""
    session = MagicMock()
    session.post.return_value = make_response(payload={"data": {"transcripts": []}})
    return session


@pytest.fixture()
def client(mock_session: MagicMock) -> FirefliesClient:
    return FirefliesClient(
        api_key="test-key",
        api_url=API_URL,
        timeout=60,
        session=mock_session,
        logger=NullLogger(),
    )


@pytest.fixture()
def mock_source() -> MagicMock:
    """Pre-configured transcript source mock."""
    source = MagicMock()
    source.fetch_transcripts.return_value = []
    source.fetch_search_candidates.return_value = []
    return source


@pytest.fixture()
def response_factory():
    """Expose ``make_response`` to tests."""
    return make_response
