"""Pytest configuration and fixtures for English detector tests."""

import logging

import pytest
from pubsub import pub

from english_detector.transcription.publisher import StatePublisher
from tests.fakes import FakeScorer, FakeSpeechEngine, SnapshotRecorder


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def reset_pubsub():
    """Drop pub/sub subscriptions between tests."""
    yield
    pub.unsubAll()


@pytest.fixture
def fake_engine():
    return FakeSpeechEngine()


@pytest.fixture
def fake_scorer():
    return FakeScorer()


@pytest.fixture
def publisher():
    return StatePublisher()


@pytest.fixture
def snapshot_recorder(publisher):
    """Recorder subscribed to the publisher; held here so pubsub's weak ref stays alive."""
    recorder = SnapshotRecorder()
    publisher.subscribe(recorder.record)
    return recorder


@pytest.fixture
def config_file(tmp_path):
    """Write a minimal YAML config and return its path."""
    credentials = tmp_path / "credentials" / "service-account.json"
    credentials.parent.mkdir()
    credentials.write_text("{}")

    path = tmp_path / "english_detector.yaml"
    path.write_text(
        "analysis:\n"
        "  endpoint: http://127.0.0.1:8000/api/analyze-language\n"
        "  timeout_seconds: 2.5\n"
        "engine:\n"
        "  language: en-GB\n"
        "google_cloud:\n"
        "  credentials_path: credentials/service-account.json\n"
        "logging:\n"
        "  level: DEBUG\n"
        "  file_path: logs/english_detector.log\n"
        "  console_output: false\n",
        encoding="utf-8",
    )
    return str(path)
