import os
from typing import Any, Callable, Dict, Optional

import pytest
from fastapi.testclient import TestClient

# tests/conftest.py

# keep test runs from writing log files into the working tree
os.environ.setdefault("DINKHOOK_LOG_DIR", "")

from dinkhook.config import Settings
from dinkhook.dispatch import Notification
from dinkhook.intake import decode_payload
from dinkhook.main import create_app
from dinkhook.samples import sample_json


@pytest.fixture
def settings() -> Settings:
    """Inline dispatch with duplicate suppression off; override per test as needed."""
    return Settings(dedup_window_seconds=0)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> TestClient:
    """TestClient for the FastAPI app (lifespan not started)."""
    return TestClient(app)


@pytest.fixture
def make_files() -> Callable[..., Dict[str, Any]]:
    """
    Return a helper building the multipart ``files`` mapping the plugin sends.
    Usage: client.post("/dink", files=make_files("LOOT", image=b"..."))
    """
    def _make(event_type: str = "LOOT", payload: Optional[str] = None, image: Optional[bytes] = None, **overrides) -> Dict[str, Any]:
        text = payload if payload is not None else sample_json(event_type, **overrides)
        files = {"payload_json": (None, text)}
        if image is not None:
            files["file"] = ("image.png", image, "image/png")
        return files
    return _make


@pytest.fixture
def make_notification() -> Callable[..., Notification]:
    def _make(event_type: str = "LOOT", **overrides) -> Notification:
        envelope, extra = decode_payload(sample_json(event_type, **overrides))
        return Notification(envelope=envelope, extra=extra)
    return _make


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """
    Drop DINKHOOK_* settings from the environment so tests only see the
    settings they build themselves.
    """
    for key in list(os.environ):
        if key.startswith("DINKHOOK_") and key != "DINKHOOK_LOG_DIR":
            monkeypatch.delenv(key, raising=False)
    yield
