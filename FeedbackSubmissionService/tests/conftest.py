# FeedbackSubmissionService/tests/conftest.py
import os
import tempfile

# Settings are read at import time; point the service at a throwaway local store first
os.environ.pop("APP_ENV", None)
os.environ["STORE_BACKEND"] = "local"
os.environ["TABLE_NAME"] = "feedback-test"
os.environ["LOCAL_STORAGE_DIR"] = tempfile.mkdtemp(prefix="feedback-store-")

import asyncio

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.integrations.store_client import StoreClient, StoreException


class RecordingStore(StoreClient):
    """In-memory store that remembers every write."""

    backend = "memory"

    def __init__(self):
        self.calls = []

    def put_item(self, table_name, item):
        self.calls.append((table_name, dict(item)))


class FailingStore(StoreClient):
    """Store whose every write fails with the given error."""

    backend = "failing"

    def __init__(self, error=None):
        self.error = error or StoreException("ProvisionedThroughputExceededException: slow down")
        self.calls = 0

    def put_item(self, table_name, item):
        self.calls += 1
        raise self.error


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture(scope="function")
def client(monkeypatch, tmp_path):
    """
    Test client for the FastAPI app, backed by a local store in a
    per-test temporary directory.
    """
    monkeypatch.setattr(settings, "STORE_BACKEND", "local")
    monkeypatch.setattr(settings, "LOCAL_STORAGE_DIR", str(tmp_path))

    from main import app

    with TestClient(app) as c:
        yield c
