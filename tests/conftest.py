import os
import sys

import pytest

# Add project root to path and point the app at an in-memory database
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DEBUG", "false")

@pytest.fixture
def sample_readings():
    return [
        {"dataType": "temperature", "value": 19.5, "timestamp": "2024-03-01T08:00:00Z"},
        {"dataType": "humidity", "value": 41.0, "timestamp": "2024-03-01T09:00:00Z"},
        {"dataType": "temperature", "value": 21.0, "timestamp": "2024-03-01T09:00:00Z"},
        {"dataType": "temperature", "value": 23.5, "timestamp": "2024-03-01T10:00:00Z"},
    ]

@pytest.fixture
def mock_env_vars(monkeypatch):
    monkeypatch.setenv("DEVICE_API_URL", "http://testserver/api")
    monkeypatch.setenv("DEVICE_API_KEY", "test_api_key")
    monkeypatch.setenv("JWT_SECRET", "test-secret")
