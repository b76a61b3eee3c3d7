"""
Shared fixtures for API tests: an app wired to a fresh in-memory database
"""

import os
import sys
import unittest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DEBUG", "false")

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from pathfinder.core.logs import LogBuffer
from pathfinder.database.connection import Base, build_engine, get_database, init_database
from pathfinder.main import create_app


class ApiTestCase(unittest.TestCase):
    """Each test gets its own database, log buffer and client"""

    raise_server_exceptions = True

    def setUp(self):
        self.engine = build_engine("sqlite://")
        init_database(self.engine)
        self.Session = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        def override_get_database():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        self.log_buffer = LogBuffer(500)
        self.app = create_app(self.log_buffer)
        self.app.dependency_overrides[get_database] = override_get_database
        self.client = TestClient(self.app, raise_server_exceptions=self.raise_server_exceptions)

    def tearDown(self):
        self.app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=self.engine)
        self.engine.dispose()

    def register_user(self, email="ada@example.com", password="s3cret-pass", name="Ada"):
        """Register a user; returns (token, user body)"""
        response = self.client.post("/api/auth/register", json={
            "name": name,
            "email": email,
            "password": password,
            "dateOfBirth": "1990-05-17",
        })
        self.assertEqual(response.status_code, 201, response.text)
        body = response.json()
        return body["token"], body["user"]

    @staticmethod
    def bearer(token):
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def device_key(api_key):
        return {"x-api-key": api_key}

    def register_device(self, token, device_id="sensor-1", name="Living Room", device_type="environment"):
        """Register a device; returns the device body including its API key"""
        response = self.client.post(
            "/api/devices/register",
            json={"deviceId": device_id, "name": name, "type": device_type},
            headers=self.bearer(token),
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["device"]
