import unittest
from datetime import datetime
from unittest.mock import patch

from api_case import ApiTestCase

from pathfinder.core.config import settings
from pathfinder.models.device_data import DeviceData


class TestDeviceLifecycle(ApiTestCase):
    """Register, read, update, delete and key rotation"""

    def setUp(self):
        super().setUp()
        self.token, self.user = self.register_user()

    def test_register_discloses_key_once(self):
        device = self.register_device(self.token)
        self.assertEqual(device["deviceId"], "sensor-1")
        self.assertEqual(device["type"], "environment")
        self.assertEqual(device["status"], "offline")
        self.assertIsNone(device["lastConnected"])
        self.assertEqual(len(device["apiKey"]), 64)
        int(device["apiKey"], 16)

        listed = self.client.get("/api/devices", headers=self.bearer(self.token)).json()
        self.assertEqual([d["deviceId"] for d in listed], ["sensor-1"])
        self.assertNotIn("apiKey", listed[0])

        fetched = self.client.get(f"/api/devices/{device['id']}", headers=self.bearer(self.token)).json()
        self.assertNotIn("apiKey", fetched)

    def test_api_keys_are_unique(self):
        first = self.register_device(self.token, device_id="a")
        second = self.register_device(self.token, device_id="b")
        self.assertNotEqual(first["apiKey"], second["apiKey"])

    def test_duplicate_device_id_across_owners(self):
        self.register_device(self.token)
        other_token, _ = self.register_user(email="bob@example.com")
        response = self.client.post(
            "/api/devices/register",
            json={"deviceId": "sensor-1", "name": "Mine too", "type": "x"},
            headers=self.bearer(other_token),
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Device ID already registered.")

    def test_register_requires_user_auth(self):
        response = self.client.post("/api/devices/register", json={"deviceId": "d", "name": "n", "type": "t"})
        self.assertEqual(response.status_code, 401)

    def test_list_only_own_devices(self):
        self.register_device(self.token, device_id="mine")
        other_token, _ = self.register_user(email="bob@example.com")
        self.register_device(other_token, device_id="theirs")

        listed = self.client.get("/api/devices", headers=self.bearer(self.token)).json()
        self.assertEqual([d["deviceId"] for d in listed], ["mine"])

    def test_get_not_owned_looks_missing(self):
        other_token, _ = self.register_user(email="bob@example.com")
        theirs = self.register_device(other_token, device_id="theirs")

        with patch.object(settings, "environment", "production"):
            not_owned = self.client.get(f"/api/devices/{theirs['id']}", headers=self.bearer(self.token))
            missing = self.client.get("/api/devices/9999", headers=self.bearer(self.token))

        self.assertEqual(not_owned.status_code, 404)
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(not_owned.json(), missing.json())

    def test_update_name_and_type_only(self):
        device = self.register_device(self.token)
        response = self.client.put(
            f"/api/devices/{device['id']}",
            json={"name": "Bedroom", "status": "maintenance", "deviceId": "renamed", "apiKey": "x"},
            headers=self.bearer(self.token),
        )
        self.assertEqual(response.status_code, 200)
        updated = response.json()["device"]
        self.assertEqual(updated["name"], "Bedroom")
        self.assertEqual(updated["type"], "environment")
        self.assertEqual(updated["status"], "offline")
        self.assertEqual(updated["deviceId"], "sensor-1")

        # the old key still works
        check_in = self.client.post("/api/devices/check-in", headers=self.device_key(device["apiKey"]))
        self.assertEqual(check_in.status_code, 200)

    def test_update_not_owned(self):
        other_token, _ = self.register_user(email="bob@example.com")
        theirs = self.register_device(other_token, device_id="theirs")
        response = self.client.put(f"/api/devices/{theirs['id']}", json={"name": "x"}, headers=self.bearer(self.token))
        self.assertEqual(response.status_code, 404)

    def test_delete_removes_device_and_readings(self):
        device = self.register_device(self.token)
        key = self.device_key(device["apiKey"])
        self.client.post("/api/device-data/submit", json={"dataType": "temperature", "value": 20}, headers=key)

        response = self.client.delete(f"/api/devices/{device['id']}", headers=self.bearer(self.token))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Device deleted successfully.")

        self.assertEqual(self.client.get(f"/api/devices/{device['id']}", headers=self.bearer(self.token)).status_code, 404)
        self.assertEqual(self.client.post("/api/devices/check-in", headers=key).status_code, 401)
        with self.Session() as db:
            self.assertEqual(db.query(DeviceData).count(), 0)

    def test_delete_not_owned(self):
        other_token, _ = self.register_user(email="bob@example.com")
        theirs = self.register_device(other_token, device_id="theirs")
        response = self.client.delete(f"/api/devices/{theirs['id']}", headers=self.bearer(self.token))
        self.assertEqual(response.status_code, 404)

    def test_regenerate_key(self):
        device = self.register_device(self.token)
        old_key = device["apiKey"]

        response = self.client.post(f"/api/devices/{device['id']}/regenerate-key", headers=self.bearer(self.token))
        self.assertEqual(response.status_code, 200)
        new_key = response.json()["apiKey"]
        self.assertNotEqual(new_key, old_key)
        self.assertEqual(len(new_key), 64)

        self.assertEqual(self.client.post("/api/devices/check-in", headers=self.device_key(old_key)).status_code, 401)
        self.assertEqual(self.client.post("/api/devices/check-in", headers=self.device_key(new_key)).status_code, 200)

    def test_regenerate_key_not_owned(self):
        other_token, _ = self.register_user(email="bob@example.com")
        theirs = self.register_device(other_token, device_id="theirs")
        response = self.client.post(f"/api/devices/{theirs['id']}/regenerate-key", headers=self.bearer(self.token))
        self.assertEqual(response.status_code, 404)

        # the owner's key is untouched
        check_in = self.client.post("/api/devices/check-in", headers=self.device_key(theirs["apiKey"]))
        self.assertEqual(check_in.status_code, 200)


class TestCheckIn(ApiTestCase):
    """Heartbeats authenticated by API key"""

    def setUp(self):
        super().setUp()
        self.token, _ = self.register_user()
        self.device = self.register_device(self.token)

    def test_check_in_marks_online(self):
        response = self.client.post("/api/devices/check-in", headers=self.device_key(self.device["apiKey"]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Check-in successful.")

        fetched = self.client.get(f"/api/devices/{self.device['id']}", headers=self.bearer(self.token)).json()
        self.assertEqual(fetched["status"], "online")
        self.assertIsNotNone(fetched["lastConnected"])

        with self.Session() as db:
            self.assertEqual(db.query(DeviceData).count(), 0)

    def test_repeated_check_in_refreshes_timestamp(self):
        first = datetime(2024, 6, 1, 12, 0, 0)
        second = datetime(2024, 6, 1, 12, 5, 0)
        key = self.device_key(self.device["apiKey"])

        with patch("pathfinder.services.telemetry.utcnow", side_effect=[first, second]):
            self.assertEqual(self.client.post("/api/devices/check-in", headers=key).status_code, 200)
            self.assertEqual(self.client.post("/api/devices/check-in", headers=key).status_code, 200)

        fetched = self.client.get(f"/api/devices/{self.device['id']}", headers=self.bearer(self.token)).json()
        self.assertEqual(datetime.fromisoformat(fetched["lastConnected"]).replace(tzinfo=None), second)
        self.assertEqual(fetched["status"], "online")

    def test_missing_key(self):
        response = self.client.post("/api/devices/check-in")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "API key is required.")

    def test_unknown_key(self):
        response = self.client.post("/api/devices/check-in", headers=self.device_key("not-a-key"))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid API key.")

    def test_bearer_token_is_not_a_device_credential(self):
        response = self.client.post("/api/devices/check-in", headers=self.bearer(self.token))
        self.assertEqual(response.status_code, 401)


if __name__ == '__main__':
    unittest.main()
