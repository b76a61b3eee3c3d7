import unittest
from unittest.mock import patch

from api_case import ApiTestCase

from pathfinder.core.config import settings


class TestDiary(ApiTestCase):
    """Diary entries are private to their author"""

    def setUp(self):
        super().setUp()
        self.token, self.user = self.register_user()
        self.headers = self.bearer(self.token)
        self.base = f"/api/diary/{self.user['id']}"

    def _create(self, date="2024-04-01", title="Coincidence", content="Saw the same number three times"):
        response = self.client.post(
            self.base,
            json={"date": date, "title": title, "content": content},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["entry"]

    def test_create_entry(self):
        response = self.client.post(
            self.base,
            json={"date": "2024-04-01", "title": "Coincidence", "content": "Met an old friend twice"},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "Diary entry created successfully.")
        self.assertEqual(body["entry"]["userId"], self.user["id"])
        self.assertEqual(body["entry"]["date"], "2024-04-01")

    def test_create_requires_fields(self):
        for payload in ({"title": "t", "content": "c"}, {"date": "2024-04-01", "content": "c"},
                        {"date": "2024-04-01", "title": "", "content": "c"}, {"date": "yesterday", "title": "t", "content": "c"}):
            response = self.client.post(self.base, json=payload, headers=self.headers)
            self.assertEqual(response.status_code, 400, payload)

    def test_list_is_newest_date_first(self):
        self._create(date="2024-04-01", title="first")
        self._create(date="2024-04-03", title="third")
        self._create(date="2024-04-02", title="second")

        response = self.client.get(self.base, headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual([entry["title"] for entry in response.json()], ["third", "second", "first"])

    def test_empty_list(self):
        response = self.client.get(self.base, headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_get_update_delete(self):
        entry = self._create()
        url = f"{self.base}/{entry['id']}"

        self.assertEqual(self.client.get(url, headers=self.headers).json()["title"], "Coincidence")

        response = self.client.put(url, json={"title": "Synchronicity"}, headers=self.headers)
        self.assertEqual(response.status_code, 200)
        updated = response.json()["entry"]
        self.assertEqual(updated["title"], "Synchronicity")
        self.assertEqual(updated["content"], entry["content"])
        self.assertEqual(updated["date"], entry["date"])

        response = self.client.delete(url, headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Diary entry deleted successfully.")
        self.assertEqual(self.client.get(url, headers=self.headers).status_code, 404)

    def test_missing_entry(self):
        response = self.client.get(f"{self.base}/999", headers=self.headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Diary entry not found.")

    def test_search(self):
        self._create(title="Blue bird", content="A bird at the window")
        self._create(date="2024-04-05", title="Dream", content="Dreamt of a BLUE door")
        self._create(title="Nothing", content="Quiet day")

        response = self.client.get(f"{self.base}/search", params={"query": "blue"}, headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual([entry["title"] for entry in response.json()], ["Dream", "Blue bird"])

        response = self.client.get(f"{self.base}/search", params={"query": "storm"}, headers=self.headers)
        self.assertEqual(response.json(), [])

    def test_search_requires_query(self):
        response = self.client.get(f"{self.base}/search", headers=self.headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Search query is required.")

    def test_other_users_diary_looks_missing(self):
        entry = self._create()
        other_token, _ = self.register_user(email="eve@example.com")
        other = self.bearer(other_token)

        with patch.object(settings, "environment", "production"):
            foreign = self.client.get(f"{self.base}/{entry['id']}", headers=other)
            missing = self.client.get(f"{self.base}/424242", headers=self.headers)
            listing = self.client.get(self.base, headers=other)
            update = self.client.put(f"{self.base}/{entry['id']}", json={"title": "mine"}, headers=other)
            delete = self.client.delete(f"{self.base}/{entry['id']}", headers=other)

        self.assertEqual(foreign.status_code, 404)
        self.assertEqual(foreign.json(), missing.json())
        for response in (listing, update, delete):
            self.assertEqual(response.status_code, 404)
        self.assertEqual(self.client.get(f"{self.base}/{entry['id']}", headers=self.headers).json()["title"], "Coincidence")

    def test_requires_auth(self):
        self.assertEqual(self.client.get(self.base).status_code, 401)


if __name__ == '__main__':
    unittest.main()
