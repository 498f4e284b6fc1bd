"""
Locust load tests for the GramaSathi API.

Install: pip install -e ".[load]"
Run: locust -f locustfile.py --host=http://127.0.0.1:5002

For headless: locust -f locustfile.py --host=http://127.0.0.1:5002 \
    --users 10 --spawn-rate 2 --run-time 1m --headless

Set LOCUST_CAMPAIGN_ID to hammer one campaign with concurrent donations;
its raisedAmount must equal the sum of its donor entries afterwards.
"""

import os
from locust import HttpUser, task, between


class GramaSathiUser(HttpUser):
    wait_time = between(1, 3)

    def on_start(self):
        """Optional: login to get token for authenticated endpoints."""
        self.token = None
        if os.getenv("LOCUST_AUTH_EMAIL") and os.getenv("LOCUST_AUTH_PASSWORD"):
            r = self.client.post(
                "/api/auth/login",
                json={
                    "email": os.getenv("LOCUST_AUTH_EMAIL"),
                    "password": os.getenv("LOCUST_AUTH_PASSWORD"),
                },
            )
            if r.status_code == 200 and "accessToken" in r.json():
                self.token = r.json()["accessToken"]

    def _headers(self):
        h = {"Content-Type": "application/json"}
        if self.token:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    def _campaign_id(self):
        return os.getenv("LOCUST_CAMPAIGN_ID", "00000000-0000-0000-0000-000000000001")

    @task(10)
    def ping(self):
        self.client.get("/__ping")

    @task(8)
    def list_active(self):
        self.client.get("/api/campaigns?status=active", name="/api/campaigns")

    @task(3)
    def search(self):
        self.client.get("/api/campaigns?search=school", name="/api/campaigns?search")

    @task(3)
    def campaign_progress(self):
        self.client.get(
            f"/api/campaigns/{self._campaign_id()}/progress",
            name="/api/campaigns/[id]/progress",
        )

    @task(2)
    def donate(self):
        if not self.token:
            return
        self.client.post(
            f"/api/campaigns/{self._campaign_id()}/donate",
            json={"amount": 10},
            headers=self._headers(),
            name="/api/campaigns/[id]/donate",
        )
