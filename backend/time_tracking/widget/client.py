"""
HTTP client the POS clock widget uses to reach the time tracking API.

Every call returns the API's ``{"success": ..., ...}`` payload; network and
HTTP failures are folded into ``{"success": False, "error": ...}`` so the
widget can show them instead of crashing.
"""
import logging
from typing import Optional
from urllib.parse import quote

import requests

from time_tracking.config import settings

logger = logging.getLogger(__name__)


class TimeTrackingClient:
    def __init__(self, base_url: Optional[str] = None, timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "application/json", "Accept": "application/json"}

        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("Request to %s failed: %s", url, e)
            return {
                "success": False,
                "error": f"Network error: {e}. Check if the URL is correct and accessible."
            }

        if not response.ok:
            logger.error("%s %s returned %s: %s", method, url, response.status_code, response.text)
            return {
                "success": False,
                "error": f"HTTP {response.status_code}: {response.reason} - {response.text}"
            }

        try:
            return response.json()
        except ValueError:
            return {"success": False, "error": f"Invalid JSON response from {url}"}

    def test_connection(self) -> dict:
        return self._request("GET", "/api/test")

    def record_clock_event(self, staff_id: str, action: str) -> dict:
        return self._request(
            "POST",
            "/api/time-tracking/clock",
            json={"staffId": staff_id, "action": action}
        )

    def get_last_clock_action(self, staff_id: str) -> dict:
        return self._request("GET", f"/api/time-tracking/status/{quote(staff_id, safe='')}")
