# streamlit_app/api_client.py
"""
API client for the Mining Materials Dashboard backend.
"""

import os
from typing import Dict

import requests

# vertical name -> report route
REPORT_ROUTES: Dict[str, str] = {
    "automotive": "/carproduction",
    "aerospace": "/aerospace",
    "fertilizer": "/fertilizer",
    "stainless_steel": "/stainlesssteel",
}


class APIError(Exception):
    """Raised when the backend answers with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"API Error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class APIClient:
    """Client for communicating with FastAPI backend"""

    def __init__(self, base_url: str = None, timeout: float = 30.0):
        self.base_url = (base_url or os.getenv("API_BASE_URL", "http://localhost:8000")).rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def _handle_response(self, response: requests.Response) -> requests.Response:
        """Raise APIError for 4xx/5xx, surfacing the server's `error` field"""
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                message = body.get("error") or str(body.get("detail", response.text))
            else:
                message = response.text
            raise APIError(response.status_code, message)
        return response

    def _get(self, path: str) -> requests.Response:
        return self.session.get(f"{self.base_url}{path}", timeout=self.timeout)

    # ========================================
    # HEALTH
    # ========================================
    def get_health(self) -> Dict:
        """Get backend health; a degraded 503 body is returned, not raised"""
        response = self._get("/health")
        data = response.json()
        if "detail" in data and isinstance(data["detail"], dict):
            return data["detail"]
        return data

    # ========================================
    # INDUSTRY REPORTS
    # ========================================
    def get_report(self, vertical: str) -> Dict:
        """Get the report for one vertical (see REPORT_ROUTES)"""
        try:
            route = REPORT_ROUTES[vertical]
        except KeyError:
            raise ValueError(f"Unknown vertical: {vertical!r}") from None
        return self._handle_response(self._get(route)).json()

    def get_car_production(self) -> Dict:
        return self.get_report("automotive")

    def get_aerospace(self) -> Dict:
        return self.get_report("aerospace")

    def get_fertilizer(self) -> Dict:
        return self.get_report("fertilizer")

    def get_stainless_steel(self) -> Dict:
        return self.get_report("stainless_steel")
