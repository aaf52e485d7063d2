"""Base HTTP Client for the Jobs API"""

from typing import Any

import httpx


class JobsAPIError(Exception):
    """Raised for non-2xx responses and transport failures.

    ``status`` is the HTTP status (None when the request never completed) and
    ``problem`` the problem-detail body the server returned, if any.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        problem: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.problem = problem or {}


class APIClient:
    """HTTP client for the Jobs API"""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 30,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.default_headers = headers or {}
        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers=self.default_headers,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.client.close()

    def _handle_response(self, response: httpx.Response) -> Any:
        """Decode a response body, raising JobsAPIError on failure"""
        try:
            data = response.json()
        except ValueError:
            raise JobsAPIError(
                f"Invalid JSON response: {response.status_code}",
                status=response.status_code,
            ) from None

        if response.is_error:
            problem = data if isinstance(data, dict) else {}
            raise JobsAPIError(
                problem.get("detail") or "API Error",
                status=response.status_code,
                problem=problem,
            )

        return data

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = self.client.request(method, path, json=json, headers=headers)
        except httpx.RequestError as e:
            raise JobsAPIError(f"Connection failed: {e}") from e
        return self._handle_response(response)

    def get(self, path: str, headers: dict[str, str] | None = None) -> Any:
        """Make GET request"""
        return self.request("GET", path, headers=headers)

    def post(
        self, path: str, json: Any = None, headers: dict[str, str] | None = None
    ) -> Any:
        """Make POST request"""
        return self.request("POST", path, json=json, headers=headers)
