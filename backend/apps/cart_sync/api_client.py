from typing import Any, Optional

import requests

from apps.common import get_logger

logger = get_logger(__name__).bind(component="cart_sync", layer="api_client")


class ApiError(requests.HTTPError):
    """Non-2xx answer from the storefront API."""

    def __init__(self, status_code: int, payload: Any = None, response=None):
        super().__init__(f"API request failed with status {status_code}", response=response)
        self.status_code = status_code
        self.payload = payload


class ApiClient:
    """
    JSON client for the storefront API.

    ``include_credentials`` decides whether requests go through the client's
    own ``requests.Session`` so the http-only auth cookies set by the login
    endpoint are sent back. With it off every request uses a throwaway
    session and no cookies travel.
    """

    def __init__(
        self,
        base_url: str,
        include_credentials: bool = True,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.include_credentials = include_credentials
        self.session = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, payload: Any = None):
        if self.include_credentials:
            return self.session.request(method, self.url(path), json=payload)
        with requests.Session() as anonymous:
            return anonymous.request(method, self.url(path), json=payload)

    @staticmethod
    def _decode(response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    def request(self, method: str, path: str, payload: Any = None) -> Any:
        """Send one request and return the decoded JSON body; raises ``ApiError`` for 4xx/5xx."""
        response = self._send(method, path, payload)
        body = self._decode(response)
        if response.status_code >= 400:
            logger.debug(
                "API request failed",
                method=method,
                path=path,
                status=response.status_code,
            )
            raise ApiError(response.status_code, body, response=response)
        return body

    def get(self, path: str) -> Any:
        return self.request("GET", path)

    def post(self, path: str, payload: Any = None) -> Any:
        return self.request("POST", path, payload)

    def patch(self, path: str, payload: Any = None) -> Any:
        return self.request("PATCH", path, payload)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
