"""Thin ``requests`` wrapper shared by the task tracker API clients."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..core.constants import DEFAULT_CLIENT_TIMEOUT_SECONDS, RESERVED_SUBDOMAIN

LOG = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised on transport failures and non-2xx responses."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiClient:
    """Bearer-token JSON client; every call is a single request without retries."""

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = DEFAULT_CLIENT_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})
        self.set_token(token)

    def set_token(self, token: Optional[str]) -> None:
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"
        else:
            self._session.headers.pop("Authorization", None)

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            LOG.error("%s %s failed: %s", method, path, e)
            raise ApiError(f"Request failed: {e}") from e

        if resp.status_code >= 400:
            msg = resp.text or f"HTTP {resp.status_code}"
            try:
                data = resp.json()
                if isinstance(data, dict) and data.get("message"):
                    msg = data["message"]
            except ValueError:
                pass
            LOG.warning("%s %s returned %s: %s", method, path, resp.status_code, msg)
            raise ApiError(msg, resp.status_code)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError("Invalid JSON in response", resp.status_code) from e


def require_client_tenant(subdomain: Optional[str], message: str) -> str:
    """Reject a missing or reserved subdomain before any request is sent."""
    if not subdomain or subdomain == RESERVED_SUBDOMAIN:
        raise ApiError(message)
    return subdomain
