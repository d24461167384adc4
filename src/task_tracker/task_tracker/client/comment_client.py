from __future__ import annotations

import logging
from typing import Any, Optional

from .base import ApiClient, ApiError, require_client_tenant

LOG = logging.getLogger(__name__)


class AuthClient:
    def __init__(self, api: ApiClient):
        self._api = api

    def login(self, subdomain: str, username: str, password: str) -> dict:
        """Log in and keep the returned token on the underlying client."""
        data = self._api.request(
            "POST",
            "/auth/login",
            json={"subdomain": subdomain, "username": username, "password": password},
        )
        self._api.set_token(data.get("token"))
        return data

    def me(self) -> dict:
        return self._api.request("GET", "/auth/me")


class CommentClient:
    """One method per ``/comments`` endpoint; returns decoded JSON."""

    def __init__(self, api: ApiClient):
        self._api = api

    def get_all_comments(self, subdomain: Optional[str]) -> list[dict]:
        subdomain = require_client_tenant(subdomain, "Subdomain is missing, check the URL")
        return self._api.request("GET", f"/comments/{subdomain}")

    def get_my_comments(self) -> list[dict]:
        return self._api.request("GET", "/comments/me")

    def get_worker_comments(self, worker_id: int) -> list[dict]:
        return self._api.request("GET", f"/comments/worker/{int(worker_id)}")

    def create_comment(self, *, text: str, subdomain: str, attachment: Optional[dict] = None) -> dict:
        payload: dict[str, Any] = {"text": text, "subdomain": subdomain}
        if attachment:
            payload["attachment"] = attachment
        return self._api.request("POST", "/comments", json=payload)

    def add_reply(self, comment_id: int, text: str) -> dict:
        return self._api.request("POST", f"/comments/{int(comment_id)}/replies", json={"text": text})

    def mark_comment_as_read(self, comment_id: int) -> dict:
        return self._api.request("PUT", f"/comments/{int(comment_id)}/read")

    def get_unread_admin_replies(self) -> list[dict]:
        # Badge data only: failures degrade to "nothing unread".
        try:
            return self._api.request("GET", "/comments/unread-admin-replies")
        except ApiError as e:
            LOG.warning("Failed to fetch unread admin replies: %s", e)
            return []

    def mark_admin_replies_as_read(self) -> dict:
        return self._api.request("PUT", "/comments/mark-admin-replies-read")

    def mark_comment_admin_replies_as_read(self, comment_id: int) -> dict:
        return self._api.request("PUT", f"/comments/{int(comment_id)}/mark-admin-replies-read")
