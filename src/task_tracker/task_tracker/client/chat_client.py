from __future__ import annotations

from typing import Iterable, Optional

from .base import ApiClient, require_client_tenant

MISSING_SUBDOMAIN = "Subdomain is missing, check the URL"


class AdminChatClient:
    """Client for the admin inbox under ``/chats/<subdomain>``."""

    def __init__(self, api: ApiClient, subdomain: Optional[str]):
        self._api = api
        self._prefix = f"/chats/{require_client_tenant(subdomain, MISSING_SUBDOMAIN)}"

    def list_chats(self, chat_filter: str = "All", search: str = "") -> list[dict]:
        params = {"filter": chat_filter}
        if search:
            params["search"] = search
        return self._api.request("GET", self._prefix, params=params)

    def read_all(self) -> dict:
        return self._api.request("PUT", f"{self._prefix}/read-all")

    def get_messages(self, worker_id: int) -> list[dict]:
        return self._api.request("GET", f"{self._prefix}/workers/{int(worker_id)}/messages")

    def reply(self, worker_id: int, text: str) -> dict:
        return self._api.request("POST", f"{self._prefix}/workers/{int(worker_id)}/replies", json={"text": text})

    def mark_read(self, worker_id: int) -> dict:
        return self._api.request("PUT", f"{self._prefix}/workers/{int(worker_id)}/read")

    def hide(self, worker_ids: Iterable[int]) -> dict:
        return self._api.request("POST", f"{self._prefix}/hidden", json={"worker_ids": [int(w) for w in worker_ids]})

    def unhide(self, worker_id: int) -> dict:
        return self._api.request("DELETE", f"{self._prefix}/hidden/{int(worker_id)}")

    def create_group(self, name: str, member_ids: Iterable[int]) -> dict:
        return self._api.request(
            "POST",
            f"{self._prefix}/groups",
            json={"name": name, "member_ids": [int(m) for m in member_ids]},
        )

    def delete_group(self, group_id: int) -> dict:
        return self._api.request("DELETE", f"{self._prefix}/groups/{int(group_id)}")
