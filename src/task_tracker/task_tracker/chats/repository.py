from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import ChatGroup


class ChatRepository(Protocol):
    """Server-side inbox state: read cursors, hidden chats and chat groups."""

    # Read cursors
    def get_read_cursors(self, *, subdomain: str, reader_id: int) -> dict[int, datetime]:
        raise NotImplementedError

    def set_read_cursors(
        self,
        *,
        subdomain: str,
        reader_id: int,
        worker_ids: Sequence[int],
        at: datetime,
    ) -> None:
        raise NotImplementedError

    # Hidden chats
    def list_hidden_workers(self, *, subdomain: str) -> set[int]:
        raise NotImplementedError

    def hide_workers(self, *, subdomain: str, worker_ids: Sequence[int], at: datetime) -> None:
        raise NotImplementedError

    def unhide_worker(self, *, subdomain: str, worker_id: int) -> bool:
        raise NotImplementedError

    # Groups
    def list_groups(self, *, subdomain: str) -> Sequence[ChatGroup]:
        raise NotImplementedError

    def create_group(
        self,
        *,
        subdomain: str,
        name: str,
        member_ids: Sequence[int],
        created_by: int,
        at: datetime,
    ) -> int:
        raise NotImplementedError

    def delete_group(self, *, subdomain: str, group_id: int) -> bool:
        raise NotImplementedError
